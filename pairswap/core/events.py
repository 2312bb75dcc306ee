"""Event records emitted by pairs and the factory.

All events are frozen dataclasses appended to the emitter's ``events`` list.
Events emitted during an operation that later fails are discarded together
with the rest of that operation's effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Union

from ..state.balances import Address, Amount


@unique
class EventKind(Enum):
    SYNC = "Sync"
    MINT = "Mint"
    BURN = "Burn"
    SWAP = "Swap"
    PAIR_CREATED = "PairCreated"


@dataclass(frozen=True)
class Sync:
    reserve_a: Amount
    reserve_b: Amount

    kind = EventKind.SYNC


@dataclass(frozen=True)
class Mint:
    sender: Address
    amount_a: Amount
    amount_b: Amount

    kind = EventKind.MINT


@dataclass(frozen=True)
class Burn:
    sender: Address
    amount_a: Amount
    amount_b: Amount
    to: Address

    kind = EventKind.BURN


@dataclass(frozen=True)
class Swap:
    sender: Address
    amount_a_in: Amount
    amount_b_in: Amount
    amount_a_out: Amount
    amount_b_out: Amount
    to: Address

    kind = EventKind.SWAP


@dataclass(frozen=True)
class PairCreated:
    asset_a: Address
    asset_b: Address
    pair: Address
    index: int

    kind = EventKind.PAIR_CREATED


PairEvent = Union[Sync, Mint, Burn, Swap]
