"""
Reserve ledger: the single choke point for reserve mutations.

`Reserves` packs both uint112 reserves and the uint32 timestamp of the last
update into one immutable value. The pair replaces it with a single
assignment, so a reader can never observe reserves from one update paired with
a timestamp from another.

`sync_to` is pure: it computes the next (reserves, accumulators) from the
current ones and the pair's freshly read balances.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ReserveOverflowError
from ..kernels.python.fixed_point import MAX_UINT112, UINT32_BITS, UINT112_BITS, require_uint
from .oracle import CumulativePrices, advance, current_block_timestamp, elapsed_seconds


@dataclass(frozen=True)
class Reserves:
    reserve_a: int = 0
    reserve_b: int = 0
    block_timestamp_last: int = 0

    def __post_init__(self) -> None:
        require_uint(self.reserve_a, UINT112_BITS, name="reserve_a")
        require_uint(self.reserve_b, UINT112_BITS, name="reserve_b")
        require_uint(self.block_timestamp_last, UINT32_BITS, name="block_timestamp_last")

    @property
    def k(self) -> int:
        return self.reserve_a * self.reserve_b

    def as_tuple(self) -> tuple[int, int, int]:
        return self.reserve_a, self.reserve_b, self.block_timestamp_last


@dataclass(frozen=True)
class SyncResult:
    reserves: Reserves
    cumulative: CumulativePrices
    elapsed: int


def sync_to(
    *,
    current: Reserves,
    cumulative: CumulativePrices,
    balance_a: int,
    balance_b: int,
    prior_reserve_a: int,
    prior_reserve_b: int,
    now: int,
) -> SyncResult:
    """
    Compute the ledger state after recording `balance_a`/`balance_b` as reserves.

    - Balances above uint112 are rejected (`ReserveOverflowError`).
    - Elapsed time since the last update is taken modulo 2**32.
    - Accumulators advance at the *prior* reserves, only if time has passed and
      both prior reserves are non-zero.
    - Reserves and timestamp are always overwritten.

    `prior_reserve_*` must be the reserves captured at the start of the calling
    operation, before any transfers.
    """
    if balance_a > MAX_UINT112 or balance_b > MAX_UINT112:
        raise ReserveOverflowError(f"balances ({balance_a}, {balance_b}) exceed uint112")
    block_timestamp = current_block_timestamp(now)
    elapsed = elapsed_seconds(block_timestamp, current.block_timestamp_last)
    next_cumulative = advance(cumulative, prior_reserve_a, prior_reserve_b, elapsed)
    return SyncResult(
        reserves=Reserves(reserve_a=balance_a, reserve_b=balance_b, block_timestamp_last=block_timestamp),
        cumulative=next_cumulative,
        elapsed=elapsed,
    )
