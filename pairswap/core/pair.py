"""
A constant-product liquidity pair.

`Pair` is the imperative shell around the pure kernels in this package:

- `cpmm.py`     share mint/burn amounts, the fee-adjusted swap invariant
- `fees.py`     protocol fee accrual on mint/burn
- `reserves.py` reserve + accumulator updates (`sync_to`)

Every mutating entry point (`mint`, `burn`, `swap`, `skim`, `sync`) runs inside
`_transaction`, which

1. takes the reentrancy latch (a second entry fails with `ReentrancyError`),
2. opens a frame on the shared undo journal and records the pair's scalars,
3. on any exception rolls the frame back, releases the latch, re-raises.

Assets, share ledgers and factories journal their own changes, so a rollback
also reaches every other pair or asset touched from a flash callback, even
one belonging to another factory. A failed operation is never partially
observable.

Liquidity flows follow the "transfer first, then call" pattern: callers move
assets (or shares, for `burn`) to the pair's address and then invoke the
operation, which infers amounts from the pair's balances.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Iterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

from ..errors import (
    AlreadyInitializedError,
    ForbiddenCallerError,
    InsufficientLiquidityError,
    InvalidRecipientError,
    NoInputProvidedError,
    NoOutputRequestedError,
    NotInitializedError,
    ReentrancyError,
)
from ..kernels.python.fixed_point import UINT256_BITS, require_uint, sub
from ..state.assets import Asset, safe_transfer
from ..state.balances import ZERO_ADDRESS, Address, Amount
from ..state.canonical import canonical_address
from ..state.journal import Journal, JournalMark
from ..state.lp import LedgerSnapshot, LiquidityShareLedger
from .address import sort_assets
from .cpmm import (
    MINIMUM_LIQUIDITY,
    check_swap_invariant,
    compute_burn_amounts,
    compute_liquidity_minted,
    implied_input,
)
from .events import Burn, Mint, PairEvent, Swap, Sync
from .fees import accrue_fee
from .oracle import CumulativePrices
from .reserves import Reserves, sync_to

logger = logging.getLogger(__name__)


@runtime_checkable
class FlashBorrower(Protocol):
    """Recipient capability for flash swaps: called after the optimistic transfer."""

    address: Address

    def on_flash_swap(self, sender: Address, amount_a: Amount, amount_b: Amount, data: bytes) -> None: ...


class PairHost(Protocol):
    """What a pair needs from the factory that created it."""

    address: Address
    journal: Journal

    @property
    def fee_to(self) -> Address: ...

    def now(self) -> int: ...

    def checkpoint(self) -> JournalMark: ...

    def commit(self, mark: JournalMark) -> None: ...

    def rollback(self, mark: JournalMark) -> None: ...


Recipient = Union[Address, FlashBorrower]


@dataclass(frozen=True)
class PairSnapshot:
    reserves: Reserves
    cumulative: CumulativePrices
    k_last: int
    shares: LedgerSnapshot
    event_count: int


def _resolve_recipient(to: Recipient) -> Tuple[Address, Optional[FlashBorrower]]:
    if isinstance(to, str):
        return canonical_address(to, name="to"), None
    if isinstance(to, FlashBorrower):
        return canonical_address(to.address, name="to"), to
    raise TypeError(f"recipient must be an address or a FlashBorrower, got {type(to).__name__}")


class Pair:
    """
    Reserve ledger, share ledger and swap engine for one asset pair.

    Attributes:
        address: The pair's own address (where it holds assets and burnable shares)
        k_last: reserve_a * reserve_b right after the last mint/burn while the protocol fee is on
        shares: The liquidity-share ledger
        events: Events emitted by successful operations, oldest first
    """

    def __init__(
        self,
        address: Address,
        host: PairHost,
        *,
        minimum_liquidity: int = MINIMUM_LIQUIDITY,
    ) -> None:
        self.address = canonical_address(address, name="pair address")
        self._host = host
        self._creator = canonical_address(host.address, name="creator")
        self._minimum_liquidity = minimum_liquidity
        self._asset_a: Optional[Asset] = None
        self._asset_b: Optional[Asset] = None
        self._reserves = Reserves()
        self._cumulative = CumulativePrices()
        self.k_last = 0
        self.shares = LiquidityShareLedger(host.journal)
        self.events: List[PairEvent] = []
        self._unlocked = True

    # -- lifecycle --------------------------------------------------------------

    def initialize(self, caller: Address, asset_a: Asset, asset_b: Asset) -> None:
        """Bind the pair to its two assets; only the creator may call this, once."""
        if canonical_address(caller, name="caller") != self._creator:
            raise ForbiddenCallerError(f"{caller} is not the creator of pair {self.address}")
        if self._asset_a is not None:
            raise AlreadyInitializedError(f"pair {self.address} is already initialized")
        ordered = sort_assets(asset_a.address, asset_b.address)
        if ordered != (canonical_address(asset_a.address), canonical_address(asset_b.address)):
            raise ValueError(f"assets must be in canonical order: {ordered}")
        self._asset_a = asset_a
        self._asset_b = asset_b
        logger.info("pair %s initialized with assets (%s, %s)", self.address, ordered[0], ordered[1])

    # -- views ------------------------------------------------------------------

    @property
    def asset_a(self) -> Asset:
        if self._asset_a is None:
            raise NotInitializedError(f"pair {self.address} has no assets yet")
        return self._asset_a

    @property
    def asset_b(self) -> Asset:
        if self._asset_b is None:
            raise NotInitializedError(f"pair {self.address} has no assets yet")
        return self._asset_b

    @property
    def factory(self) -> PairHost:
        return self._host

    @property
    def is_locked(self) -> bool:
        return not self._unlocked

    def get_reserves(self) -> Reserves:
        return self._reserves

    @property
    def price_a_cumulative_last(self) -> int:
        return self._cumulative.price_a

    @property
    def price_b_cumulative_last(self) -> int:
        return self._cumulative.price_b

    @property
    def total_supply(self) -> Amount:
        return self.shares.total_supply

    def balance_of(self, holder: Address) -> Amount:
        return self.shares.balance_of(canonical_address(holder, name="holder"))

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        """Move liquidity shares between holders (e.g. into the pair ahead of `burn`)."""
        return self.shares.transfer(
            canonical_address(sender, name="sender"), canonical_address(to, name="to"), amount
        )

    def snapshot(self) -> PairSnapshot:
        """Full copy of the pair's state, for comparison and inspection."""
        return PairSnapshot(
            reserves=self._reserves,
            cumulative=self._cumulative,
            k_last=self.k_last,
            shares=self.shares.snapshot(),
            event_count=len(self.events),
        )

    def _reset_scalars(
        self, reserves: Reserves, cumulative: CumulativePrices, k_last: int, event_count: int
    ) -> None:
        self._reserves = reserves
        self._cumulative = cumulative
        self.k_last = k_last
        del self.events[event_count:]

    # -- guards -----------------------------------------------------------------

    @contextmanager
    def _lock(self) -> Iterator[None]:
        if not self._unlocked:
            raise ReentrancyError(f"pair {self.address} is locked")
        self._unlocked = False
        try:
            yield
        finally:
            self._unlocked = True

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        with self._lock():
            if self._asset_a is None:
                raise NotInitializedError(f"pair {self.address} has no assets yet")
            mark = self._host.checkpoint()
            self._host.journal.record(
                partial(self._reset_scalars, self._reserves, self._cumulative, self.k_last, len(self.events))
            )
            try:
                yield
            except BaseException as exc:
                self._host.rollback(mark)
                logger.warning("pair %s %s reverted: %s", self.address, operation, exc)
                raise
            self._host.commit(mark)

    # -- internals --------------------------------------------------------------

    def _emit(self, event: PairEvent) -> None:
        self.events.append(event)

    def _balances(self) -> Tuple[Amount, Amount]:
        return self.asset_a.balance_of(self.address), self.asset_b.balance_of(self.address)

    def _update(self, balance_a: Amount, balance_b: Amount, prior_reserve_a: Amount, prior_reserve_b: Amount) -> None:
        result = sync_to(
            current=self._reserves,
            cumulative=self._cumulative,
            balance_a=balance_a,
            balance_b=balance_b,
            prior_reserve_a=prior_reserve_a,
            prior_reserve_b=prior_reserve_b,
            now=self._host.now(),
        )
        self._reserves = result.reserves
        self._cumulative = result.cumulative
        self._emit(Sync(reserve_a=result.reserves.reserve_a, reserve_b=result.reserves.reserve_b))

    def _mint_fee(self, prior_reserve_a: Amount, prior_reserve_b: Amount) -> bool:
        accrual = accrue_fee(
            fee_to=self._host.fee_to,
            total_supply=self.shares.total_supply,
            prior_reserve_a=prior_reserve_a,
            prior_reserve_b=prior_reserve_b,
            k_last=self.k_last,
        )
        if accrual.liquidity > 0:
            self.shares.mint(accrual.fee_to, accrual.liquidity)
            logger.info("pair %s minted %d protocol fee shares to %s", self.address, accrual.liquidity, accrual.fee_to)
        self.k_last = accrual.k_last
        return accrual.fee_on

    # -- operations -------------------------------------------------------------

    def mint(self, to: Address, *, sender: Optional[Address] = None) -> Amount:
        """
        Issue shares for assets already transferred to the pair.

        The deposit is the excess of held balances over recorded reserves.

        Returns:
            Shares minted to `to`

        Raises:
            InsufficientLiquidityMintedError: If the deposit is worth no shares
        """
        to = canonical_address(to, name="to")
        with self._transaction("mint"):
            reserves = self._reserves
            balance_a, balance_b = self._balances()
            amount_a = sub(balance_a, reserves.reserve_a)
            amount_b = sub(balance_b, reserves.reserve_b)

            fee_on = self._mint_fee(reserves.reserve_a, reserves.reserve_b)
            total_supply = self.shares.total_supply
            liquidity = compute_liquidity_minted(
                amount_a=amount_a,
                amount_b=amount_b,
                reserve_a=reserves.reserve_a,
                reserve_b=reserves.reserve_b,
                total_supply=total_supply,
                minimum_liquidity=self._minimum_liquidity,
            )
            if total_supply == 0:
                self.shares.mint(ZERO_ADDRESS, self._minimum_liquidity)
            self.shares.mint(to, liquidity)

            self._update(balance_a, balance_b, reserves.reserve_a, reserves.reserve_b)
            if fee_on:
                self.k_last = self._reserves.k
            self._emit(Mint(sender=sender or to, amount_a=amount_a, amount_b=amount_b))
            logger.debug("pair %s mint: deposit=(%d, %d) shares=%d to=%s", self.address, amount_a, amount_b, liquidity, to)
        return liquidity

    def burn(self, to: Address, *, sender: Optional[Address] = None) -> Tuple[Amount, Amount]:
        """
        Redeem every share the pair holds for a pro-rata slice of its balances.

        Returns:
            (amount_a, amount_b) sent to `to`

        Raises:
            InsufficientLiquidityBurnedError: If either amount rounds to zero
        """
        to = canonical_address(to, name="to")
        with self._transaction("burn"):
            reserves = self._reserves
            balance_a, balance_b = self._balances()
            liquidity = self.shares.balance_of(self.address)

            fee_on = self._mint_fee(reserves.reserve_a, reserves.reserve_b)
            amount_a, amount_b = compute_burn_amounts(
                liquidity=liquidity,
                balance_a=balance_a,
                balance_b=balance_b,
                total_supply=self.shares.total_supply,
            )
            self.shares.burn(self.address, liquidity)
            safe_transfer(self.asset_a, self.address, to, amount_a)
            safe_transfer(self.asset_b, self.address, to, amount_b)

            balance_a, balance_b = self._balances()
            self._update(balance_a, balance_b, reserves.reserve_a, reserves.reserve_b)
            if fee_on:
                self.k_last = self._reserves.k
            self._emit(Burn(sender=sender or to, amount_a=amount_a, amount_b=amount_b, to=to))
            logger.debug("pair %s burn: shares=%d out=(%d, %d) to=%s", self.address, liquidity, amount_a, amount_b, to)
        return amount_a, amount_b

    def swap(
        self,
        amount_a_out: Amount,
        amount_b_out: Amount,
        to: Recipient,
        data: bytes = b"",
        *,
        sender: Optional[Address] = None,
    ) -> Swap:
        """
        Send the requested outputs to `to`, then verify they were paid for.

        Phase 1 transfers the outputs optimistically and, if `data` is
        non-empty, calls ``to.on_flash_swap(sender, amount_a_out, amount_b_out, data)``;
        the borrower may do anything with the assets as long as the pair holds
        enough by the time the callback returns. Phase 2 re-reads balances,
        infers the inputs and checks the fee-adjusted invariant.

        Raises:
            NoOutputRequestedError: Both outputs are zero
            InsufficientLiquidityError: An output is >= its reserve
            InvalidRecipientError: `to` is one of the pair's assets, or `data` is
                given for a recipient without a flash callback
            NoInputProvidedError: Nothing was paid in
            InvariantViolationError: The payment does not cover the trade plus fee
        """
        require_uint(amount_a_out, UINT256_BITS, name="amount_a_out")
        require_uint(amount_b_out, UINT256_BITS, name="amount_b_out")
        to_address, borrower = _resolve_recipient(to)
        initiator = canonical_address(sender, name="sender") if sender is not None else to_address

        with self._transaction("swap"):
            if amount_a_out == 0 and amount_b_out == 0:
                raise NoOutputRequestedError("swap requests no output")
            reserves = self._reserves
            if amount_a_out >= reserves.reserve_a or amount_b_out >= reserves.reserve_b:
                raise InsufficientLiquidityError(
                    f"outputs ({amount_a_out}, {amount_b_out}) exceed reserves "
                    f"({reserves.reserve_a}, {reserves.reserve_b})"
                )
            if to_address in (canonical_address(self.asset_a.address), canonical_address(self.asset_b.address)):
                raise InvalidRecipientError(f"recipient {to_address} is one of the pair's assets")

            if amount_a_out > 0:
                safe_transfer(self.asset_a, self.address, to_address, amount_a_out)
            if amount_b_out > 0:
                safe_transfer(self.asset_b, self.address, to_address, amount_b_out)
            if data:
                if borrower is None:
                    raise InvalidRecipientError(f"recipient {to_address} cannot receive a flash swap callback")
                borrower.on_flash_swap(initiator, amount_a_out, amount_b_out, bytes(data))

            balance_a, balance_b = self._balances()
            amount_a_in = implied_input(balance=balance_a, reserve=reserves.reserve_a, amount_out=amount_a_out)
            amount_b_in = implied_input(balance=balance_b, reserve=reserves.reserve_b, amount_out=amount_b_out)
            if amount_a_in == 0 and amount_b_in == 0:
                raise NoInputProvidedError("swap received no input")
            check_swap_invariant(
                balance_a=balance_a,
                balance_b=balance_b,
                amount_a_in=amount_a_in,
                amount_b_in=amount_b_in,
                reserve_a=reserves.reserve_a,
                reserve_b=reserves.reserve_b,
            )

            self._update(balance_a, balance_b, reserves.reserve_a, reserves.reserve_b)
            event = Swap(
                sender=initiator,
                amount_a_in=amount_a_in,
                amount_b_in=amount_b_in,
                amount_a_out=amount_a_out,
                amount_b_out=amount_b_out,
                to=to_address,
            )
            self._emit(event)
            logger.debug(
                "pair %s swap: in=(%d, %d) out=(%d, %d) to=%s",
                self.address, amount_a_in, amount_b_in, amount_a_out, amount_b_out, to_address,
            )
        return event

    def skim(self, to: Address) -> Tuple[Amount, Amount]:
        """Send any balance above the recorded reserves to `to`; reserves are unchanged."""
        to = canonical_address(to, name="to")
        with self._transaction("skim"):
            reserves = self._reserves
            balance_a, balance_b = self._balances()
            excess_a = sub(balance_a, reserves.reserve_a)
            excess_b = sub(balance_b, reserves.reserve_b)
            safe_transfer(self.asset_a, self.address, to, excess_a)
            safe_transfer(self.asset_b, self.address, to, excess_b)
        return excess_a, excess_b

    def sync(self) -> Reserves:
        """Force the recorded reserves to match the held balances."""
        with self._transaction("sync"):
            reserves = self._reserves
            balance_a, balance_b = self._balances()
            self._update(balance_a, balance_b, reserves.reserve_a, reserves.reserve_b)
        return self._reserves

    def __repr__(self) -> str:
        r = self._reserves
        return (
            f"Pair(address={self.address}, reserves=({r.reserve_a}, {r.reserve_b}), "
            f"total_supply={self.shares.total_supply}, k_last={self.k_last})"
        )

