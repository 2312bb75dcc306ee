"""
Time-weighted price accumulator kernel.

Each pair keeps two running sums, one per direction, of the UQ112x112 spot
price multiplied by the seconds it was in effect:

    price_a_cumulative += (reserve_b / reserve_a) * elapsed
    price_b_cumulative += (reserve_a / reserve_b) * elapsed

Both sums wrap modulo 2**256 and the timestamp wraps modulo 2**32. Consumers
only ever look at *differences* between two samples, computed with the same
wrapping arithmetic, so wraparound is harmless.

The functional core here is pure; `observe` is the only helper that reads a
live pair (without mutating it).
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import TYPE_CHECKING, Protocol, Tuple

from ..kernels.python.fixed_point import (
    UINT32_BITS,
    UINT224_BITS,
    UINT256_BITS,
    require_uint,
    truncate,
    wrapping_add,
    wrapping_mul,
    wrapping_sub,
)
from ..kernels.python.uq112x112 import decode, encode, uqdiv

if TYPE_CHECKING:
    from .reserves import Reserves


@dataclass(frozen=True)
class CumulativePrices:
    """The pair's two price accumulators (uint256, wrapping)."""

    price_a: int = 0
    price_b: int = 0

    def __post_init__(self) -> None:
        require_uint(self.price_a, UINT256_BITS, name="price_a")
        require_uint(self.price_b, UINT256_BITS, name="price_b")


@dataclass(frozen=True)
class PriceObservation:
    """A sample of both accumulators at a (truncated) timestamp."""

    timestamp: int
    price_a_cumulative: int
    price_b_cumulative: int


class ObservablePair(Protocol):
    """The read-only view of a pair that `observe` needs."""

    @property
    def price_a_cumulative_last(self) -> int: ...

    @property
    def price_b_cumulative_last(self) -> int: ...

    def get_reserves(self) -> Reserves: ...


def current_block_timestamp(now: int) -> int:
    """Wall-clock seconds truncated to uint32."""
    return truncate(int(now), UINT32_BITS)


def elapsed_seconds(now_truncated: int, last: int) -> int:
    """
    Seconds between two uint32 timestamps.

    Subtraction wraps, so a sample taken after the 2**32 boundary still yields a
    small positive interval. The result is always in ``[0, 2**32)``.
    """
    return wrapping_sub(now_truncated, last, UINT32_BITS)


def accumulate(cumulative: int, reserve_num: int, reserve_den: int, elapsed: int) -> int:
    """``cumulative + uqdiv(encode(reserve_num), reserve_den) * elapsed`` modulo 2**256."""
    price = uqdiv(encode(reserve_num), reserve_den)
    return wrapping_add(cumulative, wrapping_mul(price, elapsed, UINT256_BITS), UINT256_BITS)


def advance(cumulative: CumulativePrices, reserve_a: int, reserve_b: int, elapsed: int) -> CumulativePrices:
    """
    Advance both accumulators by `elapsed` seconds at the given reserves.

    No-op when no time has passed or either reserve is empty (the price is
    undefined then).
    """
    if elapsed <= 0 or reserve_a == 0 or reserve_b == 0:
        return cumulative
    return CumulativePrices(
        price_a=accumulate(cumulative.price_a, reserve_b, reserve_a, elapsed),
        price_b=accumulate(cumulative.price_b, reserve_a, reserve_b, elapsed),
    )


def observe(pair: ObservablePair, now: int) -> PriceObservation:
    """
    Counterfactual accumulators for `pair` as if it had synced at `now`.

    Lets a reader take a sample without paying for (or being able to trigger) a
    state change on the pair.
    """
    reserves = pair.get_reserves()
    block_timestamp = current_block_timestamp(now)
    cumulative = CumulativePrices(pair.price_a_cumulative_last, pair.price_b_cumulative_last)
    if reserves.block_timestamp_last != block_timestamp:
        elapsed = elapsed_seconds(block_timestamp, reserves.block_timestamp_last)
        cumulative = advance(cumulative, reserves.reserve_a, reserves.reserve_b, elapsed)
    return PriceObservation(
        timestamp=block_timestamp,
        price_a_cumulative=cumulative.price_a,
        price_b_cumulative=cumulative.price_b,
    )


def average_price(cumulative_start: int, cumulative_end: int, elapsed: int) -> int:
    """UQ112x112 average price between two samples of one accumulator."""
    if elapsed <= 0:
        raise ValueError(f"elapsed must be positive: {elapsed}")
    delta = wrapping_sub(cumulative_end, cumulative_start, UINT256_BITS)
    return truncate(delta // elapsed, UINT224_BITS)


def twap(older: PriceObservation, newer: PriceObservation) -> Tuple[int, int]:
    """
    Time-weighted average prices (price_a, price_b) between two observations.

    Both results are UQ112x112. Raises ValueError if the observations share a
    timestamp.
    """
    elapsed = elapsed_seconds(newer.timestamp, older.timestamp)
    return (
        average_price(older.price_a_cumulative, newer.price_a_cumulative, elapsed),
        average_price(older.price_b_cumulative, newer.price_b_cumulative, elapsed),
    )


def consult(average: int, amount_in: int) -> int:
    """Convert `amount_in` at a UQ112x112 average price, rounding down."""
    require_uint(amount_in, UINT256_BITS, name="amount_in")
    return (average * amount_in) >> 112


def price_to_fraction(average: int) -> Fraction:
    return decode(average)
