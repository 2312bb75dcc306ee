# [TESTER] v1

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

import pytest

from pairswap.core.oracle import (
    CumulativePrices,
    ObservablePair,
    accumulate,
    advance,
    average_price,
    consult,
    elapsed_seconds,
    observe,
    price_to_fraction,
    twap,
)
from pairswap.core.reserves import Reserves, sync_to
from pairswap.errors import ReserveOverflowError
from pairswap.kernels.python.fixed_point import MAX_UINT112, MAX_UINT256
from pairswap.kernels.python.uq112x112 import Q112

ALICE = "0x" + "a1" * 20


def test_accumulators_advance_at_prior_reserves(world) -> None:
    world.deposit(ALICE, 1000, 4000)
    assert (world.pair.price_a_cumulative_last, world.pair.price_b_cumulative_last) == (0, 0)

    world.clock.advance(10)
    world.pay_in(world.token_a, ALICE, 1000)
    world.pair.sync()

    # the 10 seconds are priced at the reserves that were in effect: (1000, 4000)
    assert world.pair.price_a_cumulative_last == 4 * Q112 * 10
    assert world.pair.price_b_cumulative_last == (Q112 // 4) * 10
    assert world.pair.get_reserves().block_timestamp_last == world.clock.now


def test_no_accumulation_within_the_same_second(world) -> None:
    world.deposit(ALICE, 1000, 4000)
    world.pay_in(world.token_a, ALICE, 1000)
    world.pair.sync()
    assert world.pair.price_a_cumulative_last == 0


def test_timestamp_wraps_at_32_bits(world_builder) -> None:
    w = world_builder(now=(1 << 32) - 5)
    w.deposit(ALICE, 1000, 4000)
    assert w.pair.get_reserves().block_timestamp_last == (1 << 32) - 5

    w.clock.advance(10)
    w.pair.sync()

    assert w.pair.get_reserves().block_timestamp_last == 5
    assert w.pair.price_a_cumulative_last == 4 * Q112 * 10


def test_observe_is_counterfactual_and_feeds_twap(world) -> None:
    world.deposit(ALICE, 1000, 4000)
    t0 = world.clock.now
    events_before = list(world.pair.events)

    first = observe(world.pair, t0)
    second = observe(world.pair, t0 + 100)

    assert first.price_a_cumulative == 0
    assert second.price_a_cumulative == 400 * Q112
    assert world.pair.events == events_before
    assert world.pair.price_a_cumulative_last == 0

    price_a, price_b = twap(first, second)
    assert price_to_fraction(price_a) == Fraction(4)
    assert price_to_fraction(price_b) == Fraction(1, 4)
    assert consult(price_a, 10) == 40
    assert consult(price_b, 10) == 2


def test_twap_across_timestamp_wrap(world_builder) -> None:
    w = world_builder(now=(1 << 32) - 5)
    w.deposit(ALICE, 1000, 4000)
    older = observe(w.pair, (1 << 32) - 5)
    newer = observe(w.pair, (1 << 32) + 5)

    assert newer.timestamp == 5
    assert twap(older, newer)[0] == 4 * Q112


def test_twap_needs_distinct_timestamps(world) -> None:
    world.deposit(ALICE, 1000, 4000)
    sample = observe(world.pair, world.clock.now)
    with pytest.raises(ValueError, match="elapsed"):
        twap(sample, sample)


def test_accumulator_wraps_at_256_bits() -> None:
    assert accumulate(MAX_UINT256, 1, 1, 1) == Q112 - 1
    # deltas are taken modulo 2**256 too
    assert average_price((1 << 256) - Q112, Q112, 2) == Q112


def test_advance_skips_empty_reserves_and_zero_elapsed() -> None:
    start = CumulativePrices(7, 9)
    assert advance(start, 0, 100, 10) == start
    assert advance(start, 100, 0, 10) == start
    assert advance(start, 100, 100, 0) == start


def test_elapsed_seconds_is_modular() -> None:
    assert elapsed_seconds(5, (1 << 32) - 5) == 10
    assert elapsed_seconds(20, 10) == 10


def test_sync_to_rejects_oversized_balances() -> None:
    with pytest.raises(ReserveOverflowError):
        sync_to(
            current=Reserves(),
            cumulative=CumulativePrices(),
            balance_a=MAX_UINT112 + 1,
            balance_b=1,
            prior_reserve_a=0,
            prior_reserve_b=0,
            now=100,
        )


def test_sync_to_reports_elapsed_time() -> None:
    result = sync_to(
        current=Reserves(10, 20, 100),
        cumulative=CumulativePrices(),
        balance_a=11,
        balance_b=20,
        prior_reserve_a=10,
        prior_reserve_b=20,
        now=103,
    )
    assert result.elapsed == 3
    assert result.reserves == Reserves(11, 20, 103)
    assert result.cumulative.price_a == 2 * Q112 * 3


@dataclass
class _PairView:
    reserves: Reserves
    price_a_cumulative_last: int = 0
    price_b_cumulative_last: int = 0

    def get_reserves(self) -> Reserves:
        return self.reserves


def test_observe_accepts_any_pair_view() -> None:
    view: ObservablePair = _PairView(Reserves(1000, 4000, 10))
    sample = observe(view, 20)
    assert sample.timestamp == 20
    assert sample.price_a_cumulative == 40 * Q112
    assert sample.price_b_cumulative == 10 * (Q112 // 4)
