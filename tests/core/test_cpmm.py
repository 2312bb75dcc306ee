# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.cpmm import (
    MINIMUM_LIQUIDITY,
    check_swap_invariant,
    compute_burn_amounts,
    compute_liquidity_minted,
    get_amount_in,
    get_amount_out,
    implied_input,
    quote,
)
from pairswap.core.fees import accrue_fee, compute_protocol_fee_liquidity
from pairswap.errors import (
    InsufficientAmountError,
    InsufficientInputAmountError,
    InsufficientLiquidityBurnedError,
    InsufficientLiquidityError,
    InsufficientLiquidityMintedError,
    InsufficientOutputAmountError,
    InvariantViolationError,
)
from pairswap.state.balances import ZERO_ADDRESS

FEE_SINK = "0x" + "fe" * 20


def test_first_mint_is_geometric_mean_minus_lock() -> None:
    lp = compute_liquidity_minted(amount_a=1000, amount_b=4000, reserve_a=0, reserve_b=0, total_supply=0)
    assert lp == 2000 - MINIMUM_LIQUIDITY


def test_first_mint_uses_integer_isqrt() -> None:
    # Pick values where float sqrt would be wrong due to precision loss.
    n = (1 << 70) + 12345
    lp = compute_liquidity_minted(amount_a=n, amount_b=n, reserve_a=0, reserve_b=0, total_supply=0)
    assert lp == n - MINIMUM_LIQUIDITY


def test_first_mint_at_the_lock_threshold_is_rejected() -> None:
    with pytest.raises(InsufficientLiquidityMintedError):
        compute_liquidity_minted(amount_a=1000, amount_b=1000, reserve_a=0, reserve_b=0, total_supply=0)


def test_lopsided_deposit_mints_the_smaller_side() -> None:
    lp = compute_liquidity_minted(amount_a=10, amount_b=50, reserve_a=100, reserve_b=200, total_supply=100)
    assert lp == 10


def test_dust_deposit_mints_nothing() -> None:
    with pytest.raises(InsufficientLiquidityMintedError):
        compute_liquidity_minted(amount_a=1, amount_b=0, reserve_a=100, reserve_b=100, total_supply=100)


def test_burn_amounts_use_held_balances() -> None:
    assert compute_burn_amounts(liquidity=50, balance_a=1000, balance_b=3000, total_supply=100) == (500, 1500)
    with pytest.raises(InsufficientLiquidityBurnedError):
        compute_burn_amounts(liquidity=1, balance_a=10, balance_b=1000, total_supply=100)
    with pytest.raises(InsufficientLiquidityBurnedError):
        compute_burn_amounts(liquidity=0, balance_a=10, balance_b=10, total_supply=0)


def test_implied_input_is_clamped_at_zero() -> None:
    assert implied_input(balance=1112, reserve=1000, amount_out=0) == 112
    assert implied_input(balance=900, reserve=1000, amount_out=100) == 0
    assert implied_input(balance=850, reserve=1000, amount_out=100) == 0


def test_get_amount_out_and_in() -> None:
    assert get_amount_out(100, 1000, 1000) == 90
    # floor(1000*100*1000 / (900*997)) + 1
    assert get_amount_in(100, 1000, 1000) == 112


def test_get_amount_in_is_the_minimum_passing_input() -> None:
    amount_in = get_amount_in(100, 1000, 1000)
    check_swap_invariant(
        balance_a=1000 + amount_in, balance_b=900, amount_a_in=amount_in, amount_b_in=0, reserve_a=1000, reserve_b=1000
    )
    short = amount_in - 1
    with pytest.raises(InvariantViolationError):
        check_swap_invariant(
            balance_a=1000 + short, balance_b=900, amount_a_in=short, amount_b_in=0, reserve_a=1000, reserve_b=1000
        )


def test_quoting_helpers_reject_degenerate_inputs() -> None:
    assert quote(10, 100, 400) == 40
    with pytest.raises(InsufficientAmountError):
        quote(0, 100, 400)
    with pytest.raises(InsufficientInputAmountError):
        get_amount_out(0, 100, 100)
    with pytest.raises(InsufficientOutputAmountError):
        get_amount_in(0, 100, 100)
    with pytest.raises(InsufficientLiquidityError):
        get_amount_out(10, 0, 100)
    with pytest.raises(InsufficientLiquidityError):
        get_amount_in(100, 100, 100)


def test_protocol_fee_formula() -> None:
    # rootK 121, rootKLast 100: 1000 * 21 // (5 * 121 + 100)
    lp = compute_protocol_fee_liquidity(total_supply=1000, reserve_a=121, reserve_b=121, k_last=100 * 100)
    assert lp == 21000 // 705 == 29


def test_protocol_fee_is_zero_without_growth_or_history() -> None:
    assert compute_protocol_fee_liquidity(total_supply=1000, reserve_a=121, reserve_b=121, k_last=0) == 0
    assert compute_protocol_fee_liquidity(total_supply=1000, reserve_a=100, reserve_b=100, k_last=100 * 100) == 0
    assert compute_protocol_fee_liquidity(total_supply=1000, reserve_a=90, reserve_b=100, k_last=100 * 100) == 0


def test_accrue_fee_on_and_off() -> None:
    on = accrue_fee(fee_to=FEE_SINK, total_supply=1000, prior_reserve_a=121, prior_reserve_b=121, k_last=10_000)
    assert (on.fee_on, on.liquidity, on.k_last) == (True, 29, 10_000)

    off = accrue_fee(fee_to=ZERO_ADDRESS, total_supply=1000, prior_reserve_a=121, prior_reserve_b=121, k_last=10_000)
    assert (off.fee_on, off.liquidity, off.k_last) == (False, 0, 0)
