"""
Constant Product Market Maker (CPMM) math for a single pair.

This module holds the pair's consensus-critical arithmetic with explicit
rounding rules. Every multiplication is checked against uint256.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation (O(log n) for the first-mint isqrt)
- Invariant: after each swap, the fee-adjusted balances satisfy
  (1000*x' - 3*in_x) * (1000*y' - 3*in_y) >= x * y * 1000**2
"""

from __future__ import annotations

from typing import Tuple

from ..errors import (
    InsufficientAmountError,
    InsufficientInputAmountError,
    InsufficientLiquidityBurnedError,
    InsufficientLiquidityError,
    InsufficientLiquidityMintedError,
    InsufficientOutputAmountError,
    InvariantViolationError,
)
from ..kernels.python.fixed_point import add, isqrt, min_, mul, sub
from ..state.balances import Amount

# Shares permanently locked at the zero address by the first deposit
MINIMUM_LIQUIDITY = 1000

# 0.3% swap fee, charged on the input side only
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000


def compute_liquidity_minted(
    *,
    amount_a: Amount,
    amount_b: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    total_supply: Amount,
    minimum_liquidity: Amount = MINIMUM_LIQUIDITY,
) -> Amount:
    """
    Compute shares issued for a deposit of (amount_a, amount_b).

    For the first deposit (total_supply == 0):
        liquidity = floor(sqrt(amount_a * amount_b)) - minimum_liquidity
    (the caller mints `minimum_liquidity` to the zero address separately).

    For subsequent deposits:
        liquidity = min(floor(amount_a * total_supply / reserve_a),
                        floor(amount_b * total_supply / reserve_b))
    so a lopsided deposit donates its excess side to existing holders.

    Raises:
        InsufficientLiquidityMintedError: If the result is not positive
    """
    if total_supply == 0:
        liquidity = isqrt(mul(amount_a, amount_b)) - minimum_liquidity
    else:
        liquidity = min_(
            mul(amount_a, total_supply) // reserve_a,
            mul(amount_b, total_supply) // reserve_b,
        )
    if liquidity <= 0:
        raise InsufficientLiquidityMintedError(f"deposit ({amount_a}, {amount_b}) mints {liquidity} shares")
    return liquidity


def compute_burn_amounts(
    *,
    liquidity: Amount,
    balance_a: Amount,
    balance_b: Amount,
    total_supply: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts redeemed by burning `liquidity` shares.

    Uses the pair's *held balances* (not recorded reserves), so any surplus
    donated to the pair is paid out pro rata:
        amount_a = floor(liquidity * balance_a / total_supply)
        amount_b = floor(liquidity * balance_b / total_supply)

    Raises:
        InsufficientLiquidityBurnedError: If either amount rounds to zero
    """
    if total_supply == 0:
        raise InsufficientLiquidityBurnedError("no shares outstanding")
    amount_a = mul(liquidity, balance_a) // total_supply
    amount_b = mul(liquidity, balance_b) // total_supply
    if amount_a == 0 or amount_b == 0:
        raise InsufficientLiquidityBurnedError(f"burning {liquidity} shares redeems ({amount_a}, {amount_b})")
    return amount_a, amount_b


def implied_input(*, balance: Amount, reserve: Amount, amount_out: Amount) -> Amount:
    """Input inferred from a post-transfer balance: max(0, balance - (reserve - amount_out))."""
    remaining = reserve - amount_out
    return balance - remaining if balance > remaining else 0


def fee_adjusted_balance(balance: Amount, amount_in: Amount) -> Amount:
    """balance * 1000 - amount_in * 3 (the fee is deducted from the input side only)."""
    return sub(mul(balance, FEE_DENOMINATOR), mul(amount_in, FEE_NUMERATOR))


def check_swap_invariant(
    *,
    balance_a: Amount,
    balance_b: Amount,
    amount_a_in: Amount,
    amount_b_in: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
) -> None:
    """
    Verify post-trade value (net of fee) is no less than pre-trade value.

    Raises:
        InvariantViolationError: If the fee-adjusted product shrank
    """
    adjusted_a = fee_adjusted_balance(balance_a, amount_a_in)
    adjusted_b = fee_adjusted_balance(balance_b, amount_b_in)
    k_after = mul(adjusted_a, adjusted_b)
    k_before = mul(mul(reserve_a, reserve_b), FEE_DENOMINATOR**2)
    if k_after < k_before:
        raise InvariantViolationError(f"fee-adjusted k decreased: {k_after} < {k_before}")


# -- quoting helpers (pure; no pair state) -------------------------------------


def quote(amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
    """Equivalent amount of the other asset at the current reserve ratio (no fee)."""
    if amount_a <= 0:
        raise InsufficientAmountError(f"amount must be positive: {amount_a}")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidityError(f"reserves must be positive: ({reserve_a}, {reserve_b})")
    return mul(amount_a, reserve_b) // reserve_a


def get_amount_out(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Maximum output for an exact input, after the 0.3% fee:
        amount_out = floor(in*997*reserve_out / (reserve_in*1000 + in*997))
    """
    if amount_in <= 0:
        raise InsufficientInputAmountError(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidityError(f"reserves must be positive: ({reserve_in}, {reserve_out})")
    amount_in_with_fee = mul(amount_in, FEE_DENOMINATOR - FEE_NUMERATOR)
    numerator = mul(amount_in_with_fee, reserve_out)
    denominator = add(mul(reserve_in, FEE_DENOMINATOR), amount_in_with_fee)
    return numerator // denominator


def get_amount_in(amount_out: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Minimum input for an exact output, after the 0.3% fee (floor + 1):
        amount_in = floor(reserve_in*amount_out*1000 / ((reserve_out-amount_out)*997)) + 1
    """
    if amount_out <= 0:
        raise InsufficientOutputAmountError(f"amount_out must be positive: {amount_out}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidityError(f"reserves must be positive: ({reserve_in}, {reserve_out})")
    if amount_out >= reserve_out:
        raise InsufficientLiquidityError(f"amount_out ({amount_out}) >= reserve_out ({reserve_out})")
    numerator = mul(mul(reserve_in, amount_out), FEE_DENOMINATOR)
    denominator = mul(sub(reserve_out, amount_out), FEE_DENOMINATOR - FEE_NUMERATOR)
    return add(numerator // denominator, 1)
