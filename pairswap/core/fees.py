"""
Protocol fee accrual kernel (deterministic, integer-only).

Swaps never pay the protocol directly. Instead the 0.3% LP fee stays in the
reserves and grows ``sqrt(k)``. At the next mint or burn, if a fee recipient is
configured, the pair mints the recipient enough new shares to own the fraction

    (sqrt(k) - sqrt(k_last)) / (5 * sqrt(k) + sqrt(k_last))

of the pre-mint supply, which works out to one sixth of the growth in
``sqrt(k)`` since the last liquidity event. Every step floors.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.fixed_point import add, isqrt, mul, sub
from ..state.balances import ZERO_ADDRESS, Address


PROTOCOL_FEE_DIVISOR = 5


@dataclass(frozen=True)
class FeeAccrual:
    fee_on: bool
    fee_to: Address
    liquidity: int
    k_last: int


def compute_protocol_fee_liquidity(
    *,
    total_supply: int,
    reserve_a: int,
    reserve_b: int,
    k_last: int,
    divisor: int = PROTOCOL_FEE_DIVISOR,
) -> int:
    """
    Shares owed to the fee recipient for invariant growth since `k_last`.

    Returns 0 when nothing has been recorded yet or sqrt(k) has not grown.
    """
    if k_last == 0:
        return 0
    root_k = isqrt(mul(reserve_a, reserve_b))
    root_k_last = isqrt(k_last)
    if root_k <= root_k_last:
        return 0
    numerator = mul(total_supply, sub(root_k, root_k_last))
    denominator = add(mul(root_k, divisor), root_k_last)
    return numerator // denominator


def accrue_fee(
    *,
    fee_to: Address,
    total_supply: int,
    prior_reserve_a: int,
    prior_reserve_b: int,
    k_last: int,
) -> FeeAccrual:
    """
    Decide the fee outcome for one mint/burn.

    - fee on: report the shares to mint (possibly 0) and keep `k_last` as is;
      the caller records the post-operation k afterwards.
    - fee off: nothing to mint, and any recorded `k_last` is cleared so stale
      growth is never charged if the fee is switched back on later.
    """
    fee_on = fee_to != ZERO_ADDRESS
    if fee_on:
        liquidity = compute_protocol_fee_liquidity(
            total_supply=total_supply,
            reserve_a=prior_reserve_a,
            reserve_b=prior_reserve_b,
            k_last=k_last,
        )
        return FeeAccrual(fee_on=True, fee_to=fee_to, liquidity=liquidity, k_last=k_last)
    return FeeAccrual(fee_on=False, fee_to=fee_to, liquidity=0, k_last=0)
