"""
Core pair engine
"""

from .address import PAIR_INIT_CODE_HASH, compute_pair_address, pair_salt, sort_assets
from .cpmm import (
    MINIMUM_LIQUIDITY,
    check_swap_invariant,
    compute_burn_amounts,
    compute_liquidity_minted,
    get_amount_in,
    get_amount_out,
    quote,
)
from .events import Burn, EventKind, Mint, PairCreated, Swap, Sync
from .factory import Factory
from .fees import accrue_fee, compute_protocol_fee_liquidity
from .oracle import CumulativePrices, PriceObservation, consult, observe, twap
from .pair import FlashBorrower, Pair
from .reserves import Reserves, sync_to

__all__ = [
    "PAIR_INIT_CODE_HASH",
    "compute_pair_address",
    "pair_salt",
    "sort_assets",
    "MINIMUM_LIQUIDITY",
    "check_swap_invariant",
    "compute_burn_amounts",
    "compute_liquidity_minted",
    "get_amount_in",
    "get_amount_out",
    "quote",
    "Burn",
    "EventKind",
    "Mint",
    "PairCreated",
    "Swap",
    "Sync",
    "Factory",
    "accrue_fee",
    "compute_protocol_fee_liquidity",
    "CumulativePrices",
    "PriceObservation",
    "consult",
    "observe",
    "twap",
    "FlashBorrower",
    "Pair",
    "Reserves",
    "sync_to",
]
