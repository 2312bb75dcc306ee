"""
State management for pairswap
"""

from .assets import Asset, Token, safe_transfer
from .balances import ZERO_ADDRESS, BalanceTable
from .journal import Journal, JournalMark, default_journal
from .lp import LiquidityShareLedger

__all__ = [
    "Asset",
    "Token",
    "safe_transfer",
    "ZERO_ADDRESS",
    "BalanceTable",
    "Journal",
    "JournalMark",
    "default_journal",
    "LiquidityShareLedger",
]
