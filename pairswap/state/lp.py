"""
Liquidity-share ledger for a single pair.

Shares are plain fungible units: a total supply plus per-holder balances,
mutated only by mint, burn and transfer. The ledger maintains
``sum(balances) == total_supply`` after every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Dict, Optional

from ..kernels.python.fixed_point import add, sub
from .balances import Address, Amount, BalanceTable
from .journal import Journal


@dataclass(frozen=True)
class LedgerSnapshot:
    total_supply: Amount
    balances: Dict[Address, Amount]


class LiquidityShareLedger:
    """Total supply + holder balances for one pair's liquidity shares."""

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self._journal = journal
        self._total_supply: Amount = 0
        self._balances = BalanceTable(journal)

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def mint(self, to: Address, amount: Amount) -> None:
        self._set_total_supply(add(self._total_supply, amount))
        self._balances.credit(to, amount)

    def burn(self, holder: Address, amount: Amount) -> None:
        self._balances.debit(holder, amount)
        self._set_total_supply(sub(self._total_supply, amount))

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        self._balances.debit(sender, amount)
        self._balances.credit(to, amount)
        return True

    def holders(self) -> Dict[Address, Amount]:
        return self._balances.get_all_balances()

    def verify_supply(self) -> bool:
        """True iff the holder balances sum to the total supply."""
        return self._balances.total() == self._total_supply

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(total_supply=self._total_supply, balances=self._balances.get_all_balances())

    def _set_total_supply(self, value: Amount) -> None:
        if self._journal is not None:
            self._journal.record(partial(setattr, self, "_total_supply", self._total_supply))
        self._total_supply = value

    def __repr__(self) -> str:
        return f"LiquidityShareLedger(total_supply={self._total_supply}, holders={len(self._balances)})"
