"""
Per-holder balance tracking for a single fungible unit.

Implements BalanceTable[Address] -> Amount, the bookkeeping shared by the
in-memory asset tokens and the liquidity-share ledger.
"""

from __future__ import annotations

from functools import partial
from typing import Dict, Optional

from ..kernels.python.fixed_point import UINT256_BITS, add, require_uint, sub
from .journal import Journal


# Type aliases
Address = str  # 20-byte address as lowercase 0x-prefixed hex
AssetId = str  # the asset's address
Amount = int  # uint256

# Burn / "no recipient" address
ZERO_ADDRESS = "0x" + "00" * 20


class BalanceTable:
    """
    Balance table mapping holder -> amount.

    Balances are uint256. Zero balances are dropped to keep the table sparse.
    Callers must not rely on dict iteration order; sort explicitly when order
    matters (e.g. for display or hashing).
    """

    def __init__(self, journal: Optional[Journal] = None) -> None:
        self._balances: Dict[Address, Amount] = {}
        self._journal = journal

    def get(self, holder: Address) -> Amount:
        """Get balance for `holder`. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def set(self, holder: Address, amount: Amount) -> None:
        """
        Set balance for `holder`, journaling the prior value if a journal is attached.

        Raises:
            MathUnderflowError / MathOverflowError: If amount is outside uint256
        """
        require_uint(amount, UINT256_BITS, name="amount")
        if self._journal is not None:
            self._journal.record(partial(self._put, holder, self.get(holder)))
        self._put(holder, amount)

    def _put(self, holder: Address, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def credit(self, holder: Address, amount: Amount) -> None:
        require_uint(amount, UINT256_BITS, name="amount")
        self.set(holder, add(self.get(holder), amount))

    def debit(self, holder: Address, amount: Amount) -> None:
        """
        Subtract `amount` from `holder`.

        Raises:
            MathUnderflowError: If the balance is insufficient
        """
        require_uint(amount, UINT256_BITS, name="amount")
        self.set(holder, sub(self.get(holder), amount))

    def total(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        return dict(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
