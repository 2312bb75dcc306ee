"""
Asset transfer interface.

A pair only needs two things from an asset: ``balance_of(holder)`` and
``transfer(sender, to, amount)``. Real-world assets disagree about what
``transfer`` returns, so the pair goes through :func:`safe_transfer`, which
accepts "no data" as success and otherwise requires a true boolean.

`Token` is an in-memory asset used by simulations, the CLI and tests.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Optional, Protocol, runtime_checkable

from ..errors import AssetTransferFailedError
from ..kernels.python.fixed_point import add, sub
from .balances import Address, Amount, BalanceTable
from .canonical import canonical_address
from .journal import Journal, default_journal

logger = logging.getLogger(__name__)


@runtime_checkable
class Asset(Protocol):
    address: Address

    def balance_of(self, holder: Address) -> Amount: ...

    def transfer(self, sender: Address, to: Address, amount: Amount) -> Any: ...


def _decodes_to_true(result: Any) -> bool:
    if result is None:
        return True
    if isinstance(result, bool):
        return result
    if isinstance(result, (bytes, bytearray)):
        if len(result) == 0:
            return True
        if len(result) < 32:
            return False
        return int.from_bytes(bytes(result[:32]), "big") != 0
    return False


def safe_transfer(asset: Asset, sender: Address, to: Address, amount: Amount) -> None:
    """
    Transfer `amount` of `asset` from `sender` to `to`, or raise.

    The transfer counts as successful only if the call completes and returns
    either no data (``None`` / empty bytes) or something that decodes to a true
    boolean (``True`` or a 32-byte word that is non-zero).
    """
    try:
        result = asset.transfer(sender, to, amount)
    except Exception as exc:
        raise AssetTransferFailedError(f"transfer of {amount} {asset.address} to {to} reverted: {exc}") from exc
    if not _decodes_to_true(result):
        raise AssetTransferFailedError(f"transfer of {amount} {asset.address} to {to} returned {result!r}")


class Token:
    """
    In-memory fungible asset.

    Notes:
    - `transfer` returns True like a conforming token.
    - Every balance and supply change is journaled, so a failed pair
      operation (in any factory) leaves the ledger untouched. Pass `journal`
      only to isolate a token from the process-wide default.
    """

    def __init__(self, address: Address, symbol: str = "", *, journal: Optional[Journal] = None) -> None:
        self.address = canonical_address(address, name="token address")
        self.symbol = symbol or self.address[:10]
        self._journal = journal if journal is not None else default_journal()
        self._balances = BalanceTable(self._journal)
        self._total_supply: Amount = 0

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def mint(self, to: Address, amount: Amount) -> None:
        self._set_total_supply(add(self._total_supply, amount))
        self._balances.credit(to, amount)
        logger.debug("token %s minted %d to %s", self.symbol, amount, to)

    def burn(self, holder: Address, amount: Amount) -> None:
        self._balances.debit(holder, amount)
        self._set_total_supply(sub(self._total_supply, amount))

    def transfer(self, sender: Address, to: Address, amount: Amount) -> Any:
        self._balances.debit(sender, amount)
        self._balances.credit(to, amount)
        return True

    def _set_total_supply(self, value: Amount) -> None:
        self._journal.record(partial(setattr, self, "_total_supply", self._total_supply))
        self._total_supply = value

    def __repr__(self) -> str:
        return f"Token({self.symbol}, address={self.address}, total_supply={self._total_supply})"
