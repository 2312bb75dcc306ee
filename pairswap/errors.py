"""Exception types for the pair engine.

Every failure aborts the whole operation: the pair rolls back every journaled
change before the exception leaves ``Pair``. Each exception carries a short
``code`` so callers can match on a stable string rather than the message.
"""

from __future__ import annotations


class PairswapError(Exception):
    """Base class for all pair / factory failures."""

    code: str = "PAIRSWAP_ERROR"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


# -- arithmetic ---------------------------------------------------------------


class MathOverflowError(PairswapError, OverflowError):
    """A checked uint operation exceeded its bit width."""

    code = "MATH_OVERFLOW"


class MathUnderflowError(PairswapError, ArithmeticError):
    """A checked uint subtraction went below zero."""

    code = "MATH_UNDERFLOW"


class ReserveOverflowError(PairswapError, OverflowError):
    """A balance does not fit in a uint112 reserve slot."""

    code = "OVERFLOW"


# -- access / lifecycle ---------------------------------------------------------


class ReentrancyError(PairswapError):
    code = "LOCKED"


class ForbiddenCallerError(PairswapError):
    code = "FORBIDDEN"


class AlreadyInitializedError(PairswapError):
    code = "ALREADY_INITIALIZED"


class NotInitializedError(PairswapError):
    code = "NOT_INITIALIZED"


class IdenticalAssetsError(PairswapError):
    code = "IDENTICAL_ADDRESSES"


class ZeroAddressError(PairswapError):
    code = "ZERO_ADDRESS"


class PairExistsError(PairswapError):
    code = "PAIR_EXISTS"


# -- liquidity ------------------------------------------------------------------


class InsufficientLiquidityMintedError(PairswapError):
    code = "INSUFFICIENT_LIQUIDITY_MINTED"


class InsufficientLiquidityBurnedError(PairswapError):
    code = "INSUFFICIENT_LIQUIDITY_BURNED"


class InsufficientLiquidityError(PairswapError):
    code = "INSUFFICIENT_LIQUIDITY"


# -- swap -------------------------------------------------------------------------


class NoOutputRequestedError(PairswapError):
    code = "INSUFFICIENT_OUTPUT_AMOUNT"


class InvalidRecipientError(PairswapError):
    code = "INVALID_TO"


class NoInputProvidedError(PairswapError):
    code = "INSUFFICIENT_INPUT_AMOUNT"


class InvariantViolationError(PairswapError):
    code = "K"


class AssetTransferFailedError(PairswapError):
    code = "TRANSFER_FAILED"


# -- quoting helpers ------------------------------------------------------------


class InsufficientAmountError(PairswapError):
    code = "INSUFFICIENT_AMOUNT"


class InsufficientInputAmountError(PairswapError):
    code = "INSUFFICIENT_INPUT_AMOUNT"


class InsufficientOutputAmountError(PairswapError):
    code = "INSUFFICIENT_OUTPUT_AMOUNT"
