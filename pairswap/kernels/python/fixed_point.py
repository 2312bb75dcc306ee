"""
Bounded-integer arithmetic kernel.

Python ints are unbounded, so every fixed-width quantity in the pair ledger is
checked or wrapped explicitly here. Two behaviors are kept distinct:

- *checked* operations (`add`, `sub`, `mul`, `require_uint`) reject any result
  outside ``[0, 2**bits)`` and are used for balances, reserves and share math;
- *wrapping* operations (`wrapping_add`, `wrapping_sub`, `wrapping_mul`) reduce
  modulo ``2**bits`` and are used for timestamps and price accumulators.
"""

from __future__ import annotations

from ...errors import MathOverflowError, MathUnderflowError


UINT32_BITS = 32
UINT112_BITS = 112
UINT224_BITS = 224
UINT256_BITS = 256

MAX_UINT32 = (1 << UINT32_BITS) - 1
MAX_UINT112 = (1 << UINT112_BITS) - 1
MAX_UINT224 = (1 << UINT224_BITS) - 1
MAX_UINT256 = (1 << UINT256_BITS) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _max_for(bits: int) -> int:
    if not isinstance(bits, int) or isinstance(bits, bool) or not (0 < bits <= UINT256_BITS):
        raise ValueError(f"bits must be in (0, {UINT256_BITS}]: {bits!r}")
    return (1 << bits) - 1


def require_uint(value: int, bits: int = UINT256_BITS, *, name: str = "value") -> int:
    """Return `value` unchanged if it fits in an unsigned `bits`-wide integer."""
    _require_int(name, value)
    if value < 0:
        raise MathUnderflowError(f"{name} must be non-negative: {value}")
    if value > _max_for(bits):
        raise MathOverflowError(f"{name} exceeds uint{bits}: {value}")
    return value


def add(x: int, y: int, bits: int = UINT256_BITS) -> int:
    z = x + y
    if z > _max_for(bits):
        raise MathOverflowError("ds-math-add-overflow")
    return z


def sub(x: int, y: int, bits: int = UINT256_BITS) -> int:
    z = x - y
    if z < 0:
        raise MathUnderflowError("ds-math-sub-underflow")
    _max_for(bits)
    return z


def mul(x: int, y: int, bits: int = UINT256_BITS) -> int:
    z = x * y
    if z > _max_for(bits):
        raise MathOverflowError("ds-math-mul-overflow")
    return z


def wrapping_add(x: int, y: int, bits: int = UINT256_BITS) -> int:
    return (x + y) & _max_for(bits)


def wrapping_sub(x: int, y: int, bits: int = UINT256_BITS) -> int:
    return (x - y) & _max_for(bits)


def wrapping_mul(x: int, y: int, bits: int = UINT256_BITS) -> int:
    return (x * y) & _max_for(bits)


def truncate(value: int, bits: int) -> int:
    """Keep the low `bits` bits (e.g. ``uint32(block.timestamp % 2**32)``)."""
    _require_int("value", value)
    if value < 0:
        raise ValueError(f"value must be non-negative: {value}")
    return value & _max_for(bits)


def min_(x: int, y: int) -> int:
    return x if x < y else y


def isqrt(y: int) -> int:
    """
    Floor square root by Babylonian iteration.

    Integer-only so large products (up to 2**224) never lose precision the way a
    float `sqrt` would.
    """
    _require_int("y", y)
    if y < 0:
        raise ValueError(f"isqrt of negative number: {y}")
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0
