"""
UQ112x112 binary fixed-point kernel.

A UQ112x112 value is an unsigned integer holding a ratio scaled by ``2**112``:
112 integer bits, 112 fractional bits, 224 bits total. It is used to encode
``reserve_b / reserve_a`` (and the inverse) for the price accumulators.
"""

from __future__ import annotations

from fractions import Fraction

from .fixed_point import UINT112_BITS, UINT224_BITS, require_uint


Q112 = 1 << 112


def encode(y: int) -> int:
    """Encode a uint112 as UQ112x112 (never overflows: ``y * 2**112 < 2**224``)."""
    require_uint(y, UINT112_BITS, name="y")
    return y * Q112


def uqdiv(x: int, y: int) -> int:
    """Divide a UQ112x112 by a uint112, returning UQ112x112 (floor)."""
    require_uint(x, UINT224_BITS, name="x")
    require_uint(y, UINT112_BITS, name="y")
    if y == 0:
        raise ZeroDivisionError("uqdiv by zero")
    return x // y


def decode(x: int) -> Fraction:
    """Exact rational value of a UQ112x112 (or any Q112-scaled) integer."""
    return Fraction(x, Q112)
