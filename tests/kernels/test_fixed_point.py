# [TESTER] v1

from __future__ import annotations

import math
from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pairswap.errors import MathOverflowError, MathUnderflowError, PairswapError
from pairswap.kernels.python.fixed_point import (
    MAX_UINT32,
    MAX_UINT112,
    MAX_UINT256,
    add,
    isqrt,
    min_,
    mul,
    require_uint,
    sub,
    truncate,
    wrapping_add,
    wrapping_mul,
    wrapping_sub,
)
from pairswap.kernels.python.uq112x112 import Q112, decode, encode, uqdiv


@pytest.mark.parametrize("y, expected", [(0, 0), (1, 1), (2, 1), (3, 1), (4, 2), (8, 2), (9, 3), (4_000_000, 2000)])
def test_isqrt_small_values(y: int, expected: int) -> None:
    assert isqrt(y) == expected


@given(st.integers(min_value=0, max_value=MAX_UINT256))
def test_isqrt_is_floor_sqrt(y: int) -> None:
    assert isqrt(y) == math.isqrt(y)


def test_isqrt_rejects_negative() -> None:
    with pytest.raises(ValueError, match="negative"):
        isqrt(-1)


def test_checked_add_overflow_is_an_overflow_error() -> None:
    with pytest.raises(MathOverflowError, match="ds-math-add-overflow") as excinfo:
        add(MAX_UINT256, 1)
    assert isinstance(excinfo.value, OverflowError)
    assert isinstance(excinfo.value, PairswapError)


def test_checked_sub_underflow() -> None:
    assert sub(5, 5) == 0
    with pytest.raises(MathUnderflowError, match="ds-math-sub-underflow"):
        sub(0, 1)


def test_checked_mul_respects_bit_width() -> None:
    assert mul(MAX_UINT112, MAX_UINT112) == MAX_UINT112 * MAX_UINT112
    with pytest.raises(MathOverflowError):
        mul(1 << 200, 1 << 56)
    with pytest.raises(MathOverflowError):
        mul(1 << 16, 1 << 16, bits=32)


def test_wrapping_ops_reduce_modulo_width() -> None:
    assert wrapping_sub(0, 1, 32) == MAX_UINT32
    assert wrapping_sub(5, (1 << 32) - 5, 32) == 10
    assert wrapping_add(MAX_UINT256, 2) == 1
    assert wrapping_mul(1 << 255, 2) == 0


def test_truncate_keeps_low_bits() -> None:
    assert truncate((1 << 32) + 7, 32) == 7
    with pytest.raises(ValueError):
        truncate(-1, 32)


def test_require_uint_bounds_and_types() -> None:
    assert require_uint(MAX_UINT112, 112) == MAX_UINT112
    with pytest.raises(MathOverflowError, match="uint112"):
        require_uint(MAX_UINT112 + 1, 112, name="reserve")
    with pytest.raises(MathUnderflowError):
        require_uint(-1)
    with pytest.raises(TypeError):
        require_uint(True)


def test_min() -> None:
    assert min_(3, 7) == 3
    assert min_(7, 3) == 3


def test_uq112x112_encode_divide_decode() -> None:
    assert encode(3) == 3 * Q112
    assert decode(uqdiv(encode(3), 2)) == Fraction(3, 2)
    # 1/3 is not representable; the division floors
    assert decode(uqdiv(encode(1), 3)) < Fraction(1, 3)


def test_uq112x112_rejects_out_of_range_and_zero_divisor() -> None:
    with pytest.raises(MathOverflowError):
        encode(MAX_UINT112 + 1)
    with pytest.raises(ZeroDivisionError):
        uqdiv(encode(1), 0)
