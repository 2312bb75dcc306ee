"""
Kernel layer.

Small integer-only building blocks shared by the pair engine:
- `pairswap/kernels/python/fixed_point.py`: checked / wrapping uint arithmetic and `isqrt`
- `pairswap/kernels/python/uq112x112.py`: the binary fixed-point price encoding
"""
