"""
pairswap: a constant-product pair exchange engine.

Two-asset liquidity pairs with proportional share minting/burning, a 0.3%-fee
swap invariant with flash-borrow callbacks, an optional protocol fee paid as
share dilution, and UQ112x112 time-weighted price accumulators.
"""

__version__ = "0.1.0"
