"""
Python kernels.

These modules are designed to be:
- deterministic (integer-only),
- explicit about bit widths (checked vs wrapping arithmetic),
- small surface-area (pure functions, no pair state).
"""
