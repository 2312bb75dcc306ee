"""
Canonical encoding primitives for identifiers and hashes.

Asset, holder and pair identifiers are 20-byte addresses rendered as
lowercase, 0x-prefixed hex. Keeping a single canonical form means two spellings
of the same address can never map to different pairs or balances.
"""

from __future__ import annotations

import re

from Crypto.Hash import keccak


ADDRESS_NBYTES = 20
HASH_NBYTES = 32

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")


def keccak256(data: bytes) -> bytes:
    """Compute keccak256 (the pre-standard SHA-3 padding used by Ethereum)."""
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("data must be bytes")
    k = keccak.new(digest_bits=256)
    k.update(bytes(data))
    return k.digest()


def keccak256_hex(data: bytes) -> str:
    return "0x" + keccak256(data).hex()


def hex_to_bytes_fixed(hex_str: str, *, nbytes: int, name: str) -> bytes:
    """Decode a fixed-size hex string, accepting an optional 0x prefix."""
    return bytes.fromhex(canonical_hex_fixed_allow_0x(hex_str, nbytes=nbytes, name=name)[2:])


def canonical_hex_fixed_allow_0x(hex_str: str, *, nbytes: int, name: str) -> str:
    """
    Canonicalize a fixed-size hex string (lowercase, 0x-prefixed).

    Accepts either 0x-prefixed or raw hex input.
    """
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a str")
    if not isinstance(nbytes, int) or isinstance(nbytes, bool) or nbytes <= 0:
        raise ValueError("nbytes must be a positive int")

    s = hex_str.strip()
    if s.lower().startswith("0x"):
        s = s[2:]
    expected_len = 2 * nbytes
    if len(s) != expected_len:
        raise ValueError(f"{name} must be {nbytes} bytes (hex length {expected_len})")
    if not _HEX_CHARS_RE.fullmatch(s):
        raise ValueError(f"{name} must be valid hex")
    return "0x" + s.lower()


def canonical_address(address: str, *, name: str = "address") -> str:
    return canonical_hex_fixed_allow_0x(address, nbytes=ADDRESS_NBYTES, name=name)


def address_bytes(address: str, *, name: str = "address") -> bytes:
    return hex_to_bytes_fixed(address, nbytes=ADDRESS_NBYTES, name=name)


def address_to_int(address: str) -> int:
    """Numeric value of an address; canonical asset order is ascending by this value."""
    return int.from_bytes(address_bytes(address), "big")
