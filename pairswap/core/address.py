"""
Deterministic pair addresses.

A pair's address is a pure function of the deployer (factory) identity, the
two assets in canonical order, and the content hash of the pair logic:

    salt    = keccak256(asset_a || asset_b)                  (20 bytes each)
    address = keccak256(0xff || deployer || salt || init_code_hash)[12:]

This is bit-for-bit the CREATE2 scheme, so plugging in a real deployment's
factory and init-code hash reproduces its on-chain pair addresses. Outside a
chain it is a content-addressed registry key: anyone holding the inputs can
compute a pair's address without asking the factory.
"""

from __future__ import annotations

from typing import Tuple

from ..errors import IdenticalAssetsError, ZeroAddressError
from ..state.balances import ZERO_ADDRESS, Address, AssetId
from ..state.canonical import (
    HASH_NBYTES,
    address_bytes,
    address_to_int,
    canonical_address,
    hex_to_bytes_fixed,
    keccak256,
    keccak256_hex,
)

CREATE2_PREFIX = b"\xff"

# Content tag for the pair logic shipped in this package; its hash is the
# default init-code hash used by `Factory`.
PAIR_CODE_TAG = b"pairswap.core.pair.Pair:v1"
PAIR_INIT_CODE_HASH = keccak256_hex(PAIR_CODE_TAG)


def sort_assets(asset_x: AssetId, asset_y: AssetId) -> Tuple[AssetId, AssetId]:
    """
    Return the two assets in canonical (ascending numeric) order.

    Raises:
        IdenticalAssetsError: If both identifiers name the same asset
        ZeroAddressError: If the lower identifier is the zero address
    """
    x = canonical_address(asset_x, name="asset_x")
    y = canonical_address(asset_y, name="asset_y")
    if x == y:
        raise IdenticalAssetsError(f"identical assets: {x}")
    asset_a, asset_b = (x, y) if address_to_int(x) < address_to_int(y) else (y, x)
    if asset_a == ZERO_ADDRESS:
        raise ZeroAddressError("asset cannot be the zero address")
    return asset_a, asset_b


def pair_salt(asset_a: AssetId, asset_b: AssetId) -> bytes:
    """keccak256 of the packed, already-sorted asset identifiers."""
    return keccak256(address_bytes(asset_a, name="asset_a") + address_bytes(asset_b, name="asset_b"))


def create2_address(deployer: Address, salt: bytes, init_code_hash: str) -> Address:
    if len(salt) != HASH_NBYTES:
        raise ValueError(f"salt must be {HASH_NBYTES} bytes")
    code_hash = hex_to_bytes_fixed(init_code_hash, nbytes=HASH_NBYTES, name="init_code_hash")
    digest = keccak256(CREATE2_PREFIX + address_bytes(deployer, name="deployer") + salt + code_hash)
    return "0x" + digest[12:].hex()


def compute_pair_address(
    deployer: Address,
    asset_x: AssetId,
    asset_y: AssetId,
    init_code_hash: str = PAIR_INIT_CODE_HASH,
) -> Address:
    """Address of the (asset_x, asset_y) pair deployed by `deployer`; argument order does not matter."""
    asset_a, asset_b = sort_assets(asset_x, asset_y)
    return create2_address(deployer, pair_salt(asset_a, asset_b), init_code_hash)
