"""
Runtime configuration for the factory and its pairs.

Configuration is a frozen dataclass. It can be built directly, from
``PAIRSWAP_*`` environment variables, or from a YAML mapping with the same
(lower-case) keys:

    minimum_liquidity: 1000
    init_code_hash: "0x96e8..."
    fee_to: "0x..."
    fee_to_setter: "0x..."
    log_level: INFO
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .state.balances import ZERO_ADDRESS, Address
from .state.canonical import HASH_NBYTES, canonical_address, canonical_hex_fixed_allow_0x

ENV_PREFIX = "PAIRSWAP_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class PairswapConfig:
    """
    Attributes:
        minimum_liquidity: Shares locked at the zero address by each pair's first deposit
        init_code_hash: 32-byte hex content hash used for pair address derivation
            (None: the package's own pair code hash)
        fee_to: Initial protocol fee recipient (zero address: fee off)
        fee_to_setter: Account allowed to change `fee_to` and hand over this role
        log_level: Level applied by `configure_logging`
    """

    minimum_liquidity: int = 1000
    init_code_hash: Optional[str] = None
    fee_to: Address = ZERO_ADDRESS
    fee_to_setter: Address = ZERO_ADDRESS
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not isinstance(self.minimum_liquidity, int) or isinstance(self.minimum_liquidity, bool):
            raise TypeError("minimum_liquidity must be an int")
        if self.minimum_liquidity <= 0:
            raise ValueError(f"minimum_liquidity must be positive: {self.minimum_liquidity}")
        if self.init_code_hash is not None:
            object.__setattr__(
                self,
                "init_code_hash",
                canonical_hex_fixed_allow_0x(self.init_code_hash, nbytes=HASH_NBYTES, name="init_code_hash"),
            )
        object.__setattr__(self, "fee_to", canonical_address(self.fee_to, name="fee_to"))
        object.__setattr__(self, "fee_to_setter", canonical_address(self.fee_to_setter, name="fee_to_setter"))
        level = str(self.log_level).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls) -> "PairswapConfig":
        defaults = cls()
        return cls(
            minimum_liquidity=_env_int(
                ENV_PREFIX + "MINIMUM_LIQUIDITY", defaults.minimum_liquidity, lo=1, hi=10**18
            ),
            init_code_hash=_env_str(ENV_PREFIX + "INIT_CODE_HASH", defaults.init_code_hash),
            fee_to=_env_str(ENV_PREFIX + "FEE_TO", defaults.fee_to) or ZERO_ADDRESS,
            fee_to_setter=_env_str(ENV_PREFIX + "FEE_TO_SETTER", defaults.fee_to_setter) or ZERO_ADDRESS,
            log_level=_env_str(ENV_PREFIX + "LOG_LEVEL", defaults.log_level) or defaults.log_level,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PairswapConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {unknown}")
        return cls(**dict(data))


def load_config(path: str | Path) -> PairswapConfig:
    """Load a `PairswapConfig` from a YAML file (an empty file yields the defaults)."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return PairswapConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return PairswapConfig.from_mapping(obj)


def configure_logging(config: PairswapConfig) -> None:
    """Install a basic root handler at the configured level (for CLI entry points)."""
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
