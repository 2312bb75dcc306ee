# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.config import PairswapConfig, load_config
from pairswap.core.factory import Factory
from pairswap.state.assets import Token
from pairswap.state.balances import ZERO_ADDRESS

HASH = "0x96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f"
FEE_SINK = "0x" + "fe" * 20


def test_defaults() -> None:
    cfg = PairswapConfig()
    assert cfg.minimum_liquidity == 1000
    assert cfg.init_code_hash is None
    assert cfg.fee_to == ZERO_ADDRESS
    assert cfg.fee_to_setter == ZERO_ADDRESS
    assert cfg.log_level == "WARNING"


def test_values_are_canonicalized() -> None:
    cfg = PairswapConfig(init_code_hash=HASH.upper().replace("0X", "0x"), fee_to="FE" * 20, log_level="debug")
    assert cfg.init_code_hash == HASH
    assert cfg.fee_to == FEE_SINK
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"minimum_liquidity": 0},
        {"init_code_hash": "0x1234"},
        {"fee_to": "not-an-address"},
        {"log_level": "chatty"},
    ],
)
def test_invalid_values_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        PairswapConfig(**kwargs)


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_MINIMUM_LIQUIDITY", "10")
    monkeypatch.setenv("PAIRSWAP_FEE_TO", FEE_SINK)
    monkeypatch.setenv("PAIRSWAP_FEE_TO_SETTER", "  ")
    monkeypatch.setenv("PAIRSWAP_LOG_LEVEL", "info")
    monkeypatch.delenv("PAIRSWAP_INIT_CODE_HASH", raising=False)

    cfg = PairswapConfig.from_env()
    assert cfg.minimum_liquidity == 10
    assert cfg.fee_to == FEE_SINK
    assert cfg.fee_to_setter == ZERO_ADDRESS
    assert cfg.log_level == "INFO"
    assert cfg.init_code_hash is None


def test_from_env_ignores_unparseable_ints(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_MINIMUM_LIQUIDITY", "lots")
    assert PairswapConfig.from_env().minimum_liquidity == 1000


def test_load_config_yaml(tmp_path) -> None:
    path = tmp_path / "pairswap.yaml"
    path.write_text(
        f"minimum_liquidity: 100\ninit_code_hash: \"{HASH}\"\nfee_to: \"{FEE_SINK}\"\nlog_level: ERROR\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert (cfg.minimum_liquidity, cfg.init_code_hash, cfg.fee_to, cfg.log_level) == (100, HASH, FEE_SINK, "ERROR")


def test_load_config_empty_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PairswapConfig()


def test_load_config_rejects_unknown_keys_and_non_mappings(tmp_path) -> None:
    bad_key = tmp_path / "bad.yaml"
    bad_key.write_text("swap_fee_bps: 30\n", encoding="utf-8")
    with pytest.raises(ValueError, match="unknown config keys"):
        load_config(bad_key)

    a_list = tmp_path / "list.yaml"
    a_list.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_config(a_list)


def test_factory_takes_fee_switch_and_lock_from_config() -> None:
    cfg = PairswapConfig(minimum_liquidity=10, fee_to=FEE_SINK)
    factory = Factory("0x" + "fa" * 20, config=cfg, clock=lambda: 50)
    token_a = Token("0x" + "11" * 20)
    token_b = Token("0x" + "22" * 20)
    pair = factory.create_pair(token_a, token_b)
    assert factory.fee_to == FEE_SINK

    provider = "0x" + "a1" * 20
    token_a.mint(pair.address, 100)
    token_b.mint(pair.address, 100)
    assert pair.mint(provider) == 90
    assert pair.balance_of(ZERO_ADDRESS) == 10
    assert pair.k_last == 100 * 100
