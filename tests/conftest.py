from __future__ import annotations

from dataclasses import dataclass

import pytest

from pairswap.config import PairswapConfig
from pairswap.core.factory import Factory
from pairswap.core.pair import Pair
from pairswap.state.assets import Token

FACTORY = "0x" + "fa" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
FEE_SINK = "0x" + "fe" * 20
ADMIN = "0x" + "ad" * 20


class FakeClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@dataclass
class World:
    clock: FakeClock
    factory: Factory
    token_a: Token
    token_b: Token
    pair: Pair

    def deposit(self, provider: str, amount_a: int, amount_b: int) -> int:
        """Fund `provider`, move both amounts into the pair and mint shares to `provider`."""
        self.token_a.mint(provider, amount_a)
        self.token_b.mint(provider, amount_b)
        self.token_a.transfer(provider, self.pair.address, amount_a)
        self.token_b.transfer(provider, self.pair.address, amount_b)
        return self.pair.mint(provider)

    def pay_in(self, token: Token, payer: str, amount: int) -> None:
        token.mint(payer, amount)
        token.transfer(payer, self.pair.address, amount)


def make_world(config: PairswapConfig | None = None, *, now: int = 1_000_000) -> World:
    clock = FakeClock(now)
    factory = Factory(FACTORY, config=config or PairswapConfig(fee_to_setter=ADMIN), clock=clock)
    token_a = Token("0x" + "11" * 20, "AAA")
    token_b = Token("0x" + "22" * 20, "BBB")
    pair = factory.create_pair(token_b, token_a)
    return World(clock=clock, factory=factory, token_a=token_a, token_b=token_b, pair=pair)


@pytest.fixture
def world() -> World:
    return make_world()


@pytest.fixture
def small_world() -> World:
    """A pair whose first deposit locks only 100 shares, so (1000, 1000) is a valid seed."""
    return make_world(PairswapConfig(minimum_liquidity=100, fee_to_setter=ADMIN))


@pytest.fixture
def world_builder():
    """`make_world` itself, for tests that need several fresh pairs (e.g. property tests)."""
    return make_world
