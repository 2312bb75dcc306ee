#!/usr/bin/env python3
"""
Pair tooling: derive pair addresses and run a scripted pair simulation.

    python tools/pair_cli.py address --factory 0x5C69... --asset 0xA0b8... --asset 0xC02a... \
        --init-code-hash 0x96e8...
    python tools/pair_cli.py simulate --deposit-a 1000000 --deposit-b 4000000 --swaps 20

Both subcommands print a JSON report to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from pairswap.config import PairswapConfig, configure_logging, load_config
from pairswap.core.address import PAIR_INIT_CODE_HASH, compute_pair_address, sort_assets
from pairswap.core.cpmm import get_amount_out
from pairswap.core.factory import Factory
from pairswap.core.oracle import observe, price_to_fraction, twap
from pairswap.errors import PairswapError
from pairswap.state.assets import Token

logger = logging.getLogger("pairswap.tools.pair_cli")

TRADER = "0x" + "aa" * 20
PROVIDER = "0x" + "bb" * 20
FACTORY = "0x" + "fa" * 20
ASSET_A = "0x" + "11" * 20
ASSET_B = "0x" + "22" * 20


class _SteppingClock:
    def __init__(self, start: int, step: int) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        return self.now

    def tick(self) -> None:
        self.now += self.step


def cmd_address(args: argparse.Namespace) -> dict:
    asset_a, asset_b = sort_assets(args.asset[0], args.asset[1])
    init_code_hash = args.init_code_hash or PAIR_INIT_CODE_HASH
    return {
        "factory": args.factory.lower(),
        "asset_a": asset_a,
        "asset_b": asset_b,
        "init_code_hash": init_code_hash,
        "pair": compute_pair_address(args.factory, asset_a, asset_b, init_code_hash),
    }


def cmd_simulate(args: argparse.Namespace, config: PairswapConfig) -> dict:
    clock = _SteppingClock(start=args.start_time, step=args.seconds_per_swap)
    factory = Factory(FACTORY, config=config, clock=clock)
    token_a = Token(ASSET_A, "A")
    token_b = Token(ASSET_B, "B")
    pair = factory.create_pair(token_a, token_b)

    token_a.mint(PROVIDER, args.deposit_a)
    token_b.mint(PROVIDER, args.deposit_b)
    token_a.transfer(PROVIDER, pair.address, args.deposit_a)
    token_b.transfer(PROVIDER, pair.address, args.deposit_b)
    liquidity = pair.mint(PROVIDER)

    first = observe(pair, clock.now)
    token_a.mint(TRADER, args.swap_amount * args.swaps)
    token_b.mint(TRADER, args.swap_amount * args.swaps)
    rejected = 0
    for i in range(args.swaps):
        clock.tick()
        reserves = pair.get_reserves()
        a_to_b = i % 2 == 0
        token_in = token_a if a_to_b else token_b
        reserve_in, reserve_out = (
            (reserves.reserve_a, reserves.reserve_b) if a_to_b else (reserves.reserve_b, reserves.reserve_a)
        )
        amount_out = get_amount_out(args.swap_amount, reserve_in, reserve_out)
        token_in.transfer(TRADER, pair.address, args.swap_amount)
        try:
            if a_to_b:
                pair.swap(0, amount_out, TRADER)
            else:
                pair.swap(amount_out, 0, TRADER)
        except PairswapError as exc:
            rejected += 1
            logger.warning("swap %d rejected: %s", i, exc)
    clock.tick()
    last = observe(pair, clock.now)
    price_a, price_b = twap(first, last)
    reserves = pair.get_reserves()
    return {
        "pair": pair.address,
        "liquidity_minted": liquidity,
        "reserves": [reserves.reserve_a, reserves.reserve_b],
        "k": reserves.k,
        "total_supply": pair.total_supply,
        "swaps": args.swaps,
        "rejected": rejected,
        "twap_a_in_b": str(price_to_fraction(price_a)),
        "twap_b_in_a": str(price_to_fraction(price_b)),
    }


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Constant-product pair tooling")
    ap.add_argument("--config", type=str, default="", help="YAML config file (default: PAIRSWAP_* env vars)")
    ap.add_argument("--log-level", type=str, default="", help="override the configured log level")
    sub = ap.add_subparsers(dest="command", required=True)

    addr = sub.add_parser("address", help="derive a pair address")
    addr.add_argument("--factory", type=str, required=True)
    addr.add_argument("--asset", type=str, action="append", required=True, help="asset address (twice)")
    addr.add_argument("--init-code-hash", type=str, default="")

    sim = sub.add_parser("simulate", help="seed a pair and run alternating swaps")
    sim.add_argument("--deposit-a", type=int, default=1_000_000)
    sim.add_argument("--deposit-b", type=int, default=4_000_000)
    sim.add_argument("--swaps", type=int, default=10)
    sim.add_argument("--swap-amount", type=int, default=1_000)
    sim.add_argument("--seconds-per-swap", type=int, default=12)
    sim.add_argument("--start-time", type=int, default=1_700_000_000)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    config = load_config(args.config) if args.config else PairswapConfig.from_env()
    if args.log_level:
        config = replace(config, log_level=args.log_level)
    configure_logging(config)

    try:
        if args.command == "address":
            if len(args.asset) != 2:
                raise SystemExit("--asset must be given exactly twice")
            report = cmd_address(args)
        else:
            if args.deposit_a <= 0 or args.deposit_b <= 0 or args.swaps < 0 or args.swap_amount <= 0:
                raise SystemExit("deposits and swap amount must be positive, swaps non-negative")
            report = cmd_simulate(args, config)
    except (PairswapError, ValueError) as exc:
        print(json.dumps({"ok": False, "error": str(exc)}), file=sys.stderr)
        return 1

    print(json.dumps({"ok": True, **report}, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
