"""Command-line interface for the DSC engine."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import AppConfig, load_config
from .errors import InvalidPrice
from .health import max_mintable
from .logging_setup import configure_logging
from .oracles import PythPriceFeed
from .oracles.pyth import refresh_feeds
from .scenario import Deployment, ScenarioRunner, deploy, load_scenario
from .units import format_health_factor, format_units


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="dsc-engine",
        description="Collateral-backed synthetic dollar engine",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("prices", help="Show the current USD price of every collateral")

    replay_parser = sub.add_parser("replay", help="Replay a scenario file")
    replay_parser.add_argument("scenario", help="Path to a scenario YAML file")

    return parser


async def _refresh_pyth(deployment: Deployment, config: AppConfig) -> None:
    pyth_feeds = [f for f in deployment.feeds.values() if isinstance(f, PythPriceFeed)]
    if pyth_feeds:
        await refresh_feeds(pyth_feeds, config.pyth.hermes_url)


def _print_prices(deployment: Deployment) -> None:
    print(f"{'ASSET':<12}{'USD':>20}")
    for address, token in deployment.tokens.items():
        try:
            price = format_units(deployment.feeds[address].latest_price(), 10**8, 2)
        except InvalidPrice as e:
            price = f"unavailable ({e})"
        print(f"{token.symbol:<12}{price:>20}")


def _print_accounts(deployment: Deployment) -> None:
    engine = deployment.engine
    print(f"{'USER':<16}{'DEBT':>18}{'COLLATERAL USD':>20}{'HEALTH':>14}{'MINTABLE':>18}")
    for user in sorted(deployment.users):
        info = engine.get_account_information(user)
        debt, usd = info.total_dsc_minted, info.collateral_value_usd
        health = engine.calculate_health_factor(debt, usd)
        print(
            f"{user:<16}{format_units(debt):>18}{format_units(usd):>20}"
            f"{format_health_factor(health):>14}"
            f"{format_units(max_mintable(debt, usd)):>18}"
        )


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit code."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    deployment = deploy(config)
    await _refresh_pyth(deployment, config)

    if args.command == "prices":
        _print_prices(deployment)
        return 0

    if args.command == "replay":
        runner = ScenarioRunner(deployment)
        results = runner.run(load_scenario(args.scenario))
        for r in results:
            status = "ok" if r.ok else "FAILED"
            print(f"[{r.index:>3}] {r.op:<18} {status:<7} {r.detail}")
        print()
        _print_accounts(deployment)
        return 0 if all(r.ok for r in results) else 2

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
