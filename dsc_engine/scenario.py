"""Deploy an engine from configuration and replay scripted operations on it.

A scenario file looks like::

    funding:
      alice: {weth: 10}
      bob: {weth: 20}
    steps:
      - {op: deposit_and_mint, user: alice, asset: weth, collateral: 10, dsc: 100}
      - {op: set_price, asset: weth, price: 18}
      - {op: liquidate, liquidator: bob, user: alice, asset: weth, debt: 100}

Amounts are whole tokens and converted to 18-decimal fixed point. Before each
operation that pulls tokens, the runner approves the engine for exactly the
amount involved.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import AppConfig
from .errors import EngineError
from .interfaces import PriceFeed
from .oracles import PythPriceFeed, StaticPriceFeed
from .services import DSCEngine
from .tokens import FungibleToken, PeggedToken
from .units import parse_units

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """An engine wired to its tokens and feeds, keyed by asset address."""

    engine: DSCEngine
    dsc: PeggedToken
    tokens: dict[str, FungibleToken]
    feeds: dict[str, PriceFeed]
    users: set[str] = field(default_factory=set)


def deploy(config: AppConfig) -> Deployment:
    """Create tokens and feeds from config and hand DSC ownership to the engine."""
    tokens: dict[str, FungibleToken] = {}
    feeds: dict[str, PriceFeed] = {}
    for asset in config.collateral:
        tokens[asset.address] = FungibleToken(asset.address, symbol=asset.symbol)
        if asset.price is not None:
            feeds[asset.address] = StaticPriceFeed.from_usd(asset.price)
        else:
            feeds[asset.address] = PythPriceFeed(asset.pyth_feed_id or "", config.pyth)

    dsc_cfg = config.engine.dsc
    dsc = PeggedToken(dsc_cfg.address, owner=dsc_cfg.deployer, symbol=dsc_cfg.symbol)
    engine = DSCEngine(
        list(tokens.values()), list(feeds.values()), dsc, address=config.engine.address
    )
    dsc.transfer_ownership(dsc_cfg.deployer, engine.address)
    return Deployment(engine=engine, dsc=dsc, tokens=tokens, feeds=feeds)


@dataclass(frozen=True)
class StepResult:
    index: int
    op: str
    ok: bool
    detail: str = ""


def load_scenario(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw.get("steps", []), list):
        raise ValueError("Scenario 'steps' must be a list")
    return raw


class ScenarioRunner:
    """Replay scenario steps; a failing step is reported and the replay goes on."""

    def __init__(self, deployment: Deployment) -> None:
        self.deployment = deployment
        self.engine = deployment.engine

    def fund(self, funding: dict[str, dict[str, Any]]) -> None:
        for user, balances in funding.items():
            self.deployment.users.add(user)
            for asset, amount in balances.items():
                self._token(asset).faucet(user, parse_units(amount))

    def run(self, scenario: dict[str, Any]) -> list[StepResult]:
        self.fund(scenario.get("funding", {}))
        results: list[StepResult] = []
        for index, step in enumerate(scenario.get("steps", []), start=1):
            op = str(step.get("op", ""))
            try:
                detail = self.apply(step)
            except EngineError as e:
                logger.warning("Step %d (%s) failed: %s", index, op, e)
                results.append(StepResult(index, op, False, f"{type(e).__name__}: {e}"))
            else:
                results.append(StepResult(index, op, True, detail))
        return results

    def apply(self, step: dict[str, Any]) -> str:
        op = step.get("op")
        handler = getattr(self, f"_op_{op}", None)
        if handler is None:
            raise ValueError(f"Unknown scenario op: {op!r}")
        for key in ("user", "liquidator"):
            if key in step:
                self.deployment.users.add(str(step[key]))
        return handler(step) or ""

    # ------------------------------------------------------------------
    # Ops
    # ------------------------------------------------------------------

    def _op_deposit(self, step: dict[str, Any]) -> None:
        user, asset, amount = step["user"], step["asset"], parse_units(step["amount"])
        self._token(asset).approve(user, self.engine.address, amount)
        self.engine.deposit_collateral(user, asset, amount)

    def _op_redeem(self, step: dict[str, Any]) -> None:
        self.engine.redeem_collateral(step["user"], step["asset"], parse_units(step["amount"]))

    def _op_mint(self, step: dict[str, Any]) -> None:
        self.engine.mint_dsc(step["user"], parse_units(step["amount"]))

    def _op_burn(self, step: dict[str, Any]) -> None:
        user, amount = step["user"], parse_units(step["amount"])
        self.deployment.dsc.approve(user, self.engine.address, amount)
        self.engine.burn_dsc(user, amount)

    def _op_deposit_and_mint(self, step: dict[str, Any]) -> None:
        user, asset = step["user"], step["asset"]
        collateral = parse_units(step["collateral"])
        self._token(asset).approve(user, self.engine.address, collateral)
        self.engine.deposit_collateral_and_mint_dsc(
            user, asset, collateral, parse_units(step["dsc"])
        )

    def _op_redeem_for_dsc(self, step: dict[str, Any]) -> None:
        user, dsc_amount = step["user"], parse_units(step["dsc"])
        self.deployment.dsc.approve(user, self.engine.address, dsc_amount)
        self.engine.redeem_collateral_for_dsc(
            user, step["asset"], parse_units(step["collateral"]), dsc_amount
        )

    def _op_liquidate(self, step: dict[str, Any]) -> str:
        liquidator, debt = step["liquidator"], parse_units(step["debt"])
        self.deployment.dsc.approve(liquidator, self.engine.address, debt)
        seized = self.engine.liquidate(liquidator, step["user"], step["asset"], debt)
        return f"seized {seized}"

    def _op_set_price(self, step: dict[str, Any]) -> None:
        feed = self.deployment.feeds.get(step["asset"])
        if not isinstance(feed, StaticPriceFeed):
            raise ValueError(f"Asset {step['asset']!r} has no settable price feed")
        feed.update_answer(StaticPriceFeed.from_usd(step["price"]).latest_price())

    def _token(self, asset: str) -> FungibleToken:
        try:
            return self.deployment.tokens[asset]
        except KeyError:
            raise ValueError(f"Unknown asset in scenario: {asset!r}") from None
