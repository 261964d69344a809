"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from dsc_engine.config import AppConfig, CollateralConfig, EngineConfig, PythConfig
from dsc_engine.oracles import StaticPriceFeed
from dsc_engine.services import DSCEngine
from dsc_engine.tokens import FungibleToken, PeggedToken

ENGINE = "dsc-engine"
DEPLOYER = "deployer"
USER = "alice"
LIQUIDATOR = "bob"

ETH_USD_PRICE = 2000 * 10**8
BTC_USD_PRICE = 1000 * 10**8

COLLATERAL_AMOUNT = 10 * 10**18  # 10 WETH == 20,000 USD
AMOUNT_TO_MINT = 100 * 10**18
COLLATERAL_TO_COVER = 20 * 10**18
STARTING_BALANCE = 10 * 10**18


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture()
def weth() -> FungibleToken:
    token = FungibleToken("weth", symbol="WETH")
    token.faucet(USER, STARTING_BALANCE)
    return token


@pytest.fixture()
def wbtc() -> FungibleToken:
    token = FungibleToken("wbtc", symbol="WBTC")
    token.faucet(USER, STARTING_BALANCE)
    return token


@pytest.fixture()
def eth_usd() -> StaticPriceFeed:
    return StaticPriceFeed(ETH_USD_PRICE)


@pytest.fixture()
def btc_usd() -> StaticPriceFeed:
    return StaticPriceFeed(BTC_USD_PRICE)


@pytest.fixture()
def dsc() -> PeggedToken:
    return PeggedToken("dsc", owner=DEPLOYER)


# ---------------------------------------------------------------------------
# Engine states
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine(
    weth: FungibleToken,
    wbtc: FungibleToken,
    eth_usd: StaticPriceFeed,
    btc_usd: StaticPriceFeed,
    dsc: PeggedToken,
) -> DSCEngine:
    dsce = DSCEngine([weth, wbtc], [eth_usd, btc_usd], dsc, address=ENGINE)
    dsc.transfer_ownership(DEPLOYER, ENGINE)
    return dsce


@pytest.fixture()
def deposited(engine: DSCEngine, weth: FungibleToken) -> DSCEngine:
    weth.approve(USER, ENGINE, COLLATERAL_AMOUNT)
    engine.deposit_collateral(USER, weth.address, COLLATERAL_AMOUNT)
    return engine


@pytest.fixture()
def minted(engine: DSCEngine, weth: FungibleToken) -> DSCEngine:
    weth.approve(USER, ENGINE, COLLATERAL_AMOUNT)
    engine.deposit_collateral_and_mint_dsc(
        USER, weth.address, COLLATERAL_AMOUNT, AMOUNT_TO_MINT
    )
    return engine


@pytest.fixture()
def liquidator(
    minted: DSCEngine, weth: FungibleToken, dsc: PeggedToken
) -> str:
    """A liquidator holding AMOUNT_TO_MINT DSC backed by its own healthy position."""
    weth.faucet(LIQUIDATOR, COLLATERAL_TO_COVER)
    weth.approve(LIQUIDATOR, ENGINE, COLLATERAL_TO_COVER)
    minted.deposit_collateral_and_mint_dsc(
        LIQUIDATOR, weth.address, COLLATERAL_TO_COVER, AMOUNT_TO_MINT
    )
    dsc.approve(LIQUIDATOR, ENGINE, AMOUNT_TO_MINT)
    return LIQUIDATOR


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        engine=EngineConfig(address=ENGINE),
        collateral=(
            CollateralConfig(symbol="WETH", address="weth", price="2000"),
            CollateralConfig(symbol="WBTC", address="wbtc", price="1000"),
        ),
        pyth=PythConfig(hermes_url="https://hermes.example.com"),
    )


SAMPLE_YAML = textwrap.dedent("""\
    engine:
      address: engine-1
      dsc:
        address: dsc-1
        symbol: DSC
        deployer: deployer
    collateral:
      - symbol: WETH
        address: weth
        price: 2000
      - symbol: WBTC
        address: wbtc
        pyth_feed_id: "0xabc123"
    pyth:
      hermes_url: "https://hermes.example.com"
      max_price_age: 600
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


SAMPLE_SCENARIO = textwrap.dedent("""\
    funding:
      alice: {weth: 10}
      bob: {weth: 20}
    steps:
      - {op: deposit_and_mint, user: alice, asset: weth, collateral: 10, dsc: 100}
      - {op: deposit_and_mint, user: bob, asset: weth, collateral: 20, dsc: 100}
      - {op: mint, user: alice, amount: 10000}
      - {op: set_price, asset: weth, price: 18}
      - {op: liquidate, liquidator: bob, user: alice, asset: weth, debt: 100}
""")


@pytest.fixture()
def sample_scenario_path(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.yaml"
    path.write_text(SAMPLE_SCENARIO)
    return path
