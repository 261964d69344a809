"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .constants import DEFAULT_MAX_PRICE_AGE

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DscConfig:
    address: str = "dsc"
    symbol: str = "DSC"
    deployer: str = "deployer"


@dataclass(frozen=True)
class EngineConfig:
    address: str = "dsc-engine"
    dsc: DscConfig = field(default_factory=DscConfig)


@dataclass(frozen=True)
class CollateralConfig:
    """One collateral asset and where its price comes from.

    Exactly one of ``price`` (fixed USD price) and ``pyth_feed_id`` is set.
    """

    symbol: str = ""
    address: str = ""
    price: str | None = None
    pyth_feed_id: str | None = None


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    max_price_age: int = DEFAULT_MAX_PRICE_AGE


@dataclass(frozen=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    collateral: tuple[CollateralConfig, ...] = ()
    pyth: PythConfig = field(default_factory=PythConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_engine(raw: dict[str, Any]) -> EngineConfig:
    dsc = raw.get("dsc", {})
    return EngineConfig(
        address=str(raw.get("address", EngineConfig.address)),
        dsc=DscConfig(
            address=str(dsc.get("address", DscConfig.address)),
            symbol=str(dsc.get("symbol", DscConfig.symbol)),
            deployer=str(dsc.get("deployer", DscConfig.deployer)),
        ),
    )


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _build_collateral(raw: list[dict[str, Any]]) -> tuple[CollateralConfig, ...]:
    assets: list[CollateralConfig] = []
    for c in raw:
        symbol = str(c.get("symbol", ""))
        assets.append(
            CollateralConfig(
                symbol=symbol,
                address=str(c.get("address", symbol.lower())),
                price=_optional_str(c.get("price")),
                pyth_feed_id=_optional_str(c.get("pyth_feed_id")),
            )
        )
    return tuple(assets)


def _build_pyth(raw: dict[str, Any]) -> PythConfig:
    return PythConfig(
        hermes_url=raw.get("hermes_url", PythConfig.hermes_url),
        max_price_age=int(raw.get("max_price_age", DEFAULT_MAX_PRICE_AGE)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate engine configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        engine=_build_engine(raw.get("engine", {})),
        collateral=_build_collateral(raw.get("collateral", [])),
        pyth=_build_pyth(raw.get("pyth", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.collateral:
        raise ValueError("At least one collateral asset must be configured")

    seen: set[str] = set()
    for asset in cfg.collateral:
        if not asset.address:
            raise ValueError(f"Collateral '{asset.symbol}' has no address")
        if asset.address in seen:
            raise ValueError(f"Collateral address '{asset.address}' listed twice")
        seen.add(asset.address)
        if (asset.price is None) == (asset.pyth_feed_id is None):
            raise ValueError(
                f"Collateral '{asset.symbol}' needs exactly one of price or pyth_feed_id"
            )

    if cfg.engine.address == cfg.engine.dsc.address:
        raise ValueError("Engine and DSC token cannot share an address")
