"""Collateral-backed synthetic dollar engine."""
from .errors import EngineError
from .health import calculate_health_factor
from .services import DSCEngine
from .tokens import FungibleToken, PeggedToken

__all__ = [
    "DSCEngine",
    "EngineError",
    "FungibleToken",
    "PeggedToken",
    "calculate_health_factor",
]
