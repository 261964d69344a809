"""Engine services: supply gateway, liquidation and the public facade."""
from .engine import DSCEngine
from .gateway import MintBurnGateway
from .liquidation import LiquidationEngine

__all__ = ["DSCEngine", "MintBurnGateway", "LiquidationEngine"]
