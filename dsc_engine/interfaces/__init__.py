"""Protocol interfaces for the engine's external collaborators."""
from .asset import FungibleAsset, PeggedToken
from .price_feed import PriceFeed
from .transactional import Transactional

__all__ = ["FungibleAsset", "PeggedToken", "PriceFeed", "Transactional"]
