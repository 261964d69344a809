"""Engine errors. Every failure aborts the whole atomic step."""
from __future__ import annotations


class EngineError(Exception):
    """Base error class for engine errors"""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class LengthMismatch(EngineError):
    """Collateral asset list and price feed list differ in length"""

    def __init__(self, assets: int, feeds: int) -> None:
        super().__init__(f"{assets} collateral assets but {feeds} price feeds")
        self.assets = assets
        self.feeds = feeds


class DuplicateAsset(EngineError):
    """The same collateral asset was listed twice"""

    def __init__(self, asset: str) -> None:
        super().__init__(f"Collateral asset listed twice: {asset}")
        self.asset = asset


# ---------------------------------------------------------------------------
# Input validation / listing
# ---------------------------------------------------------------------------


class InvalidAmount(EngineError):
    """Amount must be more than zero"""

    def __init__(self, amount: int) -> None:
        super().__init__(f"Amount must be more than zero, got {amount}")
        self.amount = amount


class UnsupportedAsset(EngineError):
    """Asset is not an allow-listed collateral"""

    def __init__(self, asset: str) -> None:
        super().__init__(f"Collateral asset not supported: {asset}")
        self.asset = asset


# ---------------------------------------------------------------------------
# Solvency
# ---------------------------------------------------------------------------


class HealthFactorBroken(EngineError):
    """Health factor would be (or is) below the minimum"""

    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(f"Health factor broken for {user}: {health_factor}")
        self.user = user
        self.health_factor = health_factor


class LiquidatorHealthFactorBroken(HealthFactorBroken):
    """Liquidating left the liquidator's own position below the minimum"""


class HealthFactorOk(EngineError):
    """Position is healthy and cannot be liquidated"""

    def __init__(self, user: str, health_factor: int) -> None:
        super().__init__(f"Health factor is ok for {user}: {health_factor}")
        self.user = user
        self.health_factor = health_factor


class HealthFactorNotImproved(EngineError):
    """Liquidation did not raise the user's health factor"""

    def __init__(self, user: str, starting: int, ending: int) -> None:
        super().__init__(
            f"Health factor not improved for {user}: {starting} -> {ending}"
        )
        self.user = user
        self.starting = starting
        self.ending = ending


# ---------------------------------------------------------------------------
# Ledger arithmetic
# ---------------------------------------------------------------------------


class InsufficientCollateral(EngineError):
    """Requested collateral decrease exceeds the deposited balance"""

    def __init__(self, user: str, asset: str, requested: int, available: int) -> None:
        super().__init__(
            f"{user} has {available} {asset} deposited, {requested} requested"
        )
        self.user = user
        self.asset = asset
        self.requested = requested
        self.available = available


class InsufficientDebt(EngineError):
    """Requested debt decrease exceeds the outstanding debt"""

    def __init__(self, user: str, requested: int, outstanding: int) -> None:
        super().__init__(f"{user} owes {outstanding}, {requested} requested")
        self.user = user
        self.requested = requested
        self.outstanding = outstanding


# ---------------------------------------------------------------------------
# Interactions with collaborators
# ---------------------------------------------------------------------------


class TransferFailed(EngineError):
    """An asset transfer reported failure"""


class MintFailed(EngineError):
    """The pegged token refused to mint"""


class InvalidPrice(EngineError):
    """A price feed returned a non-positive answer"""


class StalePrice(InvalidPrice):
    """A price feed answer is older than the allowed age"""


class TokenError(EngineError):
    """Base error for the in-memory token collaborators"""


class InsufficientBalance(TokenError):
    """Sender balance too low"""


class InsufficientAllowance(TokenError):
    """Spender allowance too low"""


class NotOwner(TokenError):
    """Caller is not the token owner"""
