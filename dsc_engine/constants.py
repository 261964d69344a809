"""Fixed-point scales and risk parameters, fixed at deployment."""

# Fixed point scale factors
PRECISION = 10**18
FEED_DECIMALS = 8
ADDITIONAL_FEED_PRECISION = 10**10  # lifts an 8-decimal feed answer to 18 decimals

# Risk parameters (percent, scaled by LIQUIDATION_PRECISION)
LIQUIDATION_THRESHOLD = 50  # only half of the collateral value counts as borrowing power
LIQUIDATION_PRECISION = 100
LIQUIDATION_BONUS = 10

# Health factor bounds
MIN_HEALTH_FACTOR = PRECISION  # 1.0
MAX_HEALTH_FACTOR = 2**256 - 1  # reported for positions without debt

# Pyth price age limit (seconds)
DEFAULT_MAX_PRICE_AGE = 3 * 60 * 60
