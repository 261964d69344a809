"""Health factor math; every solvency gate is built on it.

    health_factor = (collateral_usd * LIQUIDATION_THRESHOLD // LIQUIDATION_PRECISION)
                    * PRECISION // total_debt

Values are 18-decimal fixed point; 1e18 is the solvency line.
"""
from __future__ import annotations

from .constants import (
    LIQUIDATION_PRECISION,
    LIQUIDATION_THRESHOLD,
    MAX_HEALTH_FACTOR,
    MIN_HEALTH_FACTOR,
    PRECISION,
)


def adjusted_collateral(collateral_usd: int) -> int:
    """Share of the collateral value that counts as borrowing power."""
    return collateral_usd * LIQUIDATION_THRESHOLD // LIQUIDATION_PRECISION


def calculate_health_factor(total_debt: int, collateral_usd: int) -> int:
    """Health factor of a position; MAX_HEALTH_FACTOR when there is no debt."""
    if total_debt == 0:
        return MAX_HEALTH_FACTOR
    return adjusted_collateral(collateral_usd) * PRECISION // total_debt


def is_liquidatable(health_factor: int) -> bool:
    return health_factor < MIN_HEALTH_FACTOR


def max_mintable(total_debt: int, collateral_usd: int) -> int:
    """Additional debt a position can take on before breaking the minimum."""
    return max(adjusted_collateral(collateral_usd) - total_debt, 0)
