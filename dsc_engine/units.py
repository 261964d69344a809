"""Conversions between human amounts and 18-decimal fixed point."""
from __future__ import annotations

from decimal import Decimal

from .constants import MAX_HEALTH_FACTOR, PRECISION


def parse_units(value: int | float | str, scale: int = PRECISION) -> int:
    """``"1.5"`` -> ``1500000000000000000``; truncates below the scale."""
    return int(Decimal(str(value)) * scale)


def format_units(value: int, scale: int = PRECISION, places: int = 4) -> str:
    """Render a fixed-point amount with thousands separators."""
    return f"{Decimal(value) / scale:,.{places}f}"


def format_health_factor(value: int) -> str:
    if value == MAX_HEALTH_FACTOR:
        return "inf"
    return format_units(value)
