"""Formatting utilities for currency and projection display."""

from __future__ import annotations

from typing import Union

from .models import Projection


def format_currency(amount: Union[float, int], include_symbol: bool = True) -> str:
    """Format an amount the way Indonesian Rupiah is written.

    Amounts are rounded to whole units for display only and grouped with
    dots.

    Args:
        amount: The amount to format
        include_symbol: Whether to prefix the ``Rp`` symbol

    Returns:
        Formatted currency string (e.g., "Rp 12.800.000" or "12.800.000")

    Example:
        >>> format_currency(12800000)
        'Rp 12.800.000'
        >>> format_currency(66666.67, include_symbol=False)
        '66.667'
    """
    whole = int(amount + 0.5) if amount >= 0 else -int(-amount + 0.5)
    formatted = f"{whole:,}".replace(",", ".")
    return f"Rp {formatted}" if include_symbol else formatted


def unit_label(unit: str) -> str:
    return unit[:1].upper() + unit[1:]


def format_time_to_target(projection: Projection) -> str:
    """Render the time to target, or ``N/A`` when it cannot be determined.

    Example:
        >>> format_time_to_target(Projection(total_target=10, savings_per_unit=2, time_to_target=5))
        '5 months'
    """
    if not projection.is_determinable:
        return "N/A"
    count = projection.time_to_target
    suffix = "" if count == 1 else "s"
    return f"{count} {projection.time_unit}{suffix}"
