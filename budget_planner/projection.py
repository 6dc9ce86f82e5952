"""Projection of savings targets from a ledger and planner settings.

Everything here is pure: the same items and settings always produce the
same ``Projection``. Savings per time unit use fixed approximations of a
month (30 days, 4 weeks, 1/12 year) rather than calendar arithmetic.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable

import pandas as pd

from .models import CATEGORIES, CATEGORY_LABELS, Amount, BudgetItem, Projection, Settings

UNIT_FACTORS = {
    'day': lambda monthly: monthly / 30,
    'week': lambda monthly: monthly / 4,
    'month': lambda monthly: monthly,
    'year': lambda monthly: monthly * 12,
}


def monthly_saving(settings: Settings) -> Amount:
    """Income multiplied by the saving percentage; 0 when no income is set."""
    if not settings.income:
        return 0
    return settings.income * (settings.saving_percentage / 100)


def savings_per_unit(monthly: Amount, time_unit: str) -> Amount:
    return UNIT_FACTORS[time_unit](monthly)


def category_totals(items: Iterable[BudgetItem]) -> Dict[str, Amount]:
    totals: Dict[str, Amount] = {category: 0 for category in CATEGORIES}
    for item in items:
        totals[item.category] = totals.get(item.category, 0) + item.price
    return totals


def time_to_target(total_target: Amount, per_unit: Amount) -> int:
    """Number of whole periods needed; 0 means it cannot be determined."""
    if per_unit <= 0:
        return 0
    return int(math.ceil(total_target / per_unit))


def project(items: Iterable[BudgetItem], settings: Settings) -> Projection:
    """Compute the projection for ``items`` under ``settings``.

    Args:
        items: Ledger items in display order
        settings: Current planner settings

    Returns:
        A ``Projection`` with the total target, zero-filled category totals,
        savings per ``settings.time_unit`` and the number of periods needed
        to reach the target.

    Example:
        >>> items = [BudgetItem(1, 'A', 7_800_000), BudgetItem(2, 'B', 5_000_000)]
        >>> project(items, Settings(income=10_000_000)).time_to_target
        7
    """
    items = list(items)
    total = sum(item.price for item in items)
    monthly = monthly_saving(settings)
    per_unit = savings_per_unit(monthly, settings.time_unit)
    return Projection(
        total_target=total,
        category_totals=category_totals(items),
        monthly_saving=monthly,
        savings_per_unit=per_unit,
        time_to_target=time_to_target(total, per_unit),
        time_unit=settings.time_unit,
    )


def category_frame(projection: Projection) -> pd.DataFrame:
    """Category totals as a DataFrame for chart and table consumers."""
    total = projection.total_target
    rows = [
        {
            'category': category,
            'label': CATEGORY_LABELS[category],
            'total': projection.category_totals.get(category, 0),
            'share': (projection.category_totals.get(category, 0) / total) if total else 0.0,
        }
        for category in CATEGORIES
    ]
    return pd.DataFrame(rows, columns=['category', 'label', 'total', 'share'])
