"""Normalization of persisted planner records.

Persisted data may come from any earlier version of the planner. Older
records lack ``category``; some carry extra fields such as ``image`` or are
missing ``wallet`` entirely. Everything read from the durable store passes
through this module, which fills defaults for missing fields, ignores unknown
ones and drops records that cannot be repaired safely.
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Mapping, Optional

from .config import (
    DEFAULT_CATEGORY,
    DEFAULT_SAVING_PERCENTAGE,
    DEFAULT_TIME_UNIT,
    DEFAULT_WALLET,
)
from .models import (
    CATEGORIES,
    MAX_SAVING_PERCENTAGE,
    MIN_SAVING_PERCENTAGE,
    THEMES,
    TIME_UNITS,
    Amount,
    BudgetItem,
    ItemId,
    Settings,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def as_number(value: Any) -> Optional[Amount]:
    """Return ``value`` as a finite int/float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        # Ints pass through unchanged; ones beyond float range are rejected.
        try:
            float(value)
        except OverflowError:
            return None
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def coerce_price(value: Any) -> Optional[Amount]:
    """Coerce a price to a positive finite number.

    Args:
        value: Raw price, either numeric or a numeric string

    Returns:
        The price as int (when integer-valued) or float, or ``None`` when the
        value is not numeric, NaN, infinite, zero or negative.

    Example:
        >>> coerce_price("7800000")
        7800000
        >>> coerce_price(-1) is None
        True
    """
    number = as_number(value)
    if number is None or number <= 0:
        return None
    return number


def coerce_amount(value: Any) -> Optional[Amount]:
    """Coerce a non-negative amount such as income; ``None`` if invalid."""
    number = as_number(value)
    if number is None or number < 0:
        return None
    return number


def coerce_name(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def coerce_category(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in CATEGORIES:
        return value.strip().lower()
    return DEFAULT_CATEGORY


def _coerce_id(value: Any) -> Optional[ItemId]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def normalize_item(raw: Any) -> Optional[BudgetItem]:
    """Turn a structurally unknown persisted record into a ``BudgetItem``.

    Records without a usable name or a positive price are dropped rather
    than repaired. Unknown categories default to ``wants`` and extra fields
    are ignored.
    """
    if not isinstance(raw, Mapping):
        return None
    name = coerce_name(raw.get('name'))
    price = coerce_price(raw.get('price'))
    if name is None or price is None:
        return None
    return BudgetItem(
        id=_coerce_id(raw.get('id')),
        name=name,
        price=price,
        category=coerce_category(raw.get('category')),
    )


def normalize_items(raw_items: Any) -> List[BudgetItem]:
    """Normalize a persisted item list, preserving order and dropping bad records."""
    if not isinstance(raw_items, list):
        if raw_items is not None:
            logger.warning("Persisted items are not a list (%s); ignoring", type(raw_items).__name__)
        return []
    items: List[BudgetItem] = []
    for index, raw in enumerate(raw_items):
        item = normalize_item(raw)
        if item is None:
            logger.info("Dropping malformed persisted item at position %d", index)
            continue
        items.append(item)
    return items


def normalize_saving_percentage(value: Any) -> int:
    number = as_number(value)
    if number is None:
        return DEFAULT_SAVING_PERCENTAGE
    return int(min(max(int(number), MIN_SAVING_PERCENTAGE), MAX_SAVING_PERCENTAGE))


def normalize_time_unit(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in TIME_UNITS:
        return value.strip().lower()
    return DEFAULT_TIME_UNIT


def normalize_theme(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip().lower() in THEMES:
        return value.strip().lower()
    return None


def normalize_settings(raw: Mapping[str, Any]) -> Settings:
    """Build ``Settings`` from persisted scalars, defaulting each missing key.

    Keys follow the persisted names (``income``, ``savingPercentage``,
    ``timeUnit``, ``wallet``, ``theme``).
    """
    wallet = as_number(raw.get('wallet'))
    return Settings(
        income=coerce_amount(raw.get('income')),
        saving_percentage=normalize_saving_percentage(raw.get('savingPercentage')),
        time_unit=normalize_time_unit(raw.get('timeUnit')),
        wallet=DEFAULT_WALLET if wallet is None else wallet,
        theme_preference=normalize_theme(raw.get('theme')),
    )

