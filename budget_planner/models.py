"""Data classes shared by the ledger, projection and storage layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .config import (
    DEFAULT_CATEGORY,
    DEFAULT_SAVING_PERCENTAGE,
    DEFAULT_TIME_UNIT,
    DEFAULT_WALLET,
)

Amount = Union[int, float]
ItemId = Union[int, str]

CATEGORIES = ("necessities", "wants", "investment")
CATEGORY_LABELS = {
    "necessities": "Necessities",
    "wants": "Wants",
    "investment": "Investment",
}
TIME_UNITS = ("day", "week", "month", "year")
THEMES = ("dark", "light")

MIN_SAVING_PERCENTAGE = 1
MAX_SAVING_PERCENTAGE = 100


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BudgetItem:
    id: Optional[ItemId]
    name: str
    price: Amount
    category: str = DEFAULT_CATEGORY

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'category': self.category,
        }


# ---------------------------------------------------------------------------
# Settings and derived state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Scalar planner settings.

    ``income`` is ``None`` until the user enters one; ``theme_preference`` is
    ``None`` while the OS colour scheme should be followed.
    """

    income: Optional[Amount] = None
    saving_percentage: int = DEFAULT_SAVING_PERCENTAGE
    time_unit: str = DEFAULT_TIME_UNIT
    wallet: Amount = DEFAULT_WALLET
    theme_preference: Optional[str] = None


@dataclass(frozen=True)
class Projection:
    """Read-only financial summary derived from a ledger and settings."""

    total_target: Amount
    category_totals: Dict[str, Amount] = field(default_factory=dict)
    monthly_saving: Amount = 0
    savings_per_unit: Amount = 0
    time_to_target: int = 0
    time_unit: str = DEFAULT_TIME_UNIT

    @property
    def is_determinable(self) -> bool:
        return self.savings_per_unit > 0
