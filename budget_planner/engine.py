"""Planner facade tying the ledger, projection, persistence and theme together.

The presentation layer talks only to :class:`BudgetPlanner`. It reads
``items()``, ``projection`` and ``settings`` and calls the add/remove and
setter methods; every successful mutation is mirrored to the durable store.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional, Tuple

from .errors import ValidationError
from .ledger import Ledger
from .models import (
    MAX_SAVING_PERCENTAGE,
    MIN_SAVING_PERCENTAGE,
    TIME_UNITS,
    BudgetItem,
    ItemId,
    Projection,
    Settings,
)
from .normalize import as_number, coerce_amount
from .projection import project
from .storage import KeyValueStore, PersistenceSynchronizer
from .theme import ColorSchemeSignal, StaticColorScheme, ThemeResolver, ThemeState

logger = logging.getLogger(__name__)


class BudgetPlanner:
    """Owns the single in-memory copy of the ledger and settings."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        signal: Optional[ColorSchemeSignal] = None,
        seed: Optional[bool] = None,
    ):
        self.sync = PersistenceSynchronizer(store, seed=seed)
        state = self.sync.load()
        self.ledger = Ledger(state.items)
        self._settings = state.settings
        self._projection: Optional[Projection] = None

        self.theme = ThemeResolver(signal or StaticColorScheme(), state.settings.theme_preference)
        self.theme.start()

        self._unsubscribe_ledger = self.ledger.subscribe(self._on_ledger_change)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    def items(self) -> Tuple[BudgetItem, ...]:
        return self.ledger.items()

    @property
    def projection(self) -> Projection:
        if self._projection is None:
            self._projection = project(self.ledger.items(), self._settings)
        return self._projection

    @property
    def dark_mode(self) -> bool:
        return self.theme.resolve().dark

    def theme_state(self) -> ThemeState:
        return self.theme.resolve()

    # ------------------------------------------------------------------
    # Ledger mutations
    # ------------------------------------------------------------------

    def add_item(self, name: Any, price: Any, category: Optional[str] = None) -> BudgetItem:
        return self.ledger.add(name, price, category)

    def remove_item(self, item_id: ItemId) -> bool:
        return self.ledger.remove(item_id)

    def _on_ledger_change(self, _ledger: Ledger) -> None:
        self._projection = None
        self._persist()

    # ------------------------------------------------------------------
    # Settings mutations
    # ------------------------------------------------------------------

    def _update_settings(self, **changes: Any) -> Settings:
        self._settings = dataclasses.replace(self._settings, **changes)
        self._projection = None
        self._persist()
        return self._settings

    def set_income(self, income: Any) -> Settings:
        """Set monthly income; ``None`` or an empty string clears it."""
        if income is None or (isinstance(income, str) and not income.strip()):
            return self._update_settings(income=None)
        value = coerce_amount(income)
        if value is None:
            raise ValidationError(ValidationError.INVALID_SETTING, "Income must be a non-negative number.")
        return self._update_settings(income=value)

    def set_saving_percentage(self, percentage: Any) -> Settings:
        value = as_number(percentage)
        if (
            value is None
            or not float(value).is_integer()
            or not MIN_SAVING_PERCENTAGE <= value <= MAX_SAVING_PERCENTAGE
        ):
            raise ValidationError(
                ValidationError.INVALID_SETTING,
                f"Saving percentage must be a whole number between {MIN_SAVING_PERCENTAGE} and {MAX_SAVING_PERCENTAGE}.",
            )
        return self._update_settings(saving_percentage=int(value))

    def set_time_unit(self, time_unit: str) -> Settings:
        if time_unit not in TIME_UNITS:
            raise ValidationError(
                ValidationError.INVALID_SETTING,
                f"Time unit must be one of: {', '.join(TIME_UNITS)}.",
            )
        return self._update_settings(time_unit=time_unit)

    def set_wallet(self, wallet: Any) -> Settings:
        value = as_number(wallet)
        if value is None:
            raise ValidationError(ValidationError.INVALID_SETTING, "Wallet balance must be a number.")
        return self._update_settings(wallet=value)

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    def choose_theme(self, dark: bool) -> ThemeState:
        preference = self.theme.choose(dark)
        self._update_settings(theme_preference=preference)
        return self.theme.resolve()

    def toggle_theme(self) -> ThemeState:
        return self.choose_theme(not self.dark_mode)

    # ------------------------------------------------------------------
    # Persistence and lifecycle
    # ------------------------------------------------------------------

    def _persist(self) -> bool:
        return self.sync.save(self.ledger.items(), self._settings)

    def close(self) -> None:
        """Release the OS theme subscription and the ledger listener."""
        self.theme.close()
        self._unsubscribe_ledger()
        logger.debug("Planner closed")

    def __enter__(self) -> 'BudgetPlanner':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
