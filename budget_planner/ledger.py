"""Ordered in-memory collection of budget items."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from .errors import ValidationError
from .models import BudgetItem, ItemId
from .normalize import coerce_category, coerce_name, coerce_price

logger = logging.getLogger(__name__)

LedgerListener = Callable[['Ledger'], None]

FRAME_COLUMNS = ['id', 'name', 'price', 'category']


class Ledger:
    """Budget items in insertion order with add/remove validation.

    Ids come from a monotonically incrementing counter, so rapid successive
    adds never collide. Hydrated items keep their persisted integer id when
    it is unique; anything else is given a fresh one.
    """

    def __init__(self, items: Iterable[BudgetItem] = ()):
        items = list(items)
        self._items: List[BudgetItem] = []
        self._listeners: List[LedgerListener] = []

        existing = [item.id for item in items if isinstance(item.id, int)]
        self._ids = itertools.count(max(existing, default=0) + 1)

        seen: set = set()
        for item in items:
            if not isinstance(item.id, int) or item.id in seen:
                item = BudgetItem(
                    id=next(self._ids),
                    name=item.name,
                    price=item.price,
                    category=item.category,
                )
            seen.add(item.id)
            self._items.append(item)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def items(self) -> Tuple[BudgetItem, ...]:
        return tuple(self._items)

    def get(self, item_id: ItemId) -> Optional[BudgetItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[BudgetItem]:
        return iter(tuple(self._items))

    def to_frame(self) -> pd.DataFrame:
        """Return the ledger as a DataFrame in display order."""
        return pd.DataFrame([item.to_record() for item in self._items], columns=FRAME_COLUMNS)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, name: Any, price: Any, category: Optional[str] = None) -> BudgetItem:
        """Append a new item.

        Args:
            name: Item name; must be non-empty after trimming
            price: Positive finite number (numeric strings are accepted)
            category: One of the known categories; anything else means ``wants``

        Returns:
            The stored item with its freshly assigned id

        Raises:
            ValidationError: If the name or price is invalid. The ledger is
                left unchanged.
        """
        clean_name = coerce_name(name)
        if clean_name is None:
            raise ValidationError(ValidationError.INVALID_NAME, "Please enter a valid item name.")
        clean_price = coerce_price(price)
        if clean_price is None:
            raise ValidationError(ValidationError.INVALID_PRICE, "Please enter a price greater than zero.")

        item = BudgetItem(
            id=next(self._ids),
            name=clean_name,
            price=clean_price,
            category=coerce_category(category),
        )
        self._items.append(item)
        logger.debug("Added item %s (%s)", item.id, item.name)
        self._notify()
        return item

    def remove(self, item_id: ItemId) -> bool:
        """Remove an item by id; returns ``False`` if no such item exists."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                logger.debug("Removed item %s", item_id)
                self._notify()
                return True
        return False

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: LedgerListener) -> Callable[[], None]:
        """Register a mutation listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

