"""Durable key-value storage and the persistence synchronizer.

The planner mirrors its ledger and settings into a small key-value store
after every mutation and restores them at startup. Values are stored as
JSON-encoded strings under fixed keys, so a store written by any version of
the planner can be read back; unreadable data falls back to defaults instead
of failing startup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config import SEED_ITEMS, SEED_ON_FIRST_RUN, STORE_PATH
from .errors import PersistenceError
from .models import BudgetItem, Settings
from .normalize import normalize_items, normalize_settings

logger = logging.getLogger(__name__)

ITEMS_KEY = 'items'
INCOME_KEY = 'income'
SAVING_PERCENTAGE_KEY = 'savingPercentage'
TIME_UNIT_KEY = 'timeUnit'
WALLET_KEY = 'wallet'
THEME_KEY = 'theme'

SETTINGS_KEYS = (INCOME_KEY, SAVING_PERCENTAGE_KEY, TIME_UNIT_KEY, WALLET_KEY, THEME_KEY)

ErrorListener = Callable[[PersistenceError], None]


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


class KeyValueStore:
    """Interface for the durable string key-value backend."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def set_many(self, values: Dict[str, str], deleted: Iterable[str] = ()) -> None:
        for key, value in values.items():
            self.set(key, value)
        for key in deleted:
            self.delete(key)


class MemoryStore(KeyValueStore):
    """Non-durable store, used for tests and ephemeral sessions."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Key-value store kept as a single JSON object on disk.

    Every write rewrites the whole file. A missing file reads as an empty
    store.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path or STORE_PATH)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PersistenceError(PersistenceError.CORRUPT, f"Store {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise PersistenceError(PersistenceError.UNAVAILABLE, f"Could not read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(PersistenceError.CORRUPT, f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
        except OSError as e:
            raise PersistenceError(PersistenceError.UNAVAILABLE, f"Failed to write store {self.path}: {e}") from e

    def _current(self) -> Dict[str, Any]:
        # A corrupt file is overwritten rather than blocking new writes.
        try:
            return self._read()
        except PersistenceError as e:
            if e.kind != PersistenceError.CORRUPT:
                raise
            logger.warning("Overwriting corrupt store %s", self.path)
            return {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def delete(self, key: str) -> None:
        self.set_many({}, deleted=[key])

    def set_many(self, values: Dict[str, str], deleted: Iterable[str] = ()) -> None:
        data = self._current()
        data.update(values)
        for key in deleted:
            data.pop(key, None)
        self._write(data)


# ---------------------------------------------------------------------------
# Synchronizer
# ---------------------------------------------------------------------------


@dataclass
class LoadedState:
    items: List[BudgetItem]
    settings: Settings
    first_run: bool = False


def _encode(value: Any) -> str:
    return json.dumps(value)


def _decode(key: str, raw: Optional[str]) -> Any:
    if raw is None:
        return None
    if not raw.strip():
        return ''
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        # Bare strings such as ``month`` or ``dark`` are accepted as-is.
        if key in (TIME_UNIT_KEY, THEME_KEY):
            return raw
        raise


def encode_state(items: Iterable[BudgetItem], settings: Settings) -> Dict[str, str]:
    """Serialize the ledger and settings into store values."""
    values = {
        ITEMS_KEY: _encode([item.to_record() for item in items]),
        INCOME_KEY: _encode('' if settings.income is None else settings.income),
        SAVING_PERCENTAGE_KEY: _encode(settings.saving_percentage),
        TIME_UNIT_KEY: _encode(settings.time_unit),
        WALLET_KEY: _encode(settings.wallet),
    }
    if settings.theme_preference is not None:
        values[THEME_KEY] = _encode(settings.theme_preference)
    return values


class PersistenceSynchronizer:
    """Owns the write path to the durable store.

    ``load`` never raises: an absent store yields defaults and unreadable
    data is logged and replaced by defaults. ``save`` never raises either;
    failures are logged, reported to error listeners and the in-memory state
    stays as it is.
    """

    def __init__(self, store: Optional[KeyValueStore] = None, seed: Optional[bool] = None):
        self.store = store if store is not None else JsonFileStore()
        self.seed = SEED_ON_FIRST_RUN if seed is None else seed
        self._error_listeners: List[ErrorListener] = []
        self.last_error: Optional[PersistenceError] = None

    def subscribe_errors(self, listener: ErrorListener) -> Callable[[], None]:
        self._error_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._error_listeners:
                self._error_listeners.remove(listener)

        return unsubscribe

    def _report(self, error: PersistenceError) -> None:
        self.last_error = error
        for listener in list(self._error_listeners):
            try:
                listener(error)
            except Exception:
                logger.exception("Persistence error listener failed")

    def _defaults(self) -> LoadedState:
        items = normalize_items(SEED_ITEMS) if self.seed else []
        return LoadedState(items=items, settings=Settings(), first_run=True)

    def load(self) -> LoadedState:
        """Restore items and settings, falling back to defaults where needed."""
        raw: Dict[str, Optional[str]] = {}
        try:
            for key in (ITEMS_KEY,) + SETTINGS_KEYS:
                raw[key] = self.store.get(key)
        except PersistenceError as e:
            logger.warning("Could not load planner state, using defaults: %s", e)
            self._report(e)
            return self._defaults()
        except OSError as e:
            error = PersistenceError(PersistenceError.UNAVAILABLE, f"Could not read store: {e}")
            logger.warning("Could not load planner state, using defaults: %s", error)
            self._report(error)
            return self._defaults()

        if all(value is None for value in raw.values()):
            logger.info("No stored planner state found, starting with defaults")
            return self._defaults()

        decoded: Dict[str, Any] = {}
        for key, value in raw.items():
            try:
                decoded[key] = _decode(key, value)
            except json.JSONDecodeError as e:
                error = PersistenceError(PersistenceError.CORRUPT, f"Stored value for '{key}' is corrupt: {e}")
                logger.warning("%s; using default", error)
                self._report(error)
                decoded[key] = None

        items = normalize_items(decoded.get(ITEMS_KEY))
        settings = normalize_settings(decoded)
        logger.info("Loaded %d item(s) from store", len(items))
        return LoadedState(items=items, settings=settings)

    def save(self, items: Iterable[BudgetItem], settings: Settings) -> bool:
        """Overwrite the stored ledger and settings; returns ``False`` on failure."""
        try:
            values = encode_state(items, settings)
            deleted = [THEME_KEY] if settings.theme_preference is None else []
            self.store.set_many(values, deleted=deleted)
        except PersistenceError as e:
            logger.error("Failed to persist planner state: %s", e)
            self._report(e)
            return False
        except (TypeError, ValueError) as e:
            error = PersistenceError(PersistenceError.UNAVAILABLE, f"Could not serialize planner state: {e}")
            logger.error("Failed to persist planner state: %s", error)
            self._report(error)
            return False
        except Exception as e:
            error = PersistenceError(PersistenceError.UNAVAILABLE, f"Store write failed: {e}")
            logger.exception("Failed to persist planner state")
            self._report(error)
            return False
        self.last_error = None
        return True
