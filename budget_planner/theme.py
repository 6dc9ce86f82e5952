"""Dark/light mode resolution from a stored preference or the OS colour scheme."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

SchemeCallback = Callable[[bool], None]


@dataclass(frozen=True)
class ThemeState:
    dark: bool

    @property
    def name(self) -> str:
        return 'dark' if self.dark else 'light'


class ColorSchemeSignal:
    """Source of the OS-level "prefers dark" signal."""

    def prefers_dark(self) -> bool:
        raise NotImplementedError

    def subscribe(self, callback: SchemeCallback) -> Callable[[], None]:
        raise NotImplementedError


class StaticColorScheme(ColorSchemeSignal):
    """Colour scheme signal with a fixed value that can be changed via ``emit``."""

    def __init__(self, dark: bool = False):
        self._dark = dark
        self._callbacks: List[SchemeCallback] = []

    def prefers_dark(self) -> bool:
        return self._dark

    def subscribe(self, callback: SchemeCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def emit(self, dark: bool) -> None:
        self._dark = dark
        for callback in list(self._callbacks):
            callback(dark)


class ThemeResolver:
    """Resolve and track the effective theme.

    A stored preference always wins. Without one the resolver follows the OS
    signal, including live changes after ``start``, until the user picks a
    theme explicitly; from then on the signal is ignored for the rest of the
    session.
    """

    def __init__(self, signal: ColorSchemeSignal, stored_preference: Optional[str] = None):
        self.signal = signal
        self.preference = stored_preference if stored_preference in ('dark', 'light') else None
        self._dark = self._initial_dark()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._on_change: Optional[SchemeCallback] = None

    def _initial_dark(self) -> bool:
        if self.preference is not None:
            return self.preference == 'dark'
        return bool(self.signal.prefers_dark())

    def resolve(self) -> ThemeState:
        return ThemeState(dark=self._dark)

    @property
    def tracking(self) -> bool:
        return self._unsubscribe is not None

    def start(self, on_change: Optional[SchemeCallback] = None) -> None:
        """Begin following OS signal changes if no explicit preference exists."""
        self._on_change = on_change
        if self.preference is not None or self._unsubscribe is not None:
            return
        self._unsubscribe = self.signal.subscribe(self._handle_signal)

    def _handle_signal(self, dark: bool) -> None:
        if self.preference is not None:
            return
        self._dark = bool(dark)
        logger.debug("OS colour scheme changed, dark=%s", self._dark)
        if self._on_change is not None:
            self._on_change(self._dark)

    def choose(self, dark: bool) -> str:
        """Record an explicit choice and stop following the OS signal.

        Returns:
            The preference to persist, ``'dark'`` or ``'light'``
        """
        self._dark = bool(dark)
        self.preference = 'dark' if self._dark else 'light'
        self.close()
        return self.preference

    def toggle(self) -> str:
        return self.choose(not self._dark)

    def close(self) -> None:
        """Release the OS signal subscription; safe to call more than once."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
