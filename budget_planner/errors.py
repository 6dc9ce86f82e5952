"""Exception types raised by the budget planner."""

from __future__ import annotations


class BudgetPlannerError(Exception):
    """Base class for budget planner errors."""


class ValidationError(BudgetPlannerError, ValueError):
    """User input was rejected; state is left untouched."""

    INVALID_NAME = "invalid_name"
    INVALID_PRICE = "invalid_price"
    INVALID_SETTING = "invalid_setting"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class PersistenceError(BudgetPlannerError):
    """The durable store could not be read or written."""

    UNAVAILABLE = "unavailable"
    CORRUPT = "corrupt"

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
