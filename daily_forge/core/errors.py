"""
Typed errors raised by the journaling core and its adapters.

Validation problems in stored data (a goal without an id, an entry with a
malformed date) are not represented here: those are dropped with a warning
during the read pass and never interrupt aggregation.
"""

from datetime import date
from typing import Optional


class DailyForgeError(Exception):
    """Base class for every error raised by daily_forge."""


class RepositoryError(DailyForgeError):
    """The entry store could not read or write a user's entries."""

    def __init__(self, message: str, user_id: str, entry_date: Optional[date] = None):
        self.user_id = user_id
        self.entry_date = entry_date
        super().__init__(message)


class ScriptureProviderError(DailyForgeError):
    """The scripture provider failed or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UnknownReadingPlanError(DailyForgeError):
    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"Unknown reading plan '{plan_id}'")
