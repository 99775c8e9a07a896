"""
Clock abstraction.

Every "current instant" lookup goes through a Clock so that
resolution and rendering can be driven deterministically in tests.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Provider of the current instant."""

    def now(self) -> datetime:
        """Return the current instant as an aware UTC datetime."""
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
