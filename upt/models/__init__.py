"""
Data models for upt.
"""

from upt.models.domain import EffectiveStart, PersistedReset, StartSource

__all__ = [
    "EffectiveStart",
    "PersistedReset",
    "StartSource",
]
