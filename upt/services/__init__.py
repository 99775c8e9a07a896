"""
Operating system and storage integrations for upt.
"""

from upt.services.boot import BootTimeProvider
from upt.services.store import ResetStore

__all__ = [
    "BootTimeProvider",
    "ResetStore",
]
