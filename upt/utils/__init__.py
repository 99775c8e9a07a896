"""
Utility modules for upt.
"""

from upt.utils.clock import Clock, SystemClock
from upt.utils.logging import setup_logging

__all__ = [
    "Clock",
    "SystemClock",
    "setup_logging",
]
