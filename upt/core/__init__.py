"""
Core uptime components: start resolution, rendering and watch mode.
"""

from upt.core.renderer import DurationRenderer
from upt.core.resolver import StartResolver
from upt.core.watch import InterruptChannel, SignalInterruptSource, Terminal, WatchLoop

__all__ = [
    "DurationRenderer",
    "InterruptChannel",
    "SignalInterruptSource",
    "StartResolver",
    "Terminal",
    "WatchLoop",
]
