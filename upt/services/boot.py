"""
Boot time detection using psutil.

Converts the uptime reported by the operating system into the
absolute instant the machine booted.
"""

import time
from datetime import datetime, timedelta
from typing import Callable

import psutil
import structlog

from upt.exceptions import SystemQueryError
from upt.utils.clock import Clock, SystemClock

logger = structlog.get_logger(__name__)


def system_uptime_seconds() -> float:
    """Seconds elapsed since the operating system booted."""
    return time.time() - psutil.boot_time()


class BootTimeProvider:
    """
    Source of the true system boot instant.

    The uptime is assumed to be unaffected by timezone changes, so the
    boot instant is kept in UTC and only localized for display.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        uptime_source: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            clock: Source of the current instant
            uptime_source: Callable returning seconds since boot
        """
        self.clock = clock or SystemClock()
        self._uptime_source = uptime_source or system_uptime_seconds

    def get_uptime(self) -> timedelta:
        """
        Ask the operating system how long it has been running.

        Raises:
            SystemQueryError: If the uptime cannot be determined
        """
        try:
            seconds = self._uptime_source()
        except (OSError, RuntimeError, NotImplementedError, psutil.Error) as e:
            logger.error("uptime_query_failed", error=str(e))
            raise SystemQueryError(f"Could not get the system uptime: {e}") from e

        if seconds < 0:
            raise SystemQueryError(f"System reported a negative uptime: {seconds}")

        return timedelta(seconds=seconds)

    def get_boot_instant(self) -> datetime:
        """
        Get the instant the system booted.

        Returns:
            Boot instant as an aware UTC datetime

        Raises:
            SystemQueryError: If the uptime cannot be determined
        """
        uptime = self.get_uptime()
        boot = self.clock.now() - uptime
        logger.debug("boot_instant_resolved", boot=boot.isoformat(), uptime=str(uptime))
        return boot
