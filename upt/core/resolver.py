"""
Effective start resolution.

Combines the system boot instant with the persisted manual reset:
the later of the two wins, so a reboot always supersedes a reset
recorded during an earlier boot.
"""

import structlog

from upt.models.domain import EffectiveStart, StartSource
from upt.services.boot import BootTimeProvider
from upt.services.store import ResetStore
from upt.utils.clock import Clock, SystemClock

logger = structlog.get_logger(__name__)


class StartResolver:
    """Computes the instant durations are measured from."""

    def __init__(
        self,
        boot_provider: BootTimeProvider,
        store: ResetStore,
        clock: Clock | None = None,
    ) -> None:
        self.boot_provider = boot_provider
        self.store = store
        self.clock = clock or SystemClock()

    def reset(self) -> EffectiveStart:
        """
        Record a manual reset at the current instant.

        Raises:
            HomeResolutionError: If there is nowhere to store the reset
            PersistedWriteError: If the reset could not be stored
        """
        now = self.clock.now()
        self.store.write(now)
        return EffectiveStart(instant=now, source=StartSource.RESET)

    def system_start(self) -> EffectiveStart:
        """
        Get the raw boot instant, ignoring any persisted reset.

        Raises:
            SystemQueryError: If the OS cannot report its uptime
        """
        return EffectiveStart(
            instant=self.boot_provider.get_boot_instant(),
            source=StartSource.BOOT,
        )

    def current_start(self) -> EffectiveStart:
        """
        Get the later of the boot instant and the persisted reset.

        A reset in the future is honored as-is.

        Raises:
            SystemQueryError: If the OS cannot report its uptime
        """
        boot = self.boot_provider.get_boot_instant()
        reset = self.store.read()

        if reset is None or reset <= boot:
            return EffectiveStart(instant=boot, source=StartSource.BOOT)
        return EffectiveStart(instant=reset, source=StartSource.RESET)

    def resolve(self, explicit_reset: bool = False, system_override: bool = False) -> EffectiveStart:
        """
        Resolve the effective start for one invocation.

        Args:
            explicit_reset: Persist a reset at the current instant first
            system_override: Report the raw boot instant

        Returns:
            The effective start. With both flags set the reset is still
            recorded, but the boot instant is returned.

        Raises:
            SystemQueryError: If the OS cannot report its uptime
            HomeResolutionError: If a reset was requested with nowhere to store it
            PersistedWriteError: If a requested reset could not be stored
        """
        start: EffectiveStart | None = None
        if explicit_reset:
            start = self.reset()

        if system_override:
            start = self.system_start()
        elif start is None:
            start = self.current_start()

        logger.debug(
            "start_resolved",
            instant=start.instant.isoformat(),
            source=start.source.value,
            explicit_reset=explicit_reset,
            system_override=system_override,
        )
        return start
