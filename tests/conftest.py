"""
Pytest configuration and fixtures.
"""

from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from upt.config import get_settings
from upt.core.renderer import DurationRenderer
from upt.core.resolver import StartResolver
from upt.services.boot import BootTimeProvider
from upt.services.store import ResetStore

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
UPTIME = timedelta(hours=5)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture
def now() -> datetime:
    """The instant the frozen clock starts at."""
    return NOW


@pytest.fixture
def clock() -> FrozenClock:
    """Frozen clock at a fixed instant."""
    return FrozenClock()


@pytest.fixture
def boot_provider(clock: FrozenClock) -> BootTimeProvider:
    """Boot provider reporting a fixed uptime."""
    return BootTimeProvider(clock, uptime_source=lambda: UPTIME.total_seconds())


@pytest.fixture
def boot_instant() -> datetime:
    """Boot instant matching the boot_provider fixture."""
    return NOW - UPTIME


@pytest.fixture
def reset_path(tmp_path: Path) -> Path:
    """Reset record location inside a temporary home."""
    return tmp_path / ".upt"


@pytest.fixture
def store(reset_path: Path) -> ResetStore:
    """Reset store backed by a temporary file."""
    return ResetStore(reset_path)


@pytest.fixture
def resolver(boot_provider: BootTimeProvider, store: ResetStore, clock: FrozenClock) -> StartResolver:
    """Start resolver wired to the test doubles."""
    return StartResolver(boot_provider=boot_provider, store=store, clock=clock)


@pytest.fixture
def renderer(clock: FrozenClock) -> DurationRenderer:
    """Renderer using the frozen clock."""
    return DurationRenderer(clock)


@pytest.fixture
def isolated_settings(
    monkeypatch: pytest.MonkeyPatch, reset_path: Path
) -> Generator[Path, None, None]:
    """Point the CLI settings at a temporary reset record."""
    monkeypatch.setenv("UPT_RESET_FILE", str(reset_path))
    get_settings.cache_clear()
    yield reset_path
    get_settings.cache_clear()
