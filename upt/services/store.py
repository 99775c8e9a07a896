"""
Persistence for the manual reset instant.

The record is a single file holding one RFC 3339 timestamp. It is
only ever overwritten as a whole, never appended to or deleted.
"""

import contextlib
import os
import tempfile
from datetime import datetime
from pathlib import Path

import structlog

from upt.exceptions import HomeResolutionError, PersistedReadError, PersistedWriteError
from upt.models.domain import PersistedReset

logger = structlog.get_logger(__name__)


class ResetStore:
    """
    Reads and writes the last manual reset instant.

    A missing or corrupt record means "never reset" and must not get
    in the way of ordinary uptime reporting.
    """

    def __init__(self, path: Path | None) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the reset record, or None when no per-user
                location could be resolved
        """
        self.path = path

    def load(self) -> PersistedReset:
        """
        Load the reset record.

        Raises:
            PersistedReadError: If the record is absent, unreadable or
                does not hold a valid timestamp
        """
        if self.path is None:
            raise PersistedReadError("No location for the reset record")

        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistedReadError(f"Could not read {self.path}: {e}") from e

        return PersistedReset.from_text(content)

    def read(self) -> datetime | None:
        """
        Get the persisted reset instant.

        Returns:
            The reset instant in UTC, or None if there is no usable record
        """
        try:
            record = self.load()
        except PersistedReadError as e:
            logger.debug("reset_record_unavailable", path=str(self.path), reason=str(e))
            return None

        return record.instant

    def write(self, instant: datetime) -> None:
        """
        Persist a reset instant, replacing any previous record.

        The content is written to a sibling temporary file and moved into
        place, so readers see either the old or the new timestamp.

        Args:
            instant: Aware datetime of the reset

        Raises:
            HomeResolutionError: If there is no location for the record
            PersistedWriteError: If the record could not be written
        """
        if self.path is None:
            raise HomeResolutionError("Impossible to get your home dir!")

        text = PersistedReset(instant=instant).to_text()
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f"{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error("reset_write_failed", path=str(self.path), error=str(e))
            raise PersistedWriteError(f"Could not write {self.path}: {e}") from e
        finally:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    os.remove(tmp_path)

        logger.info("reset_persisted", path=str(self.path), instant=text)
