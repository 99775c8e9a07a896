"""
Core domain models.

Instants are always held as timezone-aware UTC datetimes and only
converted to local time when displayed.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from upt.exceptions import PersistedReadError

# RFC 3339 date-time: offset is mandatory, fraction may have any precision
_RFC3339_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt ]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("instant must carry an explicit UTC offset")
    return value.astimezone(timezone.utc)


def parse_rfc3339(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.

    Sub-microsecond digits are truncated.

    Raises:
        PersistedReadError: If the text is not a valid RFC 3339 timestamp
    """
    match = _RFC3339_PATTERN.match(text.strip())
    if match is None:
        raise PersistedReadError(f"Not an RFC 3339 timestamp: {text!r}")

    fraction = (match["fraction"] or "0")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        try:
            tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
        except ValueError as e:
            raise PersistedReadError(f"Invalid UTC offset {offset!r}: {e}") from e

    try:
        parsed = datetime(
            int(match["year"]),
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            int(fraction),
            tzinfo=tz,
        )
    except ValueError as e:
        raise PersistedReadError(f"Invalid timestamp {text.strip()!r}: {e}") from e

    return parsed.astimezone(timezone.utc)


class PersistedReset(BaseModel):
    """
    The last manual reset, as stored on disk.

    Serialized as a single RFC 3339 timestamp with explicit offset.
    """

    instant: datetime = Field(..., description="When the reset happened (UTC)")

    @field_validator("instant")
    @classmethod
    def _normalize_instant(cls, value: datetime) -> datetime:
        return _to_utc(value)

    def to_text(self) -> str:
        """Serialize to the on-disk representation."""
        return self.instant.isoformat(timespec="microseconds")

    @classmethod
    def from_text(cls, text: str) -> "PersistedReset":
        """
        Parse the on-disk representation.

        Surrounding whitespace is ignored.

        Raises:
            PersistedReadError: If the content is not a valid timestamp
        """
        return cls(instant=parse_rfc3339(text))


class StartSource(str, Enum):
    """Where an effective start instant came from."""

    BOOT = "boot"
    RESET = "reset"


class EffectiveStart(BaseModel):
    """
    The instant durations are measured from.

    Derived per invocation, never persisted.
    """

    instant: datetime = Field(..., description="Start instant (UTC)")
    source: StartSource = Field(..., description="Origin of the start instant")

    @field_validator("instant")
    @classmethod
    def _normalize_instant(cls, value: datetime) -> datetime:
        return _to_utc(value)
