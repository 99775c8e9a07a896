"""
Duration rendering.

Turns the time elapsed since a start instant into text, either a
precise human-readable phrase or a lossless ISO 8601 duration.

Human phrases list every non-zero unit down to seconds, separated by
commas:

    3 hours, 2 minutes, 5 seconds

Machine durations are expressed in (fractional) seconds:

    PT10925.25S
"""

import re
from datetime import datetime, timedelta

from upt.utils.clock import Clock, SystemClock

_MICROS_PER_SECOND = 1_000_000

# Calendar units use fixed lengths: a year is 365 days, a month 30 days
HUMAN_UNITS: list[tuple[str, int]] = [
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]

JUST_NOW = "just now"
ZERO_MACHINE_DURATION = "P0D"

_MACHINE_PATTERN = re.compile(r"^(?P<sign>-)?P(?:0D|T(?P<seconds>\d+)(?:\.(?P<fraction>\d+))?S)$")

START_FORMAT = "%Y-%m-%d %H:%M:%S"


def _total_microseconds(delta: timedelta) -> int:
    return (delta.days * 86400 + delta.seconds) * _MICROS_PER_SECOND + delta.microseconds


def format_machine(delta: timedelta) -> str:
    """
    Render a duration as an ISO 8601 duration in seconds.

    Negative durations carry a leading ``-``; trailing zeros of the
    fraction are dropped. A zero duration renders as ``P0D``.
    """
    micros = _total_microseconds(delta)
    if micros == 0:
        return ZERO_MACHINE_DURATION

    sign = "-" if micros < 0 else ""
    seconds, fraction = divmod(abs(micros), _MICROS_PER_SECOND)
    text = f"{sign}PT{seconds}"
    if fraction:
        text += "." + f"{fraction:06d}".rstrip("0")
    return text + "S"


def parse_machine_duration(text: str) -> timedelta:
    """
    Parse a duration produced by :func:`format_machine`.

    Raises:
        ValueError: If the text is not a supported duration
    """
    match = _MACHINE_PATTERN.match(text.strip())
    if match is None:
        raise ValueError(f"Not a machine duration: {text!r}")

    if match["seconds"] is None:
        return timedelta(0)

    fraction = (match["fraction"] or "0")[:6].ljust(6, "0")
    micros = int(match["seconds"]) * _MICROS_PER_SECOND + int(fraction)
    if match["sign"]:
        micros = -micros
    return timedelta(microseconds=micros)


def format_human(delta: timedelta) -> str:
    """
    Render a duration as a precise English phrase.

    The duration is truncated to whole seconds. Durations shorter than
    a second read "just now"; negative ones get a leading ``-``.
    """
    micros = _total_microseconds(delta)
    remaining = abs(micros) // _MICROS_PER_SECOND
    if remaining == 0:
        return JUST_NOW

    parts = []
    for name, length in HUMAN_UNITS:
        count, remaining = divmod(remaining, length)
        if count:
            parts.append(f"{count} {name}" if count == 1 else f"{count} {name}s")

    phrase = ", ".join(parts)
    return f"-{phrase}" if micros < 0 else phrase


def format_start(start: datetime, strict_iso: bool = False) -> str:
    """
    Describe a start instant in local time.

    Args:
        start: Aware start instant
        strict_iso: Full ISO 8601 timestamp instead of the simplified form
    """
    local = start.astimezone()
    if strict_iso:
        return f"Started {local.isoformat()}"
    return f"Started {local.strftime(START_FORMAT)}"


class DurationRenderer:
    """Renders the time elapsed since a start instant."""

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or SystemClock()

    def elapsed(self, start: datetime) -> timedelta:
        """Signed time elapsed since start; negative if the clock went back."""
        return self.clock.now() - start

    def render(self, start: datetime, machine_format: bool = False) -> str:
        """
        Render the time elapsed since start.

        Args:
            start: Aware start instant
            machine_format: ISO 8601 duration instead of a human phrase
        """
        elapsed = self.elapsed(start)
        if machine_format:
            return format_machine(elapsed)
        return format_human(elapsed)
