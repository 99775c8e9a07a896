"""
Error taxonomy for upt.

Read-side failures of the reset record are absorbed by the store;
everything else propagates to the CLI, which reports it and exits
with a non-zero status.
"""


class UptError(Exception):
    """Base class for all upt errors."""


class SystemQueryError(UptError):
    """The operating system could not report its uptime."""


class HomeResolutionError(UptError):
    """The per-user storage location could not be determined."""


class PersistedReadError(UptError):
    """The reset record is missing, unreadable or not a valid timestamp."""


class PersistedWriteError(UptError):
    """The reset record could not be written."""


class TerminalControlError(UptError):
    """The terminal could not be written to or its cursor controlled."""
