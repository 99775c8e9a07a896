"""
Live-refreshing duration display.

A single foreground loop renders the duration, flushes it, then waits
briefly for an interrupt. Interrupts (Ctrl-C, SIGTERM) are delivered
through an InterruptChannel so the loop never shares mutable flags
with the signal handler.

Cycle order is: show new value -> flush -> wait -> erase old value.
Erasing right before the next render keeps the blank-line window as
short as possible.
"""

import queue
import signal
from datetime import datetime
from types import FrameType
from typing import Any, TextIO

import structlog

from upt.core.renderer import DurationRenderer
from upt.exceptions import TerminalControlError

logger = structlog.get_logger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


class InterruptChannel:
    """
    Single-slot notification channel from an interrupt source to the loop.

    Sending never blocks. SimpleQueue.put is reentrant, which makes it
    safe to call from a signal handler even while the loop is blocked
    in wait().
    """

    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[None]" = queue.SimpleQueue()

    def notify(self) -> None:
        """Signal an interrupt; further notifications are dropped while one is pending."""
        if self._queue.empty():
            self._queue.put_nowait(None)

    def wait(self, timeout: float) -> bool:
        """
        Wait up to timeout seconds for an interrupt.

        Returns:
            True if an interrupt was received
        """
        try:
            self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        return True


class SignalInterruptSource:
    """
    Routes SIGINT and SIGTERM into an InterruptChannel.

    Use as a context manager; the previous handlers are restored on exit.
    Must be entered from the main thread.
    """

    def __init__(
        self,
        channel: InterruptChannel,
        signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM),
    ) -> None:
        self.channel = channel
        self.signals = signals
        self._previous: dict[signal.Signals, Any] = {}

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        self.channel.notify()

    def __enter__(self) -> "SignalInterruptSource":
        for sig in self.signals:
            self._previous[sig] = signal.signal(sig, self._handle)
        return self

    def __exit__(self, *args: Any) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)
        self._previous.clear()


class Terminal:
    """Minimal terminal control over a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def _emit(self, text: str) -> None:
        try:
            self.stream.write(text)
        except (OSError, ValueError) as e:
            raise TerminalControlError(f"Could not write to the terminal: {e}") from e

    def write(self, text: str) -> None:
        self._emit(text)

    def flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise TerminalControlError(f"Could not flush the terminal: {e}") from e

    def hide_cursor(self) -> None:
        self._emit(HIDE_CURSOR)
        self.flush()

    def show_cursor(self) -> None:
        self._emit(SHOW_CURSOR)
        self.flush()

    def clear_line(self, length: int) -> None:
        """Blank out the previous line of the given length and return to its start."""
        self._emit("\r" + " " * length + "\r")


class WatchLoop:
    """
    Redraws the elapsed duration until interrupted.

    The cursor is hidden once before the first render and shown again
    exactly once when the loop ends, whatever ends it.
    """

    def __init__(
        self,
        renderer: DurationRenderer,
        terminal: Terminal,
        channel: InterruptChannel,
        interval: float = 0.005,
        machine_format: bool = False,
    ) -> None:
        """
        Initialize the loop.

        Args:
            renderer: Renders the elapsed duration
            terminal: Output terminal
            channel: Receives interrupt notifications
            interval: Seconds to wait for an interrupt each cycle
            machine_format: Render ISO 8601 durations
        """
        self.renderer = renderer
        self.terminal = terminal
        self.channel = channel
        self.interval = interval
        self.machine_format = machine_format

    def run(self, start: datetime) -> int:
        """
        Run until an interrupt arrives.

        Args:
            start: Instant to measure from

        Returns:
            Number of values drawn

        Raises:
            TerminalControlError: If the terminal cannot be controlled
        """
        self.terminal.hide_cursor()
        logger.debug("watch_started", interval=self.interval, machine_format=self.machine_format)

        cycles = 0
        try:
            while True:
                text = self.renderer.render(start, self.machine_format)
                self.terminal.write(text)
                self.terminal.flush()
                cycles += 1

                if self.channel.wait(self.interval):
                    break

                self.terminal.clear_line(len(text))
        finally:
            self.terminal.show_cursor()
            self.terminal.write("\n")
            self.terminal.flush()

        logger.debug("watch_stopped", cycles=cycles)
        return cycles
