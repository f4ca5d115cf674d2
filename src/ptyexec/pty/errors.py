"""Failure conditions raised while launching or racing a PTY session."""

from __future__ import annotations


class PtyError(Exception):
    """Base class for session failures reported as error results."""


class PtyUnavailable(PtyError):
    """The native PTY capability could not be located on this platform."""


class SpawnFailed(PtyError):
    """The PTY capability is present but the shell could not be started."""


class CommandTimeout(PtyError):
    """The timer won the race against the shell's exit."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s")
