"""Terminal handle abstraction — the contract every PTY backend fulfils."""

from __future__ import annotations

import enum
import signal as _signal
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


class HandleStatus(enum.Enum):
    """Lifecycle states for a terminal handle."""

    RUNNING = "running"
    KILLING = "killing"  # Kill requested, process not reaped yet
    KILLED = "killed"  # Reaped after we signalled it
    EXITED = "exited"  # Process exited on its own


@dataclass(frozen=True)
class ExitOutcome:
    """How the shell process ended. Produced at most once per session."""

    exit_code: int
    signal: int | None = None

    @classmethod
    def from_returncode(cls, returncode: int) -> ExitOutcome:
        """Map a subprocess return code (negative means killed by signal)."""
        if returncode < 0:
            return cls(exit_code=0, signal=-returncode)
        return cls(exit_code=returncode)

    @property
    def success(self) -> bool:
        return self.exit_code == 0 and self.signal is None


DataCallback = Callable[[str], None]
ExitCallback = Callable[[ExitOutcome], None]


@runtime_checkable
class TerminalHandle(Protocol):
    """A live pseudo-terminal with a shell attached to it.

    ``on_data`` handlers see every output chunk in arrival order.
    ``on_exit`` handlers fire exactly once when the shell terminates.
    ``kill`` is idempotent and never raises for an already-exited process.
    ``close`` releases the OS resources and is safe to call repeatedly.
    """

    @property
    def pid(self) -> int: ...

    @property
    def size(self) -> tuple[int, int]: ...

    @property
    def exited(self) -> bool: ...

    def write(self, data: str) -> None: ...

    def on_data(self, callback: DataCallback) -> None: ...

    def on_exit(self, callback: ExitCallback) -> None: ...

    def kill(self, sig: int = _signal.SIGHUP) -> None: ...

    def resize(self, cols: int, rows: int) -> None: ...

    async def close(self, grace: float = 2.0) -> None: ...
