"""PTY capability provider — resolves a spawner for the current platform."""

from __future__ import annotations

import importlib.util
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from ptyexec.pty.errors import PtyUnavailable

if TYPE_CHECKING:
    from ptyexec.pty.handle import TerminalHandle

logger = logging.getLogger(__name__)

PTY_UNAVAILABLE_MESSAGE = (
    "PTY support unavailable. The pty, termios and fcntl modules are required; "
    "run on a POSIX system such as Linux or macOS."
)

_REQUIRED_MODULES = ("pty", "termios", "fcntl")


@dataclass(frozen=True)
class SpawnOptions:
    """Terminal settings handed to a spawner."""

    name: str = "xterm-256color"
    cols: int = 120
    rows: int = 30
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)


class PtySpawner(Protocol):
    """Anything that can start a process attached to a fresh PTY."""

    @property
    def available(self) -> bool: ...

    async def spawn(
        self, file: str, args: list[str], options: SpawnOptions
    ) -> TerminalHandle: ...


class UnavailablePtySpawner:
    """Stand-in used where no PTY capability exists. Every spawn fails."""

    def __init__(self, reason: str = PTY_UNAVAILABLE_MESSAGE) -> None:
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    async def spawn(
        self, file: str, args: list[str], options: SpawnOptions
    ) -> TerminalHandle:
        raise PtyUnavailable(self.reason)


def resolve_spawner() -> PtySpawner:
    """Return the native spawner, or an unavailable one if the platform lacks PTYs."""
    missing = [
        name for name in _REQUIRED_MODULES if importlib.util.find_spec(name) is None
    ]
    if missing:
        logger.warning("PTY modules missing: %s", ", ".join(missing))
        return UnavailablePtySpawner(
            f"{PTY_UNAVAILABLE_MESSAGE} Missing modules: {', '.join(missing)}."
        )

    from ptyexec.pty.native import NativePtySpawner

    return NativePtySpawner()
