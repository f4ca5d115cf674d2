"""PTY process management — terminal handles and the spawn capability.

The native backend lives in ``ptyexec.pty.native`` and is only imported
once ``resolve_spawner()`` has confirmed the platform supports it.
"""

from ptyexec.pty.buffer import OutputBuffer
from ptyexec.pty.errors import CommandTimeout, PtyError, PtyUnavailable, SpawnFailed
from ptyexec.pty.handle import ExitOutcome, HandleStatus, TerminalHandle
from ptyexec.pty.spawner import (
    PtySpawner,
    SpawnOptions,
    UnavailablePtySpawner,
    resolve_spawner,
)

__all__ = [
    "CommandTimeout",
    "ExitOutcome",
    "HandleStatus",
    "OutputBuffer",
    "PtyError",
    "PtySpawner",
    "PtyUnavailable",
    "SpawnFailed",
    "SpawnOptions",
    "TerminalHandle",
    "UnavailablePtySpawner",
    "resolve_spawner",
]
