"""PTY session lifecycle — launch, inject, race, and build the result."""

from ptyexec.session.launcher import SessionLauncher
from ptyexec.session.models import SessionRequest, SessionResult
from ptyexec.session.runner import (
    build_result,
    completion_signal,
    inject_command,
    race_completion,
    run_session,
)

__all__ = [
    "SessionLauncher",
    "SessionRequest",
    "SessionResult",
    "build_result",
    "completion_signal",
    "inject_command",
    "race_completion",
    "run_session",
]
