"""Session request and result types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ptyexec.config import SessionConfig


def clamp(value: float, low: float, high: float) -> float:
    if math.isnan(value):
        raise ValueError("expected a number, got NaN")
    return min(max(value, low), high)


@dataclass(frozen=True)
class SessionRequest:
    """One command to run in one PTY session. Values are already clamped."""

    command: str
    workdir: str | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout: float = 60
    cols: int = 120
    rows: int = 30

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("command must be a non-empty string")

    @classmethod
    def from_params(
        cls,
        command: str,
        *,
        workdir: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        cols: float | None = None,
        rows: float | None = None,
        limits: SessionConfig | None = None,
    ) -> SessionRequest:
        """Build a request, filling defaults and clamping into the allowed ranges."""
        limits = limits or SessionConfig()
        return cls(
            command=command,
            workdir=workdir,
            env=dict(env or {}),
            timeout=clamp(
                limits.default_timeout if timeout is None else timeout,
                limits.min_timeout,
                limits.max_timeout,
            ),
            cols=int(
                clamp(
                    limits.default_cols if cols is None else cols,
                    limits.min_cols,
                    limits.max_cols,
                )
            ),
            rows=int(
                clamp(
                    limits.default_rows if rows is None else rows,
                    limits.min_rows,
                    limits.max_rows,
                )
            ),
        )


@dataclass(frozen=True)
class SessionResult:
    """Outcome of a session: success flag, every byte of output, and why it failed."""

    success: bool
    output_text: str = ""
    diagnostic: str | None = None
