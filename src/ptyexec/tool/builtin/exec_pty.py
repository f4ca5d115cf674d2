"""exec_pty tool — run a command in a real PTY login shell.

Unlike a plain subprocess, the command sees an interactive terminal: the
shell sources its profile files, prompt hooks fire, and ``isatty()``
checks pass. Each call spawns one shell and tears it down afterwards.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, Field

from ptyexec.config import PtyExecConfig
from ptyexec.session.launcher import SessionLauncher
from ptyexec.session.models import SessionRequest
from ptyexec.session.runner import run_session
from ptyexec.tool.base import BaseTool, ToolError, ToolOk, ToolResult

logger = logging.getLogger(__name__)


class ExecPtyParams(BaseModel):
    command: str = Field(min_length=1, description="Shell command to execute via PTY")
    workdir: str | None = Field(default=None, description="Working directory")
    env: dict[str, str] | None = Field(
        default=None, description="Environment variables"
    )
    timeout: float | None = Field(
        default=None,
        allow_inf_nan=False,
        description="Timeout in seconds (default: 60, max: 300)",
    )
    cols: float | None = Field(
        default=None, allow_inf_nan=False, description="Terminal columns (default: 120)"
    )
    rows: float | None = Field(
        default=None, allow_inf_nan=False, description="Terminal rows (default: 30)"
    )


class ExecPtyTool(BaseTool[ExecPtyParams]):
    """Execute one command per call in a fresh pseudo-terminal session."""

    name: ClassVar[str] = "exec_pty"
    description: ClassVar[str] = (
        "Execute shell commands in a PTY (pseudo-terminal). "
        "Unlike regular exec which uses non-interactive shells, "
        "this creates a real terminal session that sources shell initialization files "
        "(like .bash_profile, .bashrc, .zshrc) and fires prompt hooks. "
        "Use this when you need tools that rely on shell hooks or when "
        "environment initialization requires an interactive session. "
        "Supports: command, workdir, env, timeout, cols, rows."
    )
    param_model: ClassVar[type[BaseModel]] = ExecPtyParams

    def __init__(
        self,
        config: PtyExecConfig | None = None,
        launcher: SessionLauncher | None = None,
    ) -> None:
        self._config = config or PtyExecConfig()
        self._launcher = launcher

    async def execute(self, params: ExecPtyParams) -> ToolResult:
        request = SessionRequest.from_params(
            params.command,
            workdir=params.workdir,
            env=params.env,
            timeout=params.timeout,
            cols=params.cols,
            rows=params.rows,
            limits=self._config.session,
        )
        launcher = self._launcher or SessionLauncher(shell_config=self._config.shell)
        result = await run_session(request, launcher, shell_config=self._config.shell)

        if result.success:
            return ToolOk(output=result.output_text)
        return ToolError(output=result.output_text, system=result.diagnostic)
