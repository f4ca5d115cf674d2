"""Configuration — Pydantic models for ptyexec settings."""

from __future__ import annotations

import json
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class SessionConfig(BaseModel):
    """Defaults and clamping bounds for a single PTY session."""

    default_timeout: float = Field(default=60, description="Seconds")
    min_timeout: float = Field(default=1)
    max_timeout: float = Field(default=300)
    default_cols: int = Field(default=120)
    min_cols: int = Field(default=20)
    max_cols: int = Field(default=300)
    default_rows: int = Field(default=30)
    min_rows: int = Field(default=10)
    max_rows: int = Field(default=100)


class ShellConfig(BaseModel):
    """How the login shell is started and told to finish."""

    default_shell: str = Field(
        default="/bin/bash", description="Used when $SHELL is unset"
    )
    term: str = Field(
        default="xterm-256color", description="Used when $TERM is unset"
    )
    shell_args: list[str] = Field(
        default_factory=lambda: ["-l"],
        description="Login mode, so profile/init files are sourced",
    )
    exit_command: str = Field(default="exit")
    line_terminator: str = Field(default="\r", description="The Enter key")
    kill_grace: float = Field(
        default=2.0,
        description="Seconds to wait for the shell to be reaped before SIGKILL",
    )


class PtyExecConfig(BaseModel):
    """Top-level ptyexec configuration."""

    session: SessionConfig = Field(default_factory=SessionConfig)
    shell: ShellConfig = Field(default_factory=ShellConfig)

    @classmethod
    def load(cls, config_path: str | None = None) -> PtyExecConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            PTYEXEC_DEFAULT_TIMEOUT  - Default timeout in seconds
            PTYEXEC_MAX_TIMEOUT      - Upper clamp for requested timeouts
            PTYEXEC_DEFAULT_SHELL    - Shell used when $SHELL is unset
            PTYEXEC_TERM             - Terminal type used when $TERM is unset
            PTYEXEC_KILL_GRACE       - Seconds to wait for reaping before SIGKILL
        """
        load_dotenv(override=True)

        config_data: dict[str, Any] = {}

        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        session = config_data.get("session", {})
        shell = config_data.get("shell", {})

        env_default_timeout = os.environ.get("PTYEXEC_DEFAULT_TIMEOUT")
        if env_default_timeout:
            session["default_timeout"] = float(env_default_timeout)

        env_max_timeout = os.environ.get("PTYEXEC_MAX_TIMEOUT")
        if env_max_timeout:
            session["max_timeout"] = float(env_max_timeout)

        env_shell = os.environ.get("PTYEXEC_DEFAULT_SHELL")
        if env_shell:
            shell["default_shell"] = env_shell

        env_term = os.environ.get("PTYEXEC_TERM")
        if env_term:
            shell["term"] = env_term

        env_kill_grace = os.environ.get("PTYEXEC_KILL_GRACE")
        if env_kill_grace:
            shell["kill_grace"] = float(env_kill_grace)

        if session:
            config_data["session"] = session
        if shell:
            config_data["shell"] = shell

        return cls.model_validate(config_data)
