"""Built-in tools and their registration."""

from __future__ import annotations

from ptyexec.config import PtyExecConfig
from ptyexec.tool.builtin.exec_pty import ExecPtyParams, ExecPtyTool
from ptyexec.tool.registry import ToolRegistry


def register_builtin_tools(
    registry: ToolRegistry,
    config: PtyExecConfig | None = None,
    sandboxed: bool = False,
) -> None:
    """Register the built-in tools. exec_pty is host-only, so skipped when sandboxed."""
    if sandboxed:
        return
    registry.register(ExecPtyTool(config=config))


__all__ = [
    "ExecPtyParams",
    "ExecPtyTool",
    "register_builtin_tools",
]
