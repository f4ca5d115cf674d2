"""Tool system — base classes and registry."""

from ptyexec.tool.base import BaseTool, ToolError, ToolOk, ToolResult
from ptyexec.tool.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolResult",
    "ToolOk",
    "ToolError",
    "ToolRegistry",
]
