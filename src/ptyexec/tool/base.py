"""Base tool classes with Pydantic parameter validation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Literal, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass
class ToolResult:
    """Result of a tool execution, in the shape the host expects.

    ``output`` is the single text block returned as content; ``system`` is
    a short diagnostic that is only present on errors.
    """

    output: str = ""
    system: str | None = None
    is_error: bool = False

    @property
    def status(self) -> Literal["success", "error"]:
        return "error" if self.is_error else "success"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "content": [{"type": "text", "text": self.output}],
        }
        if self.system is not None:
            result["system"] = self.system
        return result


@dataclass
class ToolOk(ToolResult):
    """Successful tool result."""

    is_error: bool = False


@dataclass
class ToolError(ToolResult):
    """Failed tool result."""

    is_error: bool = True


class BaseTool(ABC, Generic[T]):
    """Base class for all tools.

    Tools take structured input and always return a ``ToolResult``.
    Each tool declares its parameters as a Pydantic model (the type parameter T).

    Usage:
        class MyParams(BaseModel):
            path: str

        class MyTool(BaseTool[MyParams]):
            name = "my_tool"
            description = "Does something useful"
            param_model = MyParams

            async def execute(self, params: MyParams) -> ToolResult:
                return ToolOk(output="done")
    """

    name: ClassVar[str]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]]

    async def __call__(self, arguments: dict[str, Any]) -> ToolResult:
        """Validate arguments and execute. Never raises."""
        try:
            params = self.param_model.model_validate(arguments)
        except Exception as e:
            return ToolError(system=f"Invalid parameters: {e}")

        try:
            return await self.execute(params)  # type: ignore[arg-type]
        except Exception as e:
            logger.error("Tool %s execution error: %s", self.name, e, exc_info=True)
            return ToolError(system=f"Error executing {self.name}: {e}")

    @abstractmethod
    async def execute(self, params: T) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...

    def to_openai_spec(self) -> dict[str, Any]:
        """Convert to OpenAI function tool specification."""
        schema = self.param_model.model_json_schema()
        # Pydantic's title and $defs are noise for a function spec
        schema.pop("title", None)
        schema.pop("$defs", None)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": schema,
            },
        }
