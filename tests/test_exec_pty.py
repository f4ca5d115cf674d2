"""Tests for ptyexec.tool.builtin.exec_pty.ExecPtyTool and the tool contract."""

from __future__ import annotations

import pytest

from ptyexec.config import PtyExecConfig, SessionConfig
from ptyexec.pty.spawner import UnavailablePtySpawner
from ptyexec.session.launcher import SessionLauncher
from ptyexec.tool.base import ToolError, ToolOk
from ptyexec.tool.builtin.exec_pty import ExecPtyParams, ExecPtyTool


# ---------------------------------------------------------------------------
# ToolResult
# ---------------------------------------------------------------------------


class TestToolResult:
    def test_ok_dict(self) -> None:
        assert ToolOk(output="hi").to_dict() == {
            "status": "success",
            "content": [{"type": "text", "text": "hi"}],
        }

    def test_error_dict(self) -> None:
        result = ToolError(output="partial", system="Exit code: 1")
        assert result.status == "error"
        assert result.to_dict() == {
            "status": "error",
            "content": [{"type": "text", "text": "partial"}],
            "system": "Exit code: 1",
        }


# ---------------------------------------------------------------------------
# Parameters and spec
# ---------------------------------------------------------------------------


class TestExecPtyParams:
    def test_only_command_required(self) -> None:
        params = ExecPtyParams.model_validate({"command": "ls"})
        assert params.workdir is None
        assert params.timeout is None

    def test_spec(self) -> None:
        spec = ExecPtyTool().to_openai_spec()
        assert spec["type"] == "function"
        assert spec["function"]["name"] == "exec_pty"
        params = spec["function"]["parameters"]
        assert params["required"] == ["command"]
        assert set(params["properties"]) == {
            "command",
            "workdir",
            "env",
            "timeout",
            "cols",
            "rows",
        }
        assert "title" not in params


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------


class TestExecPtyTool:
    async def test_success(self, make_handle, make_spawner) -> None:
        handle = make_handle(output=("hello\r\n",))
        tool = ExecPtyTool(launcher=SessionLauncher(make_spawner(handle), environ={}))
        result = await tool({"command": "echo hello"})
        assert result.status == "success"
        assert result.output == "hello\r\n"
        assert result.system is None
        assert "system" not in result.to_dict()

    async def test_nonzero_exit(self, make_handle, make_spawner) -> None:
        handle = make_handle(exit_code=7)
        tool = ExecPtyTool(launcher=SessionLauncher(make_spawner(handle), environ={}))
        result = await tool({"command": "exit 7"})
        assert result.status == "error"
        assert "7" in result.system

    async def test_clamped_size_reaches_spawner(self, fake_spawner) -> None:
        tool = ExecPtyTool(launcher=SessionLauncher(fake_spawner, environ={}))
        await tool({"command": "true", "cols": 5000, "rows": 1})
        _, _, options = fake_spawner.calls[0]
        assert (options.cols, options.rows) == (300, 10)

    async def test_env_and_workdir_reach_spawner(self, fake_spawner) -> None:
        launcher = SessionLauncher(fake_spawner, environ={"FOO": "ambient"})
        tool = ExecPtyTool(launcher=launcher)
        await tool({"command": "true", "workdir": "/srv", "env": {"FOO": "mine"}})
        _, _, options = fake_spawner.calls[0]
        assert options.cwd == "/srv"
        assert options.env["FOO"] == "mine"

    async def test_config_limits_used(self, make_handle, make_spawner) -> None:
        handle = make_handle(auto_exit=False)
        config = PtyExecConfig(session=SessionConfig(min_timeout=0.01, default_timeout=0.05))
        tool = ExecPtyTool(
            config=config, launcher=SessionLauncher(make_spawner(handle), environ={})
        )
        result = await tool({"command": "sleep 5"})
        assert result.status == "error"
        assert result.system == "Command timed out after 0.05s"

    async def test_unavailable_does_not_raise(self) -> None:
        tool = ExecPtyTool(launcher=SessionLauncher(UnavailablePtySpawner(), environ={}))
        result = await tool({"command": "true"})
        assert result.status == "error"
        assert "unavailable" in result.system
        assert result.output == ""

    async def test_missing_command(self) -> None:
        result = await ExecPtyTool()({})
        assert result.status == "error"
        assert result.system.startswith("Invalid parameters")

    async def test_empty_command(self) -> None:
        result = await ExecPtyTool()({"command": ""})
        assert result.status == "error"
        assert result.system.startswith("Invalid parameters")

    @pytest.mark.parametrize("field", ["timeout", "cols", "rows"])
    @pytest.mark.parametrize("value", ["nan", "inf", float("nan")])
    async def test_non_finite_numbers_rejected(self, fake_spawner, field, value) -> None:
        tool = ExecPtyTool(launcher=SessionLauncher(fake_spawner, environ={}))
        result = await tool({"command": "sleep 2", field: value})
        assert result.status == "error"
        assert result.system.startswith("Invalid parameters")
        assert fake_spawner.calls == []

    async def test_unexpected_error_becomes_result(self, fake_spawner, monkeypatch) -> None:
        async def _explode(*args, **kwargs):
            raise RuntimeError("kaboom")

        monkeypatch.setattr("ptyexec.tool.builtin.exec_pty.run_session", _explode)
        tool = ExecPtyTool(launcher=SessionLauncher(fake_spawner, environ={}))
        result = await tool({"command": "true"})
        assert result.status == "error"
        assert "kaboom" in result.system
