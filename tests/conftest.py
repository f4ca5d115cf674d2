"""Shared fakes for PTY session tests."""

from __future__ import annotations

import asyncio
import signal

import pytest

from ptyexec.pty.handle import ExitOutcome
from ptyexec.pty.spawner import SpawnOptions


class FakeHandle:
    """In-memory terminal handle.

    When ``auto_exit`` is set, writing ``exit_line`` schedules the
    scripted ``output`` chunks followed by the exit event, the way a shell
    would after running the command. ``echo`` mirrors every write back as
    output, like a terminal echoing typed input.
    """

    def __init__(
        self,
        output: tuple[str, ...] = (),
        exit_code: int = 0,
        signal: int | None = None,
        auto_exit: bool = True,
        echo: bool = False,
        exit_line: str = "exit\r",
    ) -> None:
        self.pid = 4242
        self.size = (120, 30)
        self.output = output
        self.exit_code = exit_code
        self.exit_signal = signal
        self.auto_exit = auto_exit
        self.echo = echo
        self.exit_line = exit_line
        self.events: list[tuple[str, object]] = []
        self.writes: list[str] = []
        self.kills: list[int] = []
        self.kill_error: Exception | None = None
        self.write_error: Exception | None = None
        self.close_calls = 0
        self.outcome: ExitOutcome | None = None
        self._data_callbacks: list = []
        self._exit_callbacks: list = []

    @property
    def exited(self) -> bool:
        return self.outcome is not None

    def write(self, data: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.events.append(("write", data))
        self.writes.append(data)
        if self.echo:
            self.emit(data)
        if self.auto_exit and data == self.exit_line:
            loop = asyncio.get_running_loop()
            for chunk in self.output:
                loop.call_soon(self.emit, chunk)
            loop.call_soon(self.finish, self.exit_code, self.exit_signal)

    def on_data(self, callback) -> None:
        self.events.append(("on_data", callback))
        self._data_callbacks.append(callback)

    def on_exit(self, callback) -> None:
        self.events.append(("on_exit", callback))
        self._exit_callbacks.append(callback)

    def emit(self, text: str) -> None:
        for callback in self._data_callbacks:
            callback(text)

    def finish(self, exit_code: int = 0, sig: int | None = None) -> None:
        if self.outcome is not None:
            return
        self.outcome = ExitOutcome(exit_code=exit_code, signal=sig)
        for callback in self._exit_callbacks:
            callback(self.outcome)

    def kill(self, sig: int = signal.SIGHUP) -> None:
        self.kills.append(sig)
        if self.kill_error is not None:
            raise self.kill_error

    def resize(self, cols: int, rows: int) -> None:
        self.size = (cols, rows)

    async def close(self, grace: float = 2.0) -> None:
        self.close_calls += 1


class FakeSpawner:
    """Records spawn calls and hands out a prepared handle (or raises)."""

    def __init__(self, handle: FakeHandle | None = None, error: Exception | None = None) -> None:
        self.handle = handle or FakeHandle()
        self.error = error
        self.calls: list[tuple[str, list[str], SpawnOptions]] = []

    @property
    def available(self) -> bool:
        return True

    async def spawn(self, file: str, args: list[str], options: SpawnOptions) -> FakeHandle:
        self.calls.append((file, args, options))
        if self.error is not None:
            raise self.error
        return self.handle


@pytest.fixture
def fake_handle() -> FakeHandle:
    return FakeHandle()


@pytest.fixture
def fake_spawner(fake_handle: FakeHandle) -> FakeSpawner:
    return FakeSpawner(fake_handle)


@pytest.fixture
def make_handle():
    return FakeHandle


@pytest.fixture
def make_spawner():
    return FakeSpawner
