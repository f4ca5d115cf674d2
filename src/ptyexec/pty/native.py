"""Native PTY backend — stdlib pty plus an asyncio subprocess.

The shell runs in its own session with the PTY slave as its controlling
terminal, so it behaves exactly as it would for an interactive user.
Output is read from the master side through the event loop (no reader
thread), and the exit is observed with ``Process.wait()``.
"""

from __future__ import annotations

import asyncio
import codecs
import fcntl
import logging
import os
import pty
import signal
import struct
import termios
from contextlib import suppress

from ptyexec.pty.errors import SpawnFailed
from ptyexec.pty.handle import DataCallback, ExitCallback, ExitOutcome, HandleStatus
from ptyexec.pty.spawner import SpawnOptions

logger = logging.getLogger(__name__)

READ_CHUNK = 4096
MAX_DRAIN_READS = 256


def set_window_size(fd: int, cols: int, rows: int) -> None:
    """Set PTY dimensions using the TIOCSWINSZ ioctl."""
    fcntl.ioctl(fd, termios.TIOCSWINSZ, struct.pack("HHHH", rows, cols, 0, 0))


def _acquire_controlling_tty() -> None:
    # Runs in the child after setsid(); fd 0 is already the slave.
    fcntl.ioctl(0, termios.TIOCSCTTY, 0)


class PtyProcess:
    """A shell process attached to a pseudo-terminal.

    Must be constructed inside a running event loop: the master fd is
    registered with the loop immediately and a watcher task is started
    for the process exit.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        master_fd: int,
        *,
        cols: int,
        rows: int,
    ) -> None:
        self._process = process
        self._master_fd = master_fd
        self._cols = cols
        self._rows = rows
        self._status = HandleStatus.RUNNING
        self._outcome: ExitOutcome | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._data_callbacks: list[DataCallback] = []
        self._exit_callbacks: list[ExitCallback] = []
        self._pending: list[str] = []  # Output seen before any data handler
        self._outbox = bytearray()
        self._fd_open = True
        self._closed = False
        self._reading = False
        self._writing = False
        self._loop = asyncio.get_running_loop()

        os.set_blocking(master_fd, False)
        self._loop.add_reader(master_fd, self._on_readable)
        self._reading = True
        self._watcher = asyncio.create_task(self._watch_exit())

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def size(self) -> tuple[int, int]:
        return self._cols, self._rows

    @property
    def status(self) -> HandleStatus:
        return self._status

    @property
    def exited(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> ExitOutcome | None:
        return self._outcome

    # ------------------------------------------------------------------
    # Input / output
    # ------------------------------------------------------------------

    def write(self, data: str) -> None:
        """Queue text for the terminal's input, as if typed."""
        if self._closed:
            raise RuntimeError(f"PTY {self.pid} is closed")
        self._outbox += data.encode("utf-8")
        self._flush()

    def on_data(self, callback: DataCallback) -> None:
        self._data_callbacks.append(callback)
        if self._pending:
            pending, self._pending = self._pending, []
            for chunk in pending:
                self._dispatch(callback, chunk)

    def on_exit(self, callback: ExitCallback) -> None:
        if self._outcome is not None:
            self._loop.call_soon(callback, self._outcome)
            return
        self._exit_callbacks.append(callback)

    def resize(self, cols: int, rows: int) -> None:
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Invalid PTY size: {cols}x{rows}")
        if not self._fd_open:
            raise RuntimeError(f"PTY {self.pid} is closed")
        set_window_size(self._master_fd, cols, rows)
        self._cols, self._rows = cols, rows

    def _flush(self) -> None:
        while self._outbox:
            try:
                written = os.write(self._master_fd, self._outbox)
            except BlockingIOError:
                break
            except OSError as e:
                logger.debug("PTY %d write failed: %s", self.pid, e)
                self._outbox.clear()
                break
            del self._outbox[:written]

        if self._outbox and not self._writing:
            self._loop.add_writer(self._master_fd, self._flush)
            self._writing = True
        elif not self._outbox and self._writing:
            self._loop.remove_writer(self._master_fd)
            self._writing = False

    def _on_readable(self) -> None:
        try:
            data = os.read(self._master_fd, READ_CHUNK)
        except BlockingIOError:
            return
        except OSError:
            # EIO once every slave fd is closed
            data = b""
        if not data:
            self._stop_reading()
            return
        self._emit(self._decoder.decode(data))

    def _drain(self) -> None:
        """Read whatever is still queued on the master side."""
        for _ in range(MAX_DRAIN_READS):
            if not self._fd_open:
                return
            try:
                data = os.read(self._master_fd, READ_CHUNK)
            except OSError:
                return
            if not data:
                return
            self._emit(self._decoder.decode(data))

    def _emit(self, text: str) -> None:
        if not text:
            return
        if not self._data_callbacks:
            self._pending.append(text)
            return
        for callback in self._data_callbacks:
            self._dispatch(callback, text)

    def _dispatch(self, callback: DataCallback, text: str) -> None:
        try:
            callback(text)
        except Exception:
            logger.exception("Error in data callback for PTY %d", self.pid)

    def _stop_reading(self) -> None:
        if self._reading:
            self._loop.remove_reader(self._master_fd)
            self._reading = False

    def _stop_writing(self) -> None:
        if self._writing:
            self._loop.remove_writer(self._master_fd)
            self._writing = False
        self._outbox.clear()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _watch_exit(self) -> None:
        returncode = await self._process.wait()
        self._drain()
        self._stop_reading()
        self._emit(self._decoder.decode(b"", final=True))

        self._outcome = ExitOutcome.from_returncode(returncode)
        if self._status == HandleStatus.KILLING:
            self._status = HandleStatus.KILLED
        else:
            self._status = HandleStatus.EXITED
        logger.info(
            "PTY %d exited (code=%d signal=%s)",
            self.pid,
            self._outcome.exit_code,
            self._outcome.signal,
        )

        callbacks, self._exit_callbacks = self._exit_callbacks, []
        for callback in callbacks:
            try:
                callback(self._outcome)
            except Exception:
                logger.exception("Error in exit callback for PTY %d", self.pid)

    def kill(self, sig: int = signal.SIGHUP) -> None:
        """Signal the shell's process group. No-op once the shell is gone."""
        if self._outcome is not None or self._process.returncode is not None:
            return
        self._status = HandleStatus.KILLING
        try:
            # start_new_session makes the shell its own group leader
            os.killpg(self._process.pid, sig)
            logger.info("Sent signal %d to PTY %d", sig, self.pid)
        except ProcessLookupError:
            logger.debug("Process group already gone: %d", self.pid)

    async def close(self, grace: float = 2.0) -> None:
        """Reap the process and release the master fd. Runs once."""
        if self._closed:
            return
        self._closed = True

        if not self._watcher.done():
            try:
                await asyncio.wait_for(asyncio.shield(self._watcher), grace)
            except asyncio.TimeoutError:
                logger.warning(
                    "PTY %d still running after %.1fs, sending SIGKILL", self.pid, grace
                )
                self.kill(signal.SIGKILL)
                try:
                    await asyncio.wait_for(asyncio.shield(self._watcher), grace)
                except asyncio.TimeoutError:
                    logger.warning("PTY %d was not reaped", self.pid)
                    self._watcher.cancel()

        self._stop_reading()
        self._stop_writing()
        with suppress(OSError):
            os.close(self._master_fd)
        self._fd_open = False


class NativePtySpawner:
    """Spawns processes on a POSIX pseudo-terminal."""

    @property
    def available(self) -> bool:
        return True

    async def spawn(
        self, file: str, args: list[str], options: SpawnOptions
    ) -> PtyProcess:
        master_fd, slave_fd = pty.openpty()
        env = dict(options.env)
        env.setdefault("TERM", options.name)

        try:
            set_window_size(slave_fd, options.cols, options.rows)
            process = await asyncio.create_subprocess_exec(
                file,
                *args,
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                cwd=options.cwd,
                env=env,
                start_new_session=True,
                preexec_fn=_acquire_controlling_tty,
            )
        except Exception as e:
            os.close(master_fd)
            raise SpawnFailed(f"Failed to spawn {file}: {e}") from e
        finally:
            # Parent always closes slave fd
            os.close(slave_fd)

        logger.info(
            "PTY spawned: pid=%d cmd=%s size=%dx%d cwd=%s",
            process.pid,
            " ".join([file, *args]),
            options.cols,
            options.rows,
            options.cwd,
        )
        return PtyProcess(process, master_fd, cols=options.cols, rows=options.rows)
