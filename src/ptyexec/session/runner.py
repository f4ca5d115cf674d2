"""Run one command in one PTY session.

The flow is: launch a login shell, attach the output collector, register
the exit signal, type the command followed by ``exit``, then race the
shell's exit against a timer. Every path ends with the handle closed and
a ``SessionResult`` built from whatever output was captured.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from ptyexec.config import ShellConfig
from ptyexec.pty.buffer import OutputBuffer
from ptyexec.pty.errors import CommandTimeout, PtyError
from ptyexec.pty.handle import ExitOutcome, TerminalHandle
from ptyexec.session.launcher import SessionLauncher
from ptyexec.session.models import SessionRequest, SessionResult

logger = logging.getLogger(__name__)


def inject_command(
    handle: TerminalHandle,
    command: str,
    exit_command: str = "exit",
    line_terminator: str = "\r",
) -> None:
    """Type the command, then the command that ends the login shell."""
    handle.write(f"{command}{line_terminator}")
    handle.write(f"{exit_command}{line_terminator}")


def completion_signal(handle: TerminalHandle) -> asyncio.Future[ExitOutcome]:
    """Return a future resolved by the handle's first (and only) exit event."""
    future: asyncio.Future[ExitOutcome] = asyncio.get_running_loop().create_future()

    def _resolve(outcome: ExitOutcome) -> None:
        if not future.done():
            future.set_result(outcome)

    handle.on_exit(_resolve)
    return future


def terminate_quietly(handle: TerminalHandle, sig: int) -> None:
    """Best-effort kill. Failures are logged at debug level and dropped."""
    try:
        handle.kill(sig)
    except Exception as e:
        logger.debug("Ignoring error while terminating PTY %s: %s", handle.pid, e)


async def race_completion(
    handle: TerminalHandle,
    exit_signal: asyncio.Future[ExitOutcome],
    timeout: float,
) -> ExitOutcome:
    """Wait for the shell to exit or the timer to fire, whichever is first.

    On timeout the handle is hard-killed and ``CommandTimeout`` is raised.
    When both are already resolved the exit wins.
    """
    timer = asyncio.ensure_future(asyncio.sleep(timeout))
    try:
        done, _ = await asyncio.wait(
            {exit_signal, timer}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        timer.cancel()

    if exit_signal in done:
        if not handle.exited:
            terminate_quietly(handle, signal.SIGHUP)
        return exit_signal.result()

    logger.warning("PTY %s timed out after %gs, killing", handle.pid, timeout)
    terminate_quietly(handle, signal.SIGKILL)
    raise CommandTimeout(timeout)


def describe_exit(outcome: ExitOutcome) -> str:
    text = f"Exit code: {outcome.exit_code}"
    if outcome.signal is not None:
        text += f" (signal: {outcome.signal})"
    return text


def build_result(outcome: ExitOutcome, output: OutputBuffer) -> SessionResult:
    if outcome.success:
        return SessionResult(success=True, output_text=output.read_all())
    return SessionResult(
        success=False,
        output_text=output.read_all(),
        diagnostic=describe_exit(outcome),
    )


def build_failure(error: Exception, output: OutputBuffer) -> SessionResult:
    return SessionResult(
        success=False,
        output_text=output.read_all(),
        diagnostic=str(error) or type(error).__name__,
    )


async def run_session(
    request: SessionRequest,
    launcher: SessionLauncher | None = None,
    shell_config: ShellConfig | None = None,
) -> SessionResult:
    """Execute ``request`` in a fresh PTY session. Never raises."""
    shell_config = shell_config or ShellConfig()
    launcher = launcher or SessionLauncher(shell_config=shell_config)
    output = OutputBuffer()

    try:
        handle = await launcher.launch(request)
    except PtyError as e:
        logger.warning("PTY session could not start: %s", e)
        return build_failure(e, output)

    try:
        handle.on_data(output.append)
        exit_signal = completion_signal(handle)
        inject_command(
            handle,
            request.command,
            exit_command=shell_config.exit_command,
            line_terminator=shell_config.line_terminator,
        )
        outcome = await race_completion(handle, exit_signal, request.timeout)
    except CommandTimeout as e:
        return build_failure(e, output)
    except Exception as e:
        logger.error("PTY session %s failed: %s", handle.pid, e, exc_info=True)
        return build_failure(e, output)
    finally:
        await handle.close(grace=shell_config.kill_grace)

    logger.info(
        "PTY session %s finished (code=%d signal=%s, %d chars)",
        handle.pid,
        outcome.exit_code,
        outcome.signal,
        len(output),
    )
    return build_result(outcome, output)
