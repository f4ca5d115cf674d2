"""Session launcher — resolves shell, cwd and environment, then spawns."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from ptyexec.config import ShellConfig
from ptyexec.pty.errors import PtyError, SpawnFailed
from ptyexec.pty.handle import TerminalHandle
from ptyexec.pty.spawner import PtySpawner, SpawnOptions, resolve_spawner
from ptyexec.session.models import SessionRequest

logger = logging.getLogger(__name__)


class SessionLauncher:
    """Produces a terminal handle running a login shell for a request.

    The process environment is captured once, at construction, so tests
    (and embedding hosts) can pass a fixed mapping instead.
    """

    def __init__(
        self,
        spawner: PtySpawner | None = None,
        environ: Mapping[str, str] | None = None,
        shell_config: ShellConfig | None = None,
    ) -> None:
        self._spawner = spawner if spawner is not None else resolve_spawner()
        self._environ = dict(os.environ if environ is None else environ)
        self._config = shell_config or ShellConfig()

    @property
    def spawner(self) -> PtySpawner:
        return self._spawner

    def resolve_shell(self) -> str:
        return self._environ.get("SHELL") or self._config.default_shell

    def resolve_cwd(self, request: SessionRequest) -> str:
        return request.workdir or os.getcwd()

    def build_env(self, request: SessionRequest) -> dict[str, str]:
        """Ambient environment, TERM defaulted, request entries winning."""
        env = dict(self._environ)
        env["TERM"] = self._environ.get("TERM") or self._config.term
        env.update(request.env)
        return env

    async def launch(self, request: SessionRequest) -> TerminalHandle:
        shell = self.resolve_shell()
        options = SpawnOptions(
            name=self._config.term,
            cols=request.cols,
            rows=request.rows,
            cwd=self.resolve_cwd(request),
            env=self.build_env(request),
        )
        logger.debug("Launching %s %s in %s", shell, self._config.shell_args, options.cwd)

        try:
            return await self._spawner.spawn(shell, list(self._config.shell_args), options)
        except PtyError:
            raise
        except Exception as e:
            raise SpawnFailed(f"Failed to start PTY session: {e}") from e
