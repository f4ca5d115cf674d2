"""CLI entry point for ptyexec."""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.markup import escape

from ptyexec.config import PtyExecConfig
from ptyexec.tool.builtin.exec_pty import ExecPtyTool

app = typer.Typer(
    name="ptyexec",
    help="Run a shell command inside a real pseudo-terminal login session.",
    no_args_is_help=True,
)

err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_env(pairs: list[str]) -> dict[str, str]:
    """Turn repeated KEY=VALUE options into a mapping."""
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got: {pair!r}", param_hint="--env")
        env[key] = value
    return env


@app.command()
def run(
    command: str = typer.Argument(help="Shell command to execute."),
    workdir: str | None = typer.Option(
        None, "--workdir", "-C", help="Working directory for the shell."
    ),
    env: list[str] = typer.Option(
        [], "--env", "-e", help="Extra environment variable, KEY=VALUE. Repeatable."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", help="Timeout in seconds (clamped to 1-300)."
    ),
    cols: int | None = typer.Option(None, "--cols", help="Terminal columns."),
    rows: int | None = typer.Option(None, "--rows", help="Terminal rows."),
    as_json: bool = typer.Option(
        False, "--json", help="Print the structured result as JSON."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Path to a JSON config file."
    ),
) -> None:
    """Run COMMAND in a fresh PTY session and print its terminal output."""
    setup_logging(verbose)
    config = PtyExecConfig.load(config_file)

    arguments: dict[str, object] = {"command": command}
    if workdir is not None:
        arguments["workdir"] = workdir
    if env:
        arguments["env"] = _parse_env(env)
    if timeout is not None:
        arguments["timeout"] = timeout
    if cols is not None:
        arguments["cols"] = cols
    if rows is not None:
        arguments["rows"] = rows

    tool = ExecPtyTool(config=config)
    result = asyncio.run(tool(arguments))

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(result.output, nl=False)
        if result.system:
            err_console.print(f"[red]{escape(result.system)}[/red]", highlight=False)

    if result.is_error:
        raise typer.Exit(1)


@app.command()
def schema() -> None:
    """Print the exec_pty function spec as JSON."""
    typer.echo(json.dumps(ExecPtyTool().to_openai_spec(), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
