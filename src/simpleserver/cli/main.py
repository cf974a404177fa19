from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from simpleserver import __version__
from simpleserver.config.settings import Settings
from simpleserver.core import runtime
from simpleserver.core.errors import (
    InterpreterNotFoundError,
    InvalidPortError,
    SimpleServerError,
)

app = typer.Typer(
    help="Serve the current directory with the interpreter's built-in HTTP server.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _error_code(exc: SimpleServerError) -> int:
    if isinstance(exc, InvalidPortError):
        return 2
    if isinstance(exc, InterpreterNotFoundError):
        return 127
    return 1


@app.command()
def serve(
    port: Optional[int] = typer.Argument(
        None, min=1, max=65535, help="Port to listen on (default 8000)."
    ),
    bind: Optional[str] = typer.Option(
        None, "--bind", "-b", help="Address to bind (http.server only)."
    ),
    directory: Optional[Path] = typer.Option(
        None, "--directory", "-d", help="Directory to serve instead of the current one."
    ),
    python: Optional[str] = typer.Option(
        None, "--python", help="Interpreter to probe and launch."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the server command instead of running it."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    typer.echo("simpleserver started", err=True)

    try:
        cfg = Settings()
    except ValidationError as exc:
        typer.echo(f"Error: invalid configuration\n{exc}", err=True)
        raise typer.Exit(code=2)

    try:
        command = runtime.build_command(
            port if port is not None else cfg.PORT,
            interpreter=python or cfg.PYTHON,
            bind=bind or cfg.BIND,
            directory=directory or cfg.SERVE_DIR,
        )
        if dry_run:
            typer.echo(str(command))
            if command.cwd is not None:
                typer.echo(f"(in {command.cwd})")
            return
        status = runtime.run(command)
    except SimpleServerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=_error_code(exc))

    raise typer.Exit(code=status)


if __name__ == "__main__":  # pragma: no cover
    app()
