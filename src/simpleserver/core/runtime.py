"""Interpreter probing and static server dispatch.

The launcher never serves files itself. It asks an interpreter for its major
version, picks the matching standard library server module and runs
``<interpreter> -m <module> <port>`` as a blocking foreground child.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from simpleserver.core.errors import (
    InterpreterNotFoundError,
    InvalidPortError,
    ServeDirectoryError,
    UnsupportedOptionError,
    VersionDetectionError,
)

DEFAULT_PORT = 8000

PY3_SERVER_MODULE = "http.server"
PY2_SERVER_MODULE = "SimpleHTTPServer"

_VERSION_PROBE = "import sys; print(sys.version_info[0])"


@dataclass(frozen=True)
class ServerCommand:
    """A fully resolved server invocation."""

    interpreter: str
    module: str
    port: int
    bind: Optional[str] = None
    directory: Optional[Path] = None

    @property
    def argv(self) -> List[str]:
        args = [self.interpreter, "-m", self.module]
        # SimpleHTTPServer only understands the port; build_command never
        # pairs it with these options.
        if self.module == PY3_SERVER_MODULE:
            if self.bind:
                args += ["--bind", self.bind]
            if self.directory is not None:
                args += ["--directory", str(self.directory)]
        args.append(str(self.port))
        return args

    @property
    def cwd(self) -> Optional[Path]:
        """Working directory for the child (Python 2 has no ``--directory``)."""
        if self.module == PY2_SERVER_MODULE:
            return self.directory
        return None

    def __str__(self) -> str:
        return shlex.join(self.argv)


def validate_port(port: object) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidPortError(f"port must be an integer, got {port!r}")
    if not 1 <= port <= 65535:
        raise InvalidPortError(f"port must be between 1 and 65535, got {port}")
    return port


def detect_major_version(interpreter: str) -> int:
    """Return the major version reported by ``interpreter``."""
    try:
        proc = subprocess.run(
            [interpreter, "-c", _VERSION_PROBE],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise InterpreterNotFoundError(f"cannot execute interpreter {interpreter!r}: {exc}") from exc

    if proc.returncode != 0:
        detail = proc.stderr.strip() or f"exit status {proc.returncode}"
        raise VersionDetectionError(f"{interpreter} failed to report its version: {detail}")

    out = proc.stdout.strip()
    try:
        return int(out)
    except ValueError as exc:
        raise VersionDetectionError(
            f"{interpreter} printed an unexpected version string: {out!r}"
        ) from exc


def select_server_module(major: int) -> str:
    return PY3_SERVER_MODULE if major >= 3 else PY2_SERVER_MODULE


def build_command(
    port: int = DEFAULT_PORT,
    *,
    interpreter: str,
    bind: Optional[str] = None,
    directory: Union[str, Path, None] = None,
    major: Optional[int] = None,
) -> ServerCommand:
    """Resolve everything needed to launch the server.

    Parameters
    ----------
    port : int
        TCP port for the server (default 8000).
    interpreter : str
        Executable to probe and launch.
    bind : str | None
        Address to bind. Only ``http.server`` accepts one.
    directory : str | Path | None
        Directory to serve. Defaults to the current working directory.
    major : int | None
        Known major version; skips probing the interpreter when given.
    """
    port = validate_port(port)

    serve_dir: Optional[Path] = None
    if directory:
        serve_dir = Path(directory)
        if not serve_dir.is_dir():
            raise ServeDirectoryError(f"directory does not exist: {serve_dir}")

    if major is None:
        major = detect_major_version(interpreter)
    module = select_server_module(major)

    if bind and module == PY2_SERVER_MODULE:
        raise UnsupportedOptionError(f"{PY2_SERVER_MODULE} cannot bind to a specific address")

    return ServerCommand(
        interpreter=interpreter,
        module=module,
        port=port,
        bind=bind or None,
        directory=serve_dir,
    )


def _exit_status(returncode: int) -> int:
    # Popen reports signal deaths as -signum; shells report 128 + signum.
    if returncode < 0:
        return 128 - returncode
    return returncode


def run(command: ServerCommand) -> int:
    """Run the server in the foreground and return its exit status."""
    try:
        proc = subprocess.Popen(command.argv, cwd=command.cwd)
    except OSError as exc:
        raise InterpreterNotFoundError(
            f"cannot execute interpreter {command.interpreter!r}: {exc}"
        ) from exc

    with proc:
        try:
            returncode = proc.wait()
        except KeyboardInterrupt:
            # The child shares our process group and got the same SIGINT.
            returncode = proc.wait()
    return _exit_status(returncode)
