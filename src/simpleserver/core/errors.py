class SimpleServerError(Exception):
    """Base class for launcher failures reported before the server starts."""


class InvalidPortError(SimpleServerError):
    """Raised when the port is not an integer in 1..65535."""


class InterpreterNotFoundError(SimpleServerError):
    """Raised when the configured interpreter cannot be executed."""


class VersionDetectionError(SimpleServerError):
    """Raised when the interpreter runs but its major version can't be read."""


class UnsupportedOptionError(SimpleServerError):
    """Raised when an option has no equivalent for the selected server module."""


class ServeDirectoryError(SimpleServerError):
    """Raised when the directory to serve does not exist."""
