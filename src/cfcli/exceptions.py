"""Exception hierarchy for cfcli.

All exceptions inherit from :class:`CfcliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`cfcli.exit_codes`.
The top-level error handler in :func:`cfcli.app.main` catches
``CfcliError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    CfcliError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- SpecParseError      (exit 7)
    +-- TreeLoadError       (exit 8)
    +-- ConfigError         (exit 1)
"""

from cfcli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TREE_ERROR,
)


class CfcliError(Exception):
    """Base exception for all cfcli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`cfcli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CfcliError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(CfcliError):
    """Raised when the API rejects the token (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(CfcliError):
    """Raised when the API returns HTTP 404, or a command is unknown."""

    exit_code = EXIT_NOT_FOUND


class ServerError(CfcliError):
    """Raised when the API answers with any other HTTP error status."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(CfcliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(CfcliError):
    """Raised when the OpenAPI document cannot be loaded or has no ``paths``."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class TreeLoadError(CfcliError):
    """Raised when the command-tree artifact is missing or invalid."""

    exit_code = EXIT_TREE_ERROR


class ConfigError(CfcliError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
