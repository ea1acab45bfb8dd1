"""Exception hierarchy for pypas.

All exceptions inherit from :class:`PASError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pypas.exit_codes`,
plus the HTTP ``status_code`` and vault ``error_code`` (e.g.
``PASWS013E``) when the error came from a REST response.

Subclass hierarchy::

    PASError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- VersionError        (exit 7)
    +-- RequestError        (exit 8)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from pypas.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REQUEST_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_VERSION_ERROR,
)


class PASError(Exception):
    """Base exception for all pypas errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
        status_code: HTTP status of the failed response, if any.
        error_code: Vault error code from the response body, if any.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code
        self.status_code = status_code
        self.error_code = error_code


class InvalidUsageError(PASError):
    """Raised for invalid or conflicting command arguments."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(PASError):
    """Raised when logon fails or the session token is rejected (HTTP 401/403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(PASError):
    """Raised when the PVWA returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(PASError):
    """Raised when the PVWA returns an HTTP 5xx error or an unexpected HTML page."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(PASError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class VersionError(PASError):
    """Raised when the connected vault version does not support a command."""

    exit_code = EXIT_VERSION_ERROR


class RequestError(PASError):
    """Raised when the PVWA rejects a request with a 4xx status other than 401/403/404."""

    exit_code = EXIT_REQUEST_ERROR


class ConfigError(PASError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
