"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~pypas.exceptions.PASError` subclass.
Shell wrappers can inspect the exit code to determine the failure class
without parsing stderr.

Example::

    $ pypas account get --id 12_3
    $ echo $?
    4   # EXIT_NOT_FOUND -- the vault has no such account
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Logon failed, or the session token was rejected."""

EXIT_NOT_FOUND = 4
"""The requested vault object was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The PVWA returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_VERSION_ERROR = 7
"""The connected vault version does not support the command."""

EXIT_REQUEST_ERROR = 8
"""The PVWA rejected the request (HTTP 4xx other than 401/403/404)."""
