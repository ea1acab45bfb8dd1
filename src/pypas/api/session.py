"""Session bootstrap: logon, logoff and session details.

:func:`new_session` is the usual way into the library. It opens a
:class:`~pypas.client.PASSession`, logs on with the requested method,
and reads the vault version so that later commands can check their
version requirements.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import httpx

from pypas.auth.base import LogonCredentials
from pypas.auth.manager import LogonManager, create_default_manager
from pypas.client.session import UNKNOWN_VERSION, PASSession
from pypas.exceptions import PASError
from pypas.models import RequestConfig
from pypas.objects import SessionInfo
from pypas.output import debug, warning
from pypas.versioning import format_version, parse_version


def new_session(
    base_uri: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
    logon_type: str = "cyberark",
    application: str = "PasswordVault",
    classic: bool = False,
    new_password: Optional[str] = None,
    concurrent_session: Optional[bool] = None,
    connection_number: Optional[int] = None,
    request: Optional[RequestConfig] = None,
    skip_version_check: bool = False,
    dry_run: bool = False,
    transport: Optional[httpx.BaseTransport] = None,
    manager: Optional[LogonManager] = None,
) -> PASSession:
    """Open a session and log on.

    Args:
        base_uri: PVWA scheme and host.
        username: Vault, LDAP or RADIUS username (unused for shared logon).
        password: The user's password.
        logon_type: ``cyberark``, ``ldap``, ``radius`` or ``shared``.
        application: PVWA application path.
        classic: Use the classic ``WebServices/auth`` endpoints.
        new_password: Change the password as part of logon.
        concurrent_session: Allow concurrent sessions (gen2 only).
        connection_number: Classic connection number (1-100).
        request: Timeout, TLS, retry and client-certificate settings.
        skip_version_check: Do not read the vault version after logon.
        dry_run: Print requests instead of sending them.
        transport: Custom httpx transport.
        manager: Logon method registry; defaults to all built-in methods.

    Returns:
        An open, logged-on :class:`~pypas.client.PASSession`.

    Raises:
        AuthError: If logon fails.
    """
    method = (manager or create_default_manager()).get_method(logon_type)
    credentials = LogonCredentials(
        username=username,
        password=password,
        new_password=new_password,
        concurrent_session=concurrent_session,
        connection_number=connection_number,
    )

    session = PASSession(
        base_uri,
        application=application,
        request=request,
        dry_run=dry_run,
        transport=transport,
    ).open()
    try:
        session.token = method.logon(session, credentials, classic=classic)
    except BaseException:
        session.close()
        raise

    session.user = username
    session.started_at = datetime.now()
    if method.logon_type == "shared":
        session.api_style = "shared"
    elif classic:
        session.api_style = "classic"
    else:
        session.api_style = "gen2"
    debug(f"Logged on to {session.base_url} as {username or '(certificate)'}")

    if not (skip_version_check or dry_run):
        session.external_version = _read_version(session)
    return session


def _read_version(session: PASSession) -> tuple[int, ...]:
    """Read the vault version; any unusable answer yields ``(0, 0)`` and a warning."""
    from pypas.api.server import get_server
    from pypas.objects import Server

    try:
        server = get_server(session)
    except (PASError, TypeError) as exc:
        warning(f"Could not determine the vault version: {exc}")
        return UNKNOWN_VERSION
    if not isinstance(server, Server):
        warning("Could not determine the vault version: empty Server response")
        return UNKNOWN_VERSION
    version = parse_version(server.ExternalVersion)
    debug(f"Vault version {format_version(version)}")
    return version


def close_session(session: PASSession, manager: Optional[LogonManager] = None) -> None:
    """Log off and close the transport.

    The logoff endpoint follows the session's ``api_style``. The token is
    cleared even when logoff fails; the failure is re-raised.
    """
    registry = manager or create_default_manager()
    if session.api_style == "shared":
        method = registry.get_method("shared")
    else:
        method = registry.get_method("cyberark")
    if not session.is_open:
        session.open()
    try:
        method.logoff(session, classic=session.api_style == "classic")
    finally:
        session.token = None
        session.close()


def get_session_info(session: PASSession) -> SessionInfo:
    """Describe *session*: address, user, version, timings and last command."""
    elapsed = None
    if session.started_at is not None:
        delta = datetime.now() - session.started_at
        hours, remainder = divmod(int(delta.total_seconds()), 3600)
        minutes, seconds = divmod(remainder, 60)
        elapsed = f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    return SessionInfo(
        BaseURI=session.base_uri,
        Application=session.application,
        User=session.user,
        ExternalVersion=format_version(session.external_version),
        ApiStyle=session.api_style,
        LoggedOn=session.token is not None,
        StartTime=session.started_at,
        ElapsedTime=elapsed,
        LastCommand=session.last_command,
        LastCommandTime=session.last_command_time,
    )
