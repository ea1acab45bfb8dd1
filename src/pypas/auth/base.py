"""Abstract base class for vault logon methods.

This module defines the two foundational types of the logon subsystem:

- :class:`LogonCredentials` -- what the caller supplies (username,
  password, optional new password and session flags).
- :class:`LogonMethod` -- the abstract base every logon type extends.

A method knows its endpoints (gen2 ``api/Auth/...`` and classic
``WebServices/auth/...``), how to build the logon body for each, and how
to pull the token out of each response shape. Subclasses set
:attr:`~LogonMethod.logon_type` and the endpoint names; most override
nothing else.

See Also:
    :mod:`pypas.auth.manager` for registration and dispatch.
    :func:`pypas.api.session.new_session` for the full bootstrap.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, SecretStr

from pypas.client.session import PASSession
from pypas.exceptions import AuthError


class LogonCredentials(BaseModel):
    """Credentials and flags for one logon call.

    Example::

        creds = LogonCredentials(username="admin", password="Cyberark1")
        creds.password.get_secret_value()
    """

    username: Optional[str] = None
    password: Optional[SecretStr] = None
    new_password: Optional[SecretStr] = None
    concurrent_session: Optional[bool] = None
    connection_number: Optional[int] = None


class LogonMethod(ABC):
    """Abstract base class for logon methods.

    Concrete methods provide :attr:`logon_type` and :attr:`auth_segment`
    (the path segment naming the authentication type on the PVWA).
    """

    classic_service = "CyberArkAuthenticationService.svc"

    @property
    @abstractmethod
    def logon_type(self) -> str:
        """Unique identifier, e.g. ``"cyberark"`` or ``"ldap"``."""
        ...

    @property
    @abstractmethod
    def auth_segment(self) -> str:
        """Authentication type as spelled in the PVWA URL (``CyberArk``, ``LDAP``)."""
        ...

    @property
    def requires_password(self) -> bool:
        return True

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    def logon_path(self, classic: bool) -> str:
        if classic:
            return f"/WebServices/auth/{self.classic_segment}/{self.classic_service}/Logon"
        return f"/api/Auth/{self.auth_segment}/Logon"

    def logoff_path(self, classic: bool) -> str:
        if classic:
            return f"/WebServices/auth/Cyberark/{self.classic_service}/Logoff"
        return "/api/Auth/Logoff"

    @property
    def classic_segment(self) -> str:
        return self.auth_segment

    # ------------------------------------------------------------------ #
    # Body and token handling
    # ------------------------------------------------------------------ #

    def build_body(self, credentials: LogonCredentials, classic: bool) -> Optional[dict[str, Any]]:
        """Return the JSON body for the logon request."""
        body: dict[str, Any] = {"username": credentials.username}
        if credentials.password is not None:
            body["password"] = credentials.password.get_secret_value()
        if credentials.new_password is not None:
            body["newPassword"] = credentials.new_password.get_secret_value()
        if classic:
            if credentials.connection_number is not None:
                body["connectionNumber"] = credentials.connection_number
        elif credentials.concurrent_session is not None:
            body["concurrentSession"] = credentials.concurrent_session
        return body

    def extract_token(self, result: Any, classic: bool) -> str:
        """Pull the session token out of a logon response.

        gen2 returns the token as a bare JSON string; classic wraps it in
        ``{"CyberArkLogonResult": ...}``.
        """
        if isinstance(result, dict):
            token = result.get("CyberArkLogonResult") or result.get("LogonResult")
        else:
            token = result
        if not token or not isinstance(token, str):
            raise AuthError(f"{self.auth_segment} logon returned no session token")
        return token.strip('"')

    def validate_credentials(self, credentials: LogonCredentials) -> list[str]:
        """Return human-readable problems with *credentials*; empty when usable."""
        errors: list[str] = []
        if not credentials.username:
            errors.append(f"{self.auth_segment} logon requires a username")
        if self.requires_password and credentials.password is None:
            errors.append(f"{self.auth_segment} logon requires a password")
        return errors

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def logon(self, session: PASSession, credentials: LogonCredentials, classic: bool = False) -> str:
        """Log on and return the session token.

        Raises:
            AuthError: If the credentials are incomplete, the PVWA rejects
                them, or no token comes back.
        """
        problems = self.validate_credentials(credentials)
        if problems:
            raise AuthError("; ".join(problems))
        result = session.invoke(
            "POST",
            self.logon_path(classic),
            json_body=self.build_body(credentials, classic),
        )
        if session.dry_run:
            return "dry-run"
        return self.extract_token(result, classic)

    def logoff(self, session: PASSession, classic: bool = False) -> None:
        session.invoke("POST", self.logoff_path(classic))
