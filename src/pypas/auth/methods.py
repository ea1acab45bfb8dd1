"""Built-in logon methods.

=========  ==========================  ===============================
type       gen2 endpoint               classic endpoint
=========  ==========================  ===============================
cyberark   ``api/Auth/CyberArk``       ``WebServices/auth/Cyberark``
ldap       ``api/Auth/LDAP``           ``WebServices/auth/LDAP``
radius     ``api/Auth/RADIUS``         ``WebServices/auth/RADIUS``
shared     ``WebServices/auth/Shared/RestfulAuthenticationService.svc``
=========  ==========================  ===============================
"""

from __future__ import annotations

from typing import Any, Optional

from pypas.auth.base import LogonCredentials, LogonMethod


class CyberArkLogon(LogonMethod):
    """Vault-internal users."""

    @property
    def logon_type(self) -> str:
        return "cyberark"

    @property
    def auth_segment(self) -> str:
        return "CyberArk"

    @property
    def classic_segment(self) -> str:
        return "Cyberark"


class LDAPLogon(LogonMethod):
    """Directory users mapped through an LDAP integration."""

    @property
    def logon_type(self) -> str:
        return "ldap"

    @property
    def auth_segment(self) -> str:
        return "LDAP"


class RADIUSLogon(LogonMethod):
    """RADIUS users.

    The classic endpoint also needs ``useRadiusAuthentication`` in the body.
    """

    @property
    def logon_type(self) -> str:
        return "radius"

    @property
    def auth_segment(self) -> str:
        return "RADIUS"

    def build_body(self, credentials: LogonCredentials, classic: bool) -> Optional[dict[str, Any]]:
        body = super().build_body(credentials, classic)
        if classic and body is not None:
            body["useRadiusAuthentication"] = "true"
        return body


class SharedLogon(LogonMethod):
    """Shared (client certificate) authentication.

    The PVWA identifies the caller from the TLS client certificate set in
    :attr:`~pypas.models.RequestConfig.client_certificate`; there is no
    body and the gen2 and classic endpoints are the same.
    """

    classic_service = "RestfulAuthenticationService.svc"

    @property
    def logon_type(self) -> str:
        return "shared"

    @property
    def auth_segment(self) -> str:
        return "Shared"

    @property
    def requires_password(self) -> bool:
        return False

    def logon_path(self, classic: bool) -> str:
        return f"/WebServices/auth/Shared/{self.classic_service}/Logon"

    def logoff_path(self, classic: bool) -> str:
        return f"/WebServices/auth/Shared/{self.classic_service}/Logoff"

    def build_body(self, credentials: LogonCredentials, classic: bool) -> Optional[dict[str, Any]]:
        return None

    def validate_credentials(self, credentials: LogonCredentials) -> list[str]:
        return []
