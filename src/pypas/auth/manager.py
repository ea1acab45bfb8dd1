"""Logon manager -- registry and dispatcher for logon methods.

:class:`LogonManager` maps logon-type strings (``"cyberark"``, ``"ldap"``,
...) to :class:`~pypas.auth.base.LogonMethod` instances.
:func:`create_default_manager` returns one pre-loaded with every built-in
method.
"""

from __future__ import annotations

from pypas.auth.base import LogonMethod
from pypas.exceptions import AuthError


class LogonManager:
    """Registry for logon methods, keyed by :attr:`~LogonMethod.logon_type`.

    Example::

        manager = LogonManager()
        manager.register(LDAPLogon())
        method = manager.get_method("ldap")
    """

    def __init__(self) -> None:
        self._methods: dict[str, LogonMethod] = {}

    def register(self, method: LogonMethod) -> None:
        """Register *method*, replacing any method of the same type."""
        self._methods[method.logon_type] = method

    def get_method(self, logon_type: str) -> LogonMethod:
        """Return the method registered for *logon_type* (case-insensitive).

        Raises:
            AuthError: If no method is registered for *logon_type*.
        """
        method = self._methods.get(logon_type.lower())
        if method is None:
            available = ", ".join(sorted(self._methods)) or "(none)"
            raise AuthError(
                f"No logon method registered for type '{logon_type}'. "
                f"Available types: {available}"
            )
        return method

    def list_types(self) -> list[str]:
        return sorted(self._methods)


def create_default_manager() -> LogonManager:
    """Create a :class:`LogonManager` holding cyberark, ldap, radius and shared logon."""
    from pypas.auth.methods import CyberArkLogon, LDAPLogon, RADIUSLogon, SharedLogon

    manager = LogonManager()
    manager.register(CyberArkLogon())
    manager.register(LDAPLogon())
    manager.register(RADIUSLogon())
    manager.register(SharedLogon())
    return manager
