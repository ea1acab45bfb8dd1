"""Vault logon methods and session persistence.

The main entry points are:

- :class:`LogonMethod` -- abstract base for a logon type (endpoints, body,
  token extraction).
- :class:`LogonManager` -- registry mapping type strings to methods.
- :func:`create_default_manager` -- a manager with cyberark, ldap, radius
  and shared logon.
- :class:`SessionStore` -- per-profile persisted session token.

Typical usage::

    from pypas.auth import LogonCredentials, create_default_manager

    method = create_default_manager().get_method("ldap")
    token = method.logon(session, LogonCredentials(username="u", password="p"))
"""

from pypas.auth.base import LogonCredentials, LogonMethod
from pypas.auth.manager import LogonManager, create_default_manager
from pypas.auth.session_store import SessionEntry, SessionStore

__all__ = [
    "LogonCredentials",
    "LogonMethod",
    "LogonManager",
    "SessionEntry",
    "SessionStore",
    "create_default_manager",
]
