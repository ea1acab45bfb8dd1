"""Persisted vault sessions, one per profile.

The CLI logs on once (``pypas logon``) and later invocations reuse the
token until ``pypas logoff``. Each profile's session lives in
``<data_dir>/sessions/<profile>.json``, written atomically with ``0o600``
permissions so the token is never world-readable, even momentarily.

The PVWA expires idle tokens on its own schedule, so a stored entry is
only a candidate: the first rejected call surfaces as
:class:`~pypas.exceptions.AuthError`.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from pypas.client.session import PASSession
from pypas.config import _atomic_write, get_sessions_dir


class SessionEntry(BaseModel):
    """A logged-on session as written to disk.

    Attributes:
        base_uri: PVWA scheme and host.
        application: PVWA application path.
        token: The session token sent in the ``Authorization`` header.
        user: Logged-on username.
        logon_type: Logon method that produced the token.
        api_style: ``gen2``, ``classic`` or ``shared``; decides the
            logoff endpoint.
        external_version: Vault version read at logon.
        started_at: Logon time.
    """

    base_uri: str
    application: str = "PasswordVault"
    token: str = Field(description="Session token")
    user: Optional[str] = None
    logon_type: str = "cyberark"
    api_style: str = "gen2"
    external_version: list[int] = Field(default_factory=list)
    started_at: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: PASSession, logon_type: str) -> SessionEntry:
        if not session.token:
            raise ValueError("Cannot store a session that is not logged on")
        return cls(
            base_uri=session.base_uri,
            application=session.application,
            token=session.token,
            user=session.user,
            logon_type=logon_type,
            api_style=session.api_style,
            external_version=list(session.external_version),
            started_at=session.started_at,
        )


class SessionStore:
    """Read/write the stored session for a single profile.

    Args:
        profile_name: The profile identifier used to derive the file name.

    Example::

        store = SessionStore("prod")
        store.save(SessionEntry.from_session(session, "ldap"))
        entry = store.load()
    """

    def __init__(self, profile_name: str) -> None:
        self._profile_name = profile_name
        self._path = get_sessions_dir() / f"{profile_name}.json"

    @property
    def path(self) -> Path:
        return self._path

    def save(self, entry: SessionEntry) -> None:
        """Persist *entry* atomically with ``0o600`` permissions."""
        text = json.dumps(entry.model_dump(mode="json"), indent=2) + "\n"
        _atomic_write(self._path, text, mode=0o600)

    def load(self) -> Optional[SessionEntry]:
        """Load the stored entry, or ``None`` when missing or unreadable."""
        if not self._path.is_file():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return SessionEntry.model_validate(data)
        except (json.JSONDecodeError, ValueError, OSError):
            return None

    def exists(self) -> bool:
        return self.load() is not None

    def clear(self) -> None:
        """Delete the stored session; a no-op when there is none."""
        if self._path.is_file():
            self._path.unlink()
