"""Shared test fixtures for pypas.

Provides an in-memory fake PVWA (:class:`FakeVault`) served through
:class:`httpx.MockTransport`, isolated config directories, and output
state management. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

import httpx
import pytest

from pypas.client.session import PASSession
from pypas.models import RequestConfig
from pypas.output import OutputFormat, OutputManager, reset_output, set_output


BASE_URI = "https://pvwa.example.com"
APP_ROOT = "/PasswordVault"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fake vault
# ---------------------------------------------------------------------------


class FakeVault:
    """A route table standing in for the PVWA.

    Routes are keyed by method and path relative to the application root
    (``/api/Accounts``); the query string is ignored for matching and
    recorded for assertions. A route registered with several responses
    serves them in order, repeating the last one.

    Example::

        vault.add("GET", "/api/Accounts/12_3", json={"id": "12_3"})
        vault.add("GET", "/api/Accounts", json=[page1, page2])  # sequence
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        sequence: Optional[list[Any]] = None,
    ) -> None:
        """Register a response (or a ``sequence`` of JSON bodies) for a route."""
        bodies = sequence if sequence is not None else [json]
        responses = []
        for body in bodies:
            if content is not None:
                responses.append(httpx.Response(status, content=content, headers=headers))
            elif body is None:
                responses.append(httpx.Response(status, headers=headers))
            else:
                responses.append(httpx.Response(status, json=body, headers=headers))
        self._routes[(method.upper(), path)] = responses

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(APP_ROOT):
            path = path[len(APP_ROOT):]
        queue = self._routes.get((request.method, path))
        if not queue:
            return httpx.Response(
                404,
                json={"ErrorCode": "PASWS000E", "ErrorMessage": f"No route for {request.method} {path}"},
            )
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def paths(self) -> list[str]:
        return [r.url.path[len(APP_ROOT):] for r in self.requests]


@pytest.fixture
def vault() -> FakeVault:
    """An empty fake PVWA; register routes with :meth:`FakeVault.add`."""
    return FakeVault()


def make_session(
    vault: FakeVault,
    version: Union[tuple[int, ...], None] = (14, 0),
    base_uri: str = BASE_URI,
) -> PASSession:
    """Build an open, logged-on session talking to *vault*."""
    session = PASSession(
        base_uri,
        request=RequestConfig(max_retries=0, timeout=5),
        transport=vault.transport,
    ).open()
    session.token = "TOKEN-123"
    session.user = "admin"
    if version is not None:
        session.external_version = version
    return session


@pytest.fixture
def session(vault: FakeVault) -> PASSession:
    """A logged-on session on a 14.0 vault backed by :func:`vault`."""
    s = make_session(vault)
    yield s
    s.close()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all PYPAS_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("pypas.config._is_xdg_platform", lambda: True)

    for var in ["PYPAS_PROFILE", "PYPAS_BASE_URI"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
