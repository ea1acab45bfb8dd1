"""Vault session and shared REST invoker.

:class:`PASSession` is the one object every command receives. It wraps an
:class:`httpx.Client` rooted at ``<base_uri>/<application>`` and layers on:

- **Token injection** -- the logon token is sent verbatim in the
  ``Authorization`` header of every request.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  200 response without sending traffic.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- vault error bodies (``ErrorCode`` /
  ``ErrorMessage``) become typed :mod:`pypas.exceptions`.
- **Session bookkeeping** -- the last command, its time and its result are
  kept for :func:`~pypas.api.session.get_session_info`.

Logon itself lives in :mod:`pypas.auth`; this module only carries the
token once one exists.
"""

from __future__ import annotations

import json
import re
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import urlparse

import httpx

from pypas.client.response import extract_response_data
from pypas.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    RequestError,
    ServerError,
)
from pypas.models import RequestConfig
from pypas.output import debug, get_output

if TYPE_CHECKING:
    from pypas.auth.session_store import SessionEntry

PRIVILEGE_CLOUD_DOMAINS = ("cyberark.cloud", "privilegecloud.cyberark.com")
UNKNOWN_VERSION: tuple[int, ...] = (0, 0)

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class PASSession:
    """A connection to one PVWA, optionally logged on.

    Must be opened (``open()`` or ``with``) before requests are made. The
    token, user and version are filled in by
    :func:`~pypas.api.session.new_session`, or restored from a
    :class:`~pypas.auth.session_store.SessionEntry` with :meth:`from_entry`.

    Args:
        base_uri: PVWA scheme and host, e.g. ``https://pvwa.example.com``.
        application: PVWA application path.
        request: Timeout, TLS and retry settings.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        transport: Optional custom :mod:`httpx` transport (tests use
            :class:`httpx.MockTransport`).

    Example::

        with PASSession("https://pvwa.example.com") as session:
            session.token = token
            server = session.invoke("GET", "/WebServices/PIMServices.svc/Server")
    """

    def __init__(
        self,
        base_uri: str,
        application: str = "PasswordVault",
        request: Optional[RequestConfig] = None,
        dry_run: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_uri = base_uri.rstrip("/")
        self.application = application.strip("/")
        self.request_config = request or RequestConfig()
        self.dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.Client] = None

        self.token: Optional[str] = None
        self.user: Optional[str] = None
        self.api_style: str = "gen2"
        self.external_version: tuple[int, ...] = UNKNOWN_VERSION
        self.started_at: Optional[datetime] = None
        self.last_command: Optional[str] = None
        self.last_command_time: Optional[datetime] = None
        self.last_command_result: Any = None

    @classmethod
    def from_entry(
        cls,
        entry: SessionEntry,
        request: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> PASSession:
        """Rebuild a logged-on session from a persisted :class:`SessionEntry`."""
        session = cls(
            entry.base_uri,
            application=entry.application,
            request=request,
            transport=transport,
        )
        session.token = entry.token
        session.user = entry.user
        session.api_style = entry.api_style
        session.external_version = tuple(entry.external_version) or UNKNOWN_VERSION
        session.started_at = entry.started_at
        return session

    @property
    def base_url(self) -> str:
        return f"{self.base_uri}/{self.application}" if self.application else self.base_uri

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def is_privilege_cloud(self) -> bool:
        """True when the PVWA is hosted in the vendor's SaaS domains."""
        host = (urlparse(self.base_uri).hostname or "").lower()
        return any(host == d or host.endswith("." + d) for d in PRIVILEGE_CLOUD_DOMAINS)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def open(self) -> PASSession:
        if self._client is None:
            config = self.request_config
            kwargs: dict[str, Any] = {
                "base_url": self.base_url,
                "timeout": config.timeout,
                "verify": config.verify_ssl,
                "follow_redirects": True,
            }
            if config.client_certificate:
                kwargs["cert"] = config.client_certificate
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._client = httpx.Client(**kwargs)
        return self

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> PASSession:
        return self.open()

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send one REST call and return the raw response.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: Path relative to :attr:`base_url` (``/api/Accounts``);
                absolute URLs are used as-is.
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON-serialisable request body.
            headers: Extra headers, overriding the defaults.

        Returns:
            The :class:`httpx.Response` from the PVWA.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            RequestError: On any other 4xx.
            ServerError: On 5xx after all retries, or when a 2xx response
                carries an HTML page.
            ConnectionError_: On network / timeout errors after all retries.
        """
        merged_headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            merged_headers["Authorization"] = self.token
        merged_headers.update(headers or {})
        query = {k: v for k, v in (params or {}).items() if v is not None}

        method = method.upper()
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"

        if self.dry_run:
            return self._print_dry_run(method, url, merged_headers, query, json_body)

        debug(f"{method} {url}")
        response = self._execute_with_retry(method, path, merged_headers, query, json_body)
        self._map_response_error(response)
        self._reject_html(response, url)
        return response

    def invoke(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a REST call and return the decoded body.

        JSON bodies are decoded, other bodies are returned as text, and an
        empty body yields ``None``. The call is recorded as the session's
        last command.
        """
        response = self.request(method, path, params=params, json_body=json_body, headers=headers)
        result = extract_response_data(response)
        self._record(method, path, result)
        return result

    def invoke_raw(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> tuple[bytes, Optional[str]]:
        """Send a REST call that returns a file.

        Returns:
            A ``(content, filename)`` tuple; ``filename`` comes from the
            ``Content-Disposition`` header and is ``None`` when absent.
        """
        merged = {"Accept": "*/*"}
        merged.update(headers or {})
        response = self.request(method, path, params=params, json_body=json_body, headers=merged)
        disposition = response.headers.get("content-disposition", "")
        match = _FILENAME_RE.search(disposition)
        filename = match.group(1).strip() if match else None
        self._record(method, path, f"<{len(response.content)} bytes>")
        return response.content, filename

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.invoke("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.invoke("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.invoke("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.invoke("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.invoke("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _record(self, method: str, path: str, result: Any) -> None:
        self.last_command = f"{method.upper()} {path}"
        self.last_command_time = datetime.now()
        self.last_command_result = result

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        params: dict[str, Any],
        json_body: Any,
    ) -> httpx.Response:
        """Execute the request, retrying 5xx and network failures.

        The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Session not opened -- use open() or a with block"

        max_retries = self.request_config.max_retries
        kwargs: dict[str, Any] = {
            "method": method,
            "url": path,
            "headers": headers,
        }
        if params:
            kwargs["params"] = params
        if json_body is not None:
            kwargs["content"] = json.dumps(json_body)

        for attempt in range(max_retries + 1):
            try:
                response = self._client.request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection to {self.base_uri} failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue
            return response

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        error_code, message = _parse_error_body(response)
        full_msg = f"HTTP {status}"
        if error_code:
            full_msg += f" [{error_code}]"
        if message:
            full_msg += f": {message}"

        if status in (401, 403):
            exc_type: type = AuthError
        elif status == 404:
            exc_type = NotFoundError
        elif status >= 500:
            exc_type = ServerError
        else:
            exc_type = RequestError
        raise exc_type(full_msg, status_code=status, error_code=error_code)

    def _reject_html(self, response: httpx.Response, url: str) -> None:
        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type and response.content:
            raise ServerError(
                f"HTML response received from {url}; "
                "check the PVWA address and application path",
                status_code=response.status_code,
            )

    def _print_dry_run(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, Any],
        json_body: Any,
    ) -> httpx.Response:
        output = get_output()
        output.info(f"[dry-run] {method} {url}")
        for key, value in headers.items():
            if key == "Authorization":
                value = "***"
            output.info(f"  Header: {key}: {value}")
        for key, value in params.items():
            output.info(f"  Param: {key}={value}")
        if json_body is not None:
            output.info(f"  Body (JSON): {json.dumps(_mask_secrets(json_body), indent=2)}")

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=httpx.Request(method=method, url=url),
        )


def _parse_error_body(response: httpx.Response) -> tuple[Optional[str], str]:
    """Pull the vault error code and message out of an error response."""
    try:
        detail = response.json()
    except ValueError:
        return None, response.text[:200] if response.text else ""

    if not isinstance(detail, dict):
        return None, str(detail)

    error_code = detail.get("ErrorCode") or detail.get("Code") or detail.get("code")
    message = (
        detail.get("ErrorMessage")
        or detail.get("Message")
        or detail.get("message")
        or detail.get("error")
        or ""
    )
    details = detail.get("Details")
    if isinstance(details, list) and details:
        extra = "; ".join(
            str(d.get("ErrorMessage") or d) if isinstance(d, dict) else str(d) for d in details
        )
        message = f"{message} ({extra})" if message else extra
    return (str(error_code) if error_code else None), message


_SECRET_KEYS = {"password", "newpassword", "secret", "importfile"}


def _mask_secrets(body: Any) -> Any:
    if isinstance(body, dict):
        return {
            k: ("***" if k.lower() in _SECRET_KEYS else _mask_secrets(v)) for k, v in body.items()
        }
    if isinstance(body, list):
        return [_mask_secrets(item) for item in body]
    return body
