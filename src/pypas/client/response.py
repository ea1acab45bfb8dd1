"""Response decoding shared by the session invoker and the CLI.

:func:`extract_response_data` turns an :class:`httpx.Response` into
Python data. The PVWA answers most calls with JSON, but some return a
bare JSON string (logon tokens, retrieved passwords), plain text, or an
empty body (``DELETE``, logoff).
"""

from __future__ import annotations

from typing import Any

import httpx


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the body of *response*.

    Attempts JSON first. If that fails the raw text is returned. Returns
    ``None`` for responses with no content.

    Args:
        response: The :class:`httpx.Response` to decode.

    Returns:
        A JSON-decoded object (``dict``, ``list``, ``str``, ...), the raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text


def unwrap(result: Any, key: str) -> Any:
    """Return ``result[key]`` when *result* is a dict holding it, else *result*.

    The vault wraps collections in differently named envelopes
    (``value``, ``Users``, ``Platforms``, ``GetSafesResult``, ...);
    commands use this to reach the payload without caring whether a dry
    run or an older version returned the bare object.
    """
    if isinstance(result, dict) and key in result:
        return result[key]
    return result
