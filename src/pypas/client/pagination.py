"""``nextLink`` pagination for the v10 list endpoints.

List endpoints such as ``api/Accounts``, ``api/Safes`` and
``api/Safes/{safe}/Members`` answer with one page::

    {"value": [...], "count": 1234, "nextLink": "api/Accounts?offset=1000&limit=1000"}

``count`` is the total number of matches; ``nextLink`` is relative to the
application root and disappears on the last page.
"""

from __future__ import annotations

from typing import Any, Optional

from pypas.client.session import PASSession
from pypas.output import debug


def collect_pages(
    session: PASSession,
    path: str,
    params: Optional[dict[str, Any]] = None,
    key: str = "value",
) -> list[Any]:
    """GET *path* and follow ``nextLink`` until it is exhausted.

    Args:
        session: An open vault session.
        path: First page path, relative to the application root.
        params: Query parameters for the first page only; later pages
            carry their own query string in ``nextLink``.
        key: Envelope key holding each page's items.

    Returns:
        The items of every page, in order.
    """
    result = session.invoke("GET", path, params=params)
    if not isinstance(result, dict):
        return []

    items: list[Any] = list(result.get(key) or [])
    total = result.get("count", len(items))
    if not total:
        return items

    next_link = result.get("nextLink")
    while next_link:
        debug(f"Following nextLink ({len(items)}/{total}): {next_link}")
        result = session.invoke("GET", _link_path(next_link))
        if not isinstance(result, dict):
            break
        items.extend(result.get(key) or [])
        next_link = result.get("nextLink")
    return items


def _link_path(link: str) -> str:
    if link.startswith(("http://", "https://")):
        return link
    return "/" + link.lstrip("/")
