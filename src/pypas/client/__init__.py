"""Vault session and REST plumbing shared by every command.

Classes and helpers:
    :class:`PASSession` -- an httpx-backed connection to one PVWA carrying
    the logon token, version and last-command bookkeeping.
    :func:`collect_pages` -- follows ``nextLink`` across list pages.
    :func:`extract_response_data` -- decodes a response body.

Example::

    from pypas.client import PASSession

    with PASSession("https://pvwa.example.com") as session:
        session.token = token
        accounts = collect_pages(session, "/api/Accounts", {"search": "root"})
"""

from pypas.client.pagination import collect_pages
from pypas.client.response import extract_response_data, unwrap
from pypas.client.session import PASSession

__all__ = ["PASSession", "collect_pages", "extract_response_data", "unwrap"]
