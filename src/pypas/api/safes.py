"""Safe commands.

The v10 ``api/Safes`` endpoints (12.0+) are used by default; the classic
``PIMServices.svc/Safes`` endpoints remain available for reads with
``classic=True``.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from pypas.api._params import bound, escape, join_sort
from pypas.client.pagination import collect_pages
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import Safe, add_object_detail
from pypas.versioning import assert_version


def get_safe(
    session: PASSession,
    safe_name: Optional[str] = None,
    search: Optional[str] = None,
    sort: Union[str, Iterable[str], None] = None,
    include_accounts: Optional[bool] = None,
    extended_details: Optional[bool] = None,
    limit: Optional[int] = None,
    classic: bool = False,
) -> Union[Safe, list[Safe]]:
    """Return one safe by name, or every safe matching ``search``.

    Args:
        session: An open, logged-on session.
        safe_name: Exact safe name.
        search: Free-text search (``query`` on the classic endpoint).
        sort: Property name(s) with optional ``asc``/``desc``.
        include_accounts: Include the safe's accounts (v10).
        extended_details: Include creator and member counts (v10).
        limit: Page size used while paging through results.
        classic: Use ``WebServices/PIMServices.svc/Safes``.
    """
    if classic:
        return _get_safe_classic(session, safe_name, search)

    assert_version(session, required="12.0", command="get_safe")
    if safe_name is not None:
        result = session.invoke(
            "GET",
            f"/api/Safes/{escape(safe_name)}",
            params=bound(includeAccounts=include_accounts),
        )
        return add_object_detail(result, Safe)

    params = bound(
        search=search,
        sort=join_sort(sort),
        includeAccounts=include_accounts,
        extendedDetails=extended_details,
        limit=limit,
    )
    return add_object_detail(collect_pages(session, "/api/Safes", params=params), Safe)


def _get_safe_classic(
    session: PASSession, safe_name: Optional[str], search: Optional[str]
) -> Union[Safe, list[Safe]]:
    if safe_name is not None:
        result = session.invoke(
            "GET", f"/WebServices/PIMServices.svc/Safes/{escape(safe_name)}"
        )
        return add_object_detail(unwrap(result, "GetSafeResult"), Safe)
    if search is not None:
        result = session.invoke(
            "GET", "/WebServices/PIMServices.svc/Safes", params={"query": search}
        )
        return add_object_detail(unwrap(result, "SearchSafesResult") or [], Safe)
    result = session.invoke("GET", "/WebServices/PIMServices.svc/Safes")
    return add_object_detail(unwrap(result, "GetSafesResult") or [], Safe)


def _safe_body(
    description: Optional[str],
    location: Optional[str],
    olac_enabled: Optional[bool],
    managing_cpm: Optional[str],
    number_of_versions_retention: Optional[int],
    number_of_days_retention: Optional[int],
    auto_purge_enabled: Optional[bool],
) -> dict[str, Any]:
    if number_of_versions_retention is not None and number_of_days_retention is not None:
        raise InvalidUsageError(
            "Specify either number_of_versions_retention or number_of_days_retention, not both"
        )
    return bound(
        description=description,
        location=location,
        olacEnabled=olac_enabled,
        managingCPM=managing_cpm,
        numberOfVersionsRetention=number_of_versions_retention,
        numberOfDaysRetention=number_of_days_retention,
        autoPurgeEnabled=auto_purge_enabled,
    )


def add_safe(
    session: PASSession,
    safe_name: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
    olac_enabled: Optional[bool] = None,
    managing_cpm: Optional[str] = None,
    number_of_versions_retention: Optional[int] = None,
    number_of_days_retention: Optional[int] = None,
    auto_purge_enabled: Optional[bool] = None,
) -> Safe:
    """Create a safe. Requires 12.0."""
    assert_version(session, required="12.0", command="add_safe")
    body = {"safeName": safe_name}
    body.update(
        _safe_body(
            description,
            location,
            olac_enabled,
            managing_cpm,
            number_of_versions_retention,
            number_of_days_retention,
            auto_purge_enabled,
        )
    )
    result = session.invoke("POST", "/api/Safes", json_body=body)
    return add_object_detail(result, Safe)


def set_safe(
    session: PASSession,
    safe_name: str,
    new_safe_name: Optional[str] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    olac_enabled: Optional[bool] = None,
    managing_cpm: Optional[str] = None,
    number_of_versions_retention: Optional[int] = None,
    number_of_days_retention: Optional[int] = None,
) -> Safe:
    """Update a safe's properties. Requires 12.0."""
    assert_version(session, required="12.0", command="set_safe")
    body = {"safeName": new_safe_name or safe_name}
    body.update(
        _safe_body(
            description,
            location,
            olac_enabled,
            managing_cpm,
            number_of_versions_retention,
            number_of_days_retention,
            None,
        )
    )
    result = session.invoke("PUT", f"/api/Safes/{escape(safe_name)}", json_body=body)
    return add_object_detail(result, Safe)


def remove_safe(session: PASSession, safe_name: str) -> None:
    """Delete a safe. Requires 12.0."""
    assert_version(session, required="12.0", command="remove_safe")
    session.invoke("DELETE", f"/api/Safes/{escape(safe_name)}")
