"""Account commands.

Two API generations are covered:

* **v10** (``api/Accounts``, 10.4+) -- search, filter, saved filters and
  ``nextLink`` pagination; results are :class:`~pypas.objects.AccountV10`.
* **classic** (``WebServices/PIMServices.svc/Accounts``) -- keyword search
  returning ``{"Count": N, "accounts": [...]}`` where each account carries
  its fields as ``Properties: [{"Key", "Value"}]``. Only the first match
  is returned, flattened into an :class:`~pypas.objects.Account`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional, Union

from pypas.api._params import bound, build_filter, choose, escape, join_sort, to_epoch
from pypas.client.pagination import collect_pages
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import (
    Account,
    AccountActivity,
    AccountV10,
    Credential,
    add_object_detail,
)
from pypas.output import warning
from pypas.versioning import assert_version

SEARCH_TYPES = ("contains", "startswith")

SAVED_FILTERS = (
    "Regular",
    "Recently",
    "New",
    "Link",
    "Deleted",
    "PolicyFailures",
    "AccessedByUsers",
    "ModifiedByUsers",
    "ModifiedByCPM",
    "DisabledPasswordByUser",
    "DisabledPasswordByCPM",
    "ScheduledForChange",
    "ScheduledForVerify",
    "ScheduledForReconcile",
    "SuccessfullyReconciled",
    "FailedChange",
    "FailedVerify",
    "FailedReconcile",
    "LockedOrNew",
    "Locked",
    "Favorites",
)

CPM_OPERATIONS = {"verify": "Verify", "change": "Change", "reconcile": "Reconcile"}
PATCH_OPERATIONS = ("add", "remove", "replace")


def get_account(
    session: PASSession,
    id: Optional[str] = None,
    search: Optional[str] = None,
    search_type: Optional[str] = None,
    safe_name: Optional[str] = None,
    saved_filter: Optional[str] = None,
    modification_time: Optional[datetime] = None,
    sort: Union[str, Iterable[str], None] = None,
    limit: Optional[int] = None,
    keywords: Optional[str] = None,
    safe: Optional[str] = None,
) -> Union[AccountV10, list[AccountV10], Account, None]:
    """Find accounts.

    Pass ``id`` for one account, v10 search arguments for a list of every
    matching account across all pages, or ``keywords``/``safe`` for the
    classic search.

    Args:
        session: An open, logged-on session.
        id: Account ID, e.g. ``"12_34"``.
        search: Free-text search across account properties.
        search_type: ``contains`` (default on the vault) or ``startswith``.
        safe_name: Restrict to one safe (``filter=safeName eq ...``).
        saved_filter: One of :data:`SAVED_FILTERS` (11.1+).
        modification_time: Only accounts modified at or after this time.
        sort: Property name(s), each optionally followed by ``asc``/``desc``.
        limit: Page size used while paging through results.
        keywords: Classic search keywords.
        safe: Classic safe filter.

    Returns:
        One :class:`AccountV10` for ``id``; a list of them for a v10
        search; one :class:`Account` (or ``None`` when nothing matched) for
        the classic search.

    Raises:
        InvalidUsageError: If classic and v10 arguments are mixed.
        VersionError: If the vault is older than 10.4 (11.1 for saved filters).
    """
    v10_args = bound(
        id=id,
        search=search,
        search_type=search_type,
        safe_name=safe_name,
        saved_filter=saved_filter,
        modification_time=modification_time,
        sort=sort,
        limit=limit,
    )
    classic_args = bound(keywords=keywords, safe=safe)
    if v10_args and classic_args:
        raise InvalidUsageError(
            "Classic search arguments (keywords, safe) cannot be combined with "
            f"v10 arguments ({', '.join(sorted(v10_args))})"
        )
    if classic_args:
        return _get_account_classic(session, keywords, safe)

    assert_version(session, required="10.4", command="get_account")

    if id is not None:
        if len(v10_args) > 1:
            raise InvalidUsageError("id cannot be combined with search arguments")
        result = session.invoke("GET", f"/api/Accounts/{escape(id)}")
        return add_object_detail(result, AccountV10)

    if saved_filter is not None:
        assert_version(session, required="11.1", command="get_account with saved_filter")

    params = bound(
        search=search,
        searchType=choose(search_type, SEARCH_TYPES, "search type"),
        sort=join_sort(sort),
        limit=limit,
        savedFilter=choose(saved_filter, SAVED_FILTERS, "saved filter"),
        filter=build_filter(
            f"safeName eq {safe_name}" if safe_name else None,
            f"modificationTime gte {to_epoch(modification_time)}"
            if modification_time is not None
            else None,
        ),
    )
    accounts = collect_pages(session, "/api/Accounts", params=params)
    return add_object_detail(accounts, AccountV10)


def _get_account_classic(
    session: PASSession, keywords: Optional[str], safe: Optional[str]
) -> Optional[Account]:
    result = session.invoke(
        "GET",
        "/WebServices/PIMServices.svc/Accounts",
        params=bound(Keywords=keywords, Safe=safe),
    )
    if not isinstance(result, dict):
        return None

    count = int(result.get("Count") or 0)
    if count == 0:
        return None
    if count > 1:
        warning(f"{count} matching accounts found. Only the first result will be returned")

    accounts = result.get("accounts") or []
    if not accounts:
        return None
    return add_object_detail(_flatten_classic_account(accounts[0]), Account)


def _flatten_classic_account(account: dict[str, Any]) -> dict[str, Any]:
    """Turn ``Properties: [{"Key", "Value"}]`` into plain fields."""
    flat: dict[str, Any] = {"AccountID": account.get("AccountID")}
    for prop in account.get("Properties") or []:
        flat[prop["Key"]] = prop.get("Value")
    internal: dict[str, Any] = {}
    for prop in account.get("InternalProperties") or []:
        internal[prop["Key"]] = prop.get("Value")
    flat["InternalProperties"] = internal
    return flat


def add_account(
    session: PASSession,
    address: str,
    user_name: str,
    platform_id: str,
    safe_name: str,
    name: Optional[str] = None,
    secret_type: Optional[str] = None,
    secret: Optional[str] = None,
    platform_account_properties: Optional[dict[str, Any]] = None,
    automatic_management_enabled: Optional[bool] = None,
    manual_management_reason: Optional[str] = None,
    remote_machines: Optional[Iterable[str]] = None,
    access_restricted_to_remote_machines: Optional[bool] = None,
) -> AccountV10:
    """Add an account (``POST api/Accounts``). Requires 10.4.

    Raises:
        InvalidUsageError: If ``manual_management_reason`` is given while
            automatic management is not explicitly disabled, or the secret
            type is unknown.
    """
    assert_version(session, required="10.4", command="add_account")

    if manual_management_reason is not None and automatic_management_enabled is not False:
        raise InvalidUsageError(
            "manual_management_reason requires automatic_management_enabled=False"
        )

    body: dict[str, Any] = bound(
        name=name,
        address=address,
        userName=user_name,
        platformId=platform_id,
        safeName=safe_name,
        secretType=choose(secret_type, ("password", "key"), "secret type"),
        secret=secret,
        platformAccountProperties=platform_account_properties,
    )
    management = bound(
        automaticManagementEnabled=automatic_management_enabled,
        manualManagementReason=manual_management_reason,
    )
    if management:
        body["secretManagement"] = management
    access = bound(
        remoteMachines=";".join(remote_machines) if remote_machines is not None else None,
        accessRestrictedToRemoteMachines=access_restricted_to_remote_machines,
    )
    if access:
        body["remoteMachinesAccess"] = access

    result = session.invoke("POST", "/api/Accounts", json_body=body)
    return add_object_detail(result, AccountV10)


def set_account(
    session: PASSession,
    id: str,
    operations: Iterable[dict[str, Any]],
) -> AccountV10:
    """Update an account with JSON-patch style operations. Requires 10.4.

    Example::

        set_account(session, "12_34", [
            {"op": "replace", "path": "/address", "value": "srv02"},
            {"op": "remove", "path": "/platformAccountProperties/Port"},
        ])

    Raises:
        InvalidUsageError: If an operation is not ``add``, ``remove`` or
            ``replace``, its path does not start with ``/``, or no
            operations are given.
    """
    assert_version(session, required="10.4", command="set_account")

    body: list[dict[str, Any]] = []
    for operation in operations:
        op = str(operation.get("op", "")).lower()
        path = str(operation.get("path", ""))
        if op not in PATCH_OPERATIONS:
            raise InvalidUsageError(
                f"Invalid operation '{op}'; expected one of: {', '.join(PATCH_OPERATIONS)}"
            )
        if not path.startswith("/"):
            raise InvalidUsageError(f"Operation path must start with '/': {path!r}")
        item: dict[str, Any] = {"op": op, "path": path}
        if op != "remove":
            item["value"] = operation.get("value")
        body.append(item)
    if not body:
        raise InvalidUsageError("set_account needs at least one operation")

    result = session.invoke("PATCH", f"/api/Accounts/{escape(id)}", json_body=body)
    return add_object_detail(result, AccountV10)


def remove_account(session: PASSession, id: str, classic: bool = False) -> None:
    """Delete an account (v10 from 10.4, or the classic endpoint)."""
    if classic:
        session.invoke("DELETE", f"/WebServices/PIMServices.svc/Accounts/{escape(id)}")
        return
    assert_version(session, required="10.4", command="remove_account")
    session.invoke("DELETE", f"/api/Accounts/{escape(id)}")


def get_account_password(
    session: PASSession,
    id: str,
    reason: Optional[str] = None,
    ticketing_system: Optional[str] = None,
    ticket_id: Optional[str] = None,
    version: Optional[int] = None,
    action_type: Optional[str] = None,
    is_use: Optional[bool] = None,
    machine: Optional[str] = None,
) -> Credential:
    """Retrieve an account's password. Requires 10.1.

    The vault answers with the password as a bare JSON string.
    """
    assert_version(session, required="10.1", command="get_account_password")
    body = bound(
        reason=reason,
        TicketingSystemName=ticketing_system,
        TicketId=ticket_id,
        Version=version,
        ActionType=choose(action_type, ("show", "copy", "connect"), "action type"),
        isUse=is_use,
        Machine=machine,
    )
    result = session.invoke(
        "POST", f"/api/Accounts/{escape(id)}/Password/Retrieve", json_body=body
    )
    return Credential(Password=result if isinstance(result, str) else None, AccountID=id)


def get_account_activity(session: PASSession, id: str) -> list[AccountActivity]:
    """Return the activity log of an account."""
    result = session.invoke(
        "GET", f"/WebServices/PIMServices.svc/Accounts/{escape(id)}/Activities"
    )
    activities = result.get("GetAccountActivitiesSlashResult") if isinstance(result, dict) else None
    return add_object_detail(activities or [], AccountActivity, AccountID=id)


def invoke_cpm_operation(
    session: PASSession,
    id: str,
    operation: str,
    change_entire_group: Optional[bool] = None,
) -> None:
    """Ask the CPM to verify, change or reconcile an account's password. Requires 10.1.

    Raises:
        InvalidUsageError: If ``operation`` is unknown, or
            ``change_entire_group`` is given for anything but ``change``.
    """
    assert_version(session, required="10.1", command="invoke_cpm_operation")
    action = CPM_OPERATIONS.get(operation.lower())
    if action is None:
        raise InvalidUsageError(
            f"Invalid CPM operation '{operation}'; expected one of: {', '.join(CPM_OPERATIONS)}"
        )
    body = None
    if change_entire_group is not None:
        if action != "Change":
            raise InvalidUsageError("change_entire_group only applies to the change operation")
        body = {"ChangeEntireGroup": change_entire_group}
    session.invoke("POST", f"/api/Accounts/{escape(id)}/{action}", json_body=body)
