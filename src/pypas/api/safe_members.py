"""Safe member commands (``api/Safes/{safe}/Members``, 12.0+).

The vault does not repeat the safe name on every member it lists, so each
returned :class:`~pypas.objects.SafeMember` gets ``safeName`` attached.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Union

from pypas.api._params import bound, build_filter, choose, escape, to_epoch
from pypas.client.pagination import collect_pages
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import SafeMember, add_object_detail
from pypas.versioning import assert_version

MEMBER_TYPES = ("User", "Group", "Role")
SEARCH_IN = ("Vault", "Domain")

PERMISSIONS = (
    "useAccounts",
    "retrieveAccounts",
    "listAccounts",
    "addAccounts",
    "updateAccountContent",
    "updateAccountProperties",
    "initiateCPMAccountManagementOperations",
    "specifyNextAccountContent",
    "renameAccounts",
    "deleteAccounts",
    "unlockAccounts",
    "manageSafe",
    "manageSafeMembers",
    "backupSafe",
    "viewAuditLog",
    "viewSafeMembers",
    "accessWithoutConfirmation",
    "createFolders",
    "deleteFolders",
    "moveAccountsAndFolders",
    "requestsAuthorizationLevel1",
    "requestsAuthorizationLevel2",
)


def get_safe_member(
    session: PASSession,
    safe_name: str,
    member_name: Optional[str] = None,
    member_type: Optional[str] = None,
    search: Optional[str] = None,
) -> Union[SafeMember, list[SafeMember]]:
    """Return one member of a safe, or all members (every page)."""
    assert_version(session, required="12.0", command="get_safe_member")
    base = f"/api/Safes/{escape(safe_name)}/Members"

    if member_name is not None:
        result = session.invoke("GET", f"{base}/{escape(member_name)}")
        return add_object_detail(result, SafeMember, safeName=safe_name)

    canonical_type = choose(member_type, MEMBER_TYPES, "member type")
    params = bound(
        search=search,
        filter=build_filter(f"memberType eq {canonical_type}" if canonical_type else None),
    )
    members = collect_pages(session, base, params=params)
    return add_object_detail(members, SafeMember, safeName=safe_name)


def _permissions_body(permissions: Optional[Mapping[str, bool]]) -> Optional[dict[str, bool]]:
    if permissions is None:
        return None
    lookup = {name.lower(): name for name in PERMISSIONS}
    body: dict[str, bool] = {}
    for name, allowed in permissions.items():
        canonical = lookup.get(name.lower())
        if canonical is None:
            raise InvalidUsageError(f"Unknown safe permission '{name}'")
        body[canonical] = bool(allowed)
    return body


def add_safe_member(
    session: PASSession,
    safe_name: str,
    member_name: str,
    search_in: Optional[str] = None,
    member_type: Optional[str] = None,
    membership_expiration_date: Optional[datetime] = None,
    permissions: Optional[Mapping[str, bool]] = None,
) -> SafeMember:
    """Add a user, group or role to a safe. Requires 12.0.

    Args:
        permissions: Permission name to bool, e.g.
            ``{"useAccounts": True, "listAccounts": True}``.

    Raises:
        InvalidUsageError: For an unknown permission or member type.
    """
    assert_version(session, required="12.0", command="add_safe_member")
    body = bound(
        memberName=member_name,
        searchIn=search_in,
        memberType=choose(member_type, MEMBER_TYPES, "member type"),
        membershipExpirationDate=to_epoch(membership_expiration_date),
        permissions=_permissions_body(permissions),
    )
    result = session.invoke(
        "POST", f"/api/Safes/{escape(safe_name)}/Members", json_body=body
    )
    return add_object_detail(result, SafeMember, safeName=safe_name)


def set_safe_member(
    session: PASSession,
    safe_name: str,
    member_name: str,
    membership_expiration_date: Optional[datetime] = None,
    permissions: Optional[Mapping[str, bool]] = None,
) -> SafeMember:
    """Update a member's permissions or expiration. Requires 12.0."""
    assert_version(session, required="12.0", command="set_safe_member")
    body = bound(
        membershipExpirationDate=to_epoch(membership_expiration_date),
        permissions=_permissions_body(permissions),
    )
    if not body:
        raise InvalidUsageError("set_safe_member needs permissions or an expiration date")
    result = session.invoke(
        "PUT",
        f"/api/Safes/{escape(safe_name)}/Members/{escape(member_name)}",
        json_body=body,
    )
    return add_object_detail(result, SafeMember, safeName=safe_name)


def remove_safe_member(session: PASSession, safe_name: str, member_name: str) -> None:
    """Remove a member from a safe. Requires 12.0."""
    assert_version(session, required="12.0", command="remove_safe_member")
    session.invoke(
        "DELETE", f"/api/Safes/{escape(safe_name)}/Members/{escape(member_name)}"
    )
