"""Vault group commands (``api/UserGroups``)."""

from __future__ import annotations

from typing import Optional

from pypas.api._params import bound, build_filter, choose, escape
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import Group, GroupMember, add_object_detail
from pypas.versioning import assert_version

GROUP_TYPES = ("Directory", "Vault")
MEMBER_TYPES = ("Vault", "Domain")


def get_group(
    session: PASSession,
    search: Optional[str] = None,
    group_type: Optional[str] = None,
    include_members: Optional[bool] = None,
) -> list[Group]:
    """List vault groups, optionally filtered by type. Requires 10.5."""
    assert_version(session, required="10.5", command="get_group")
    canonical = choose(group_type, GROUP_TYPES, "group type")
    params = bound(
        search=search,
        filter=build_filter(f"groupType eq {canonical}" if canonical else None),
        includeMembers=include_members,
    )
    result = session.invoke("GET", "/api/UserGroups", params=params)
    return add_object_detail(unwrap(result, "value") or [], Group)


def add_group_member(
    session: PASSession,
    group_id: int,
    member_id: str,
    member_type: str = "Vault",
    domain_name: Optional[str] = None,
) -> GroupMember:
    """Add a vault or domain user to a group. Requires 11.1.

    Raises:
        InvalidUsageError: If a domain member is added without ``domain_name``.
    """
    assert_version(session, required="11.1", command="add_group_member")
    canonical = choose(member_type, MEMBER_TYPES, "member type")
    if canonical == "Domain" and not domain_name:
        raise InvalidUsageError("Domain members need a domain_name")
    body = bound(memberId=member_id, memberType=canonical, domainName=domain_name)
    result = session.invoke(
        "POST", f"/api/UserGroups/{escape(group_id)}/Members", json_body=body
    )
    if not isinstance(result, dict):
        result = body
    return add_object_detail(result, GroupMember, groupId=group_id)


def remove_group_member(session: PASSession, group_id: int, member: str) -> None:
    """Remove a member from a group. Requires 11.1."""
    assert_version(session, required="11.1", command="remove_group_member")
    session.invoke("DELETE", f"/api/UserGroups/{escape(group_id)}/Members/{escape(member)}")
