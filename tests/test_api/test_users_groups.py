"""Tests for user and group commands."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import make_session
from pypas.api.groups import add_group_member, get_group, remove_group_member
from pypas.api.users import (
    get_logged_on_user,
    get_user,
    new_user,
    remove_user,
    set_user,
    unblock_user,
)
from pypas.exceptions import InvalidUsageError, VersionError
from pypas.objects import Group, GroupMember, LoggedOnUser, User


class TestUsers:
    def test_list(self, vault, session) -> None:
        vault.add("GET", "/api/Users", json={"Users": [{"id": 2, "username": "admin"}], "Total": 1})

        users = get_user(session, search="adm", user_type="EPVUser", extended_details=True)

        assert isinstance(users[0], User)
        assert users[0].username == "admin"
        assert dict(vault.last.url.params) == {
            "search": "adm",
            "filter": "userType eq EPVUser",
            "ExtendedDetails": "true",
        }

    def test_by_id(self, vault, session) -> None:
        vault.add("GET", "/api/Users/2", json={"id": 2, "username": "admin"})
        assert get_user(session, id=2).username == "admin"

    def test_requires_10_9(self, vault) -> None:
        with pytest.raises(VersionError, match="10.9"):
            get_user(make_session(vault, version=(10, 8)))

    def test_logged_on_user(self, vault, session) -> None:
        vault.add("GET", "/WebServices/PIMServices.svc/User", json={"UserName": "admin"})
        user = get_logged_on_user(session)
        assert isinstance(user, LoggedOnUser)
        assert user.UserName == "admin"

    def test_new_user_body(self, vault, session) -> None:
        vault.add("POST", "/api/Users", json={"id": 9, "username": "jdoe"}, status=201)

        new_user(
            session,
            "jdoe",
            initial_password="Init1!",
            user_type="EPVUser",
            expiry_date=datetime(2030, 1, 1, tzinfo=timezone.utc),
            change_pass_on_next_logon=True,
            vault_authorization=["AddSafes"],
            first_name="Jane",
            last_name="Doe",
            email="jdoe@example.com",
        )

        assert vault.last_json() == {
            "username": "jdoe",
            "initialPassword": "Init1!",
            "userType": "EPVUser",
            "expiryDate": 1893456000,
            "changePassOnNextLogon": True,
            "vaultAuthorization": ["AddSafes"],
            "personalDetails": {"FirstName": "Jane", "LastName": "Doe"},
            "internet": {"businessEmail": "jdoe@example.com"},
        }

    def test_set_user_needs_username(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="username"):
            set_user(session, 9, enableUser=False)

    def test_set_user(self, vault, session) -> None:
        vault.add("PUT", "/api/Users/9", json={"id": 9, "enableUser": False})
        set_user(session, 9, username="jdoe", enableUser=False)
        assert vault.last_json() == {"username": "jdoe", "enableUser": False}

    def test_remove_and_unblock(self, vault, session) -> None:
        vault.add("DELETE", "/api/Users/9", status=204)
        vault.add("POST", "/api/Users/9/Activate")
        remove_user(session, 9)
        unblock_user(session, 9)
        assert vault.paths() == ["/api/Users/9", "/api/Users/9/Activate"]

    def test_unblock_requires_10_10(self, vault) -> None:
        with pytest.raises(VersionError, match="10.10"):
            unblock_user(make_session(vault, version=(10, 9)), 9)


class TestGroups:
    def test_list(self, vault, session) -> None:
        vault.add("GET", "/api/UserGroups", json={"value": [{"id": 5, "groupName": "Auditors"}]})

        groups = get_group(session, group_type="vault", include_members=True)

        assert isinstance(groups[0], Group)
        assert dict(vault.last.url.params) == {
            "filter": "groupType eq Vault",
            "includeMembers": "true",
        }

    def test_add_member(self, vault, session) -> None:
        vault.add("POST", "/api/UserGroups/5/Members", status=201)

        member = add_group_member(session, 5, "jdoe")

        assert isinstance(member, GroupMember)
        assert member.memberId == "jdoe"
        assert member.groupId == 5
        assert vault.last_json() == {"memberId": "jdoe", "memberType": "Vault"}

    def test_domain_member_needs_domain(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="domain_name"):
            add_group_member(session, 5, "jdoe", member_type="domain")

    def test_members_require_11_1(self, vault) -> None:
        with pytest.raises(VersionError, match="11.1"):
            add_group_member(make_session(vault, version=(10, 10)), 5, "jdoe")

    def test_remove_member(self, vault, session) -> None:
        vault.add("DELETE", "/api/UserGroups/5/Members/jdoe", status=204)
        remove_group_member(session, 5, "jdoe")
        assert vault.last.method == "DELETE"
