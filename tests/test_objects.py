"""Tests for pypas.objects."""

from __future__ import annotations

import pytest

from pypas.objects import Account, AccountV10, SafeMember, add_object_detail


class TestAddObjectDetail:
    def test_dict_builds_one_model(self) -> None:
        account = add_object_detail({"id": "12_3", "userName": "root"}, AccountV10)
        assert isinstance(account, AccountV10)
        assert account.id == "12_3"
        assert account.userName == "root"

    def test_list_builds_models(self) -> None:
        members = add_object_detail(
            [{"memberName": "a"}, {"memberName": "b"}], SafeMember, safeName="Ops"
        )
        assert [m.memberName for m in members] == ["a", "b"]
        assert all(m.safeName == "Ops" for m in members)

    def test_properties_do_not_overwrite(self) -> None:
        member = add_object_detail({"memberName": "a", "safeName": "Real"}, SafeMember, safeName="Other")
        assert member.safeName == "Real"

    def test_none_passes_through(self) -> None:
        assert add_object_detail(None, Account) is None

    def test_non_dict_item_raises(self) -> None:
        with pytest.raises(TypeError, match="Cannot build AccountV10"):
            add_object_detail(["12_3"], AccountV10)

    def test_existing_instance_kept(self) -> None:
        account = AccountV10(id="1")
        assert add_object_detail([account], AccountV10)[0] is account


class TestPASObject:
    def test_type_name_tags(self) -> None:
        assert Account.type_name == "CyberArk.Vault.Account"
        assert AccountV10.type_name == "CyberArk.Vault.Account.V10"

    def test_get_and_to_dict(self) -> None:
        account = AccountV10(id="1", platformId="UnixSSH")
        assert account.get("platformId") == "UnixSSH"
        assert account.get("missing", "x") == "x"
        assert account.to_dict() == {"id": "1", "platformId": "UnixSSH"}
