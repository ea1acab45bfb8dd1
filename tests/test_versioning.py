"""Tests for pypas.versioning."""

from __future__ import annotations

import pytest

from conftest import make_session
from pypas.exceptions import VersionError
from pypas.versioning import assert_version, compare_versions, format_version, parse_version


class TestParseVersion:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("12.6.1", (12, 6, 1)),
            ("v11.2", (11, 2)),
            ("11.2 Beta", (11, 2)),
            ((10, 4), (10, 4)),
            (None, (0, 0)),
            ("unknown", (0, 0)),
        ],
    )
    def test_parse(self, value, expected) -> None:
        assert parse_version(value) == expected

    def test_format(self) -> None:
        assert format_version((12, 1, 5)) == "12.1.5"


class TestCompareVersions:
    def test_missing_parts_are_zero(self) -> None:
        assert compare_versions((10, 4), (10, 4, 0)) == 0

    def test_ordering(self) -> None:
        assert compare_versions((9, 10), (10, 1)) == -1
        assert compare_versions((12, 2), (12, 1, 9)) == 1


class TestAssertVersion:
    def test_minimum_met(self, vault) -> None:
        assert_version(make_session(vault, version=(10, 4)), required="10.4")

    def test_minimum_not_met(self, vault) -> None:
        session = make_session(vault, version=(10, 3))
        with pytest.raises(VersionError, match=r"requires version 10\.4 or later; connected vault is 10\.3"):
            assert_version(session, required="10.4", command="get_account")

    def test_maximum_admits_patch_releases(self, vault) -> None:
        assert_version(make_session(vault, version=(12, 1, 5)), maximum="12.1")

    def test_maximum_exceeded(self, vault) -> None:
        with pytest.raises(VersionError, match="not supported after version 12.1"):
            assert_version(make_session(vault, version=(12, 2)), maximum="12.1")

    def test_unknown_version_skips_checks(self, vault) -> None:
        session = make_session(vault, version=None)
        assert session.external_version == (0, 0)
        assert_version(session, required="99.0", maximum="1.0")

    def test_self_hosted_rejects_privilege_cloud(self, vault) -> None:
        session = make_session(vault, base_uri="https://acme.privilegecloud.cyberark.com")
        assert session.is_privilege_cloud
        with pytest.raises(VersionError, match="self-hosted"):
            assert_version(session, self_hosted=True)

    def test_privilege_cloud_only(self, vault) -> None:
        with pytest.raises(VersionError, match="Privilege Cloud"):
            assert_version(make_session(vault), privilege_cloud=True)

    def test_cloud_domain_suffix(self, vault) -> None:
        assert make_session(vault, base_uri="https://acme.cyberark.cloud").is_privilege_cloud
        assert not make_session(vault, base_uri="https://notcyberark.cloud").is_privilege_cloud
