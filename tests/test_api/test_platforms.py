"""Tests for platform commands."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from conftest import make_session
from pypas.api.platforms import (
    export_platform,
    get_platform,
    get_target_platform,
    import_platform,
)
from pypas.exceptions import InvalidUsageError, VersionError
from pypas.objects import ImportedPlatform, Platform, PlatformDetails


class TestGetPlatform:
    def test_details(self, vault, session) -> None:
        vault.add("GET", "/api/Platforms/UnixSSH", json={"PlatformID": "UnixSSH", "Active": True})
        details = get_platform(session, "UnixSSH")
        assert isinstance(details, PlatformDetails)
        assert details.PlatformID == "UnixSSH"

    def test_list_with_filters(self, vault, session) -> None:
        vault.add(
            "GET",
            "/api/Platforms",
            json={"Platforms": [{"general": {"id": "UnixSSH"}}], "Total": 1},
        )

        platforms = get_platform(session, active=True, platform_type="Regular", search="unix")

        assert isinstance(platforms[0], Platform)
        assert platforms[0].general == {"id": "UnixSSH"}
        assert dict(vault.last.url.params) == {
            "Active": "true",
            "PlatformType": "Regular",
            "Search": "unix",
        }

    def test_list_requires_11_4(self, vault) -> None:
        session = make_session(vault, version=(11, 3))
        with pytest.raises(VersionError, match="11.4"):
            get_platform(session)

    def test_details_allowed_on_11_1(self, vault) -> None:
        session = make_session(vault, version=(11, 1))
        vault.add("GET", "/api/Platforms/X", json={"PlatformID": "X"})
        assert get_platform(session, "X").PlatformID == "X"

    def test_invalid_type(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid platform type"):
            get_platform(session, platform_type="Weird")


class TestTargetPlatforms:
    def test_filter(self, vault, session) -> None:
        vault.add("GET", "/api/Platforms/targets", json={"Platforms": [{"ID": 1, "Name": "Unix"}]})

        targets = get_target_platform(session, search="Unix", active=False)

        assert targets[0].Name == "Unix"
        assert dict(vault.last.url.params) == {"search": "Unix", "filter": "active eq false"}

    def test_no_filter_without_active(self, vault, session) -> None:
        vault.add("GET", "/api/Platforms/targets", json={"Platforms": []})
        assert get_target_platform(session, search="Unix") == []
        assert dict(vault.last.url.params) == {"search": "Unix"}


class TestImportExport:
    def test_import_sends_base64(self, vault, session, tmp_path: Path) -> None:
        package = tmp_path / "Custom.zip"
        package.write_bytes(b"PK\x03\x04zip")
        vault.add("POST", "/api/Platforms/Import", json={"PlatformID": "Custom"})

        imported = import_platform(session, package)

        assert isinstance(imported, ImportedPlatform)
        assert imported.PlatformID == "Custom"
        assert base64.b64decode(vault.last_json()["ImportFile"]) == b"PK\x03\x04zip"

    def test_import_requires_zip(self, vault, session, tmp_path: Path) -> None:
        other = tmp_path / "Custom.ini"
        other.write_text("x")
        with pytest.raises(InvalidUsageError, match=r"\.zip"):
            import_platform(session, other)

    def test_import_missing_file(self, vault, session, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="not found"):
            import_platform(session, tmp_path / "missing.zip")

    def test_export_to_directory(self, vault, session, tmp_path: Path) -> None:
        vault.add("POST", "/api/Platforms/UnixSSH/Export", content=b"PKdata")

        target = export_platform(session, "UnixSSH", tmp_path / "out")

        assert target == tmp_path / "out" / "UnixSSH.zip"
        assert target.read_bytes() == b"PKdata"

    def test_export_to_file(self, vault, session, tmp_path: Path) -> None:
        vault.add("POST", "/api/Platforms/UnixSSH/Export", content=b"PKdata")
        target = export_platform(session, "UnixSSH", tmp_path / "pkg" / "unix.zip")
        assert target == tmp_path / "pkg" / "unix.zip"
        assert target.is_file()
