"""Tests for PSM connection, live session and recording commands."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from conftest import make_session
from pypas.api.psm import (
    get_psm_connection_parameter,
    get_psm_recording,
    get_psm_session,
    stop_psm_session,
)
from pypas.exceptions import InvalidUsageError, VersionError
from pypas.objects import PSMGatewayConnection, PSMRecording, PSMSession

RDP_FILE = b"full address:s:psm01\r\nusername:s:jdoe\r\n"


class TestConnectAccount:
    def test_rdp_bytes(self, vault, session) -> None:
        vault.add("POST", "/API/Accounts/12_3/PSMConnect", content=RDP_FILE)

        result = get_psm_connection_parameter(
            session,
            "PSM-RDP",
            account_id="12_3",
            reason="Maintenance",
            ticketing_system="ServiceNow",
            ticket_id="INC001",
            connection_params={"allowmappinglocaldrives": "Yes"},
        )

        assert result == RDP_FILE
        assert vault.last.headers["Accept"] == "*/*"
        assert vault.last_json() == {
            "reason": "Maintenance",
            "TicketingSystemName": "ServiceNow",
            "TicketId": "INC001",
            "ConnectionComponent": "PSM-RDP",
            "ConnectionParams": {"AllowMappingLocalDrives": "Yes"},
        }

    def test_rdp_written_to_directory(self, vault, session, tmp_path: Path) -> None:
        vault.add(
            "POST",
            "/API/Accounts/12_3/PSMConnect",
            content=RDP_FILE,
            headers={"content-disposition": 'attachment; filename="psm01.rdp"'},
        )

        target = get_psm_connection_parameter(
            session, "PSM-RDP", account_id="12_3", path=tmp_path / "rdp"
        )

        assert target == tmp_path / "rdp" / "psm01.rdp"
        assert target.read_bytes() == RDP_FILE

    def test_rdp_default_file_name(self, vault, session, tmp_path: Path) -> None:
        vault.add("POST", "/API/Accounts/12_3/PSMConnect", content=RDP_FILE)
        target = get_psm_connection_parameter(session, "PSM-RDP", account_id="12_3", path=tmp_path)
        assert target == tmp_path / "12_3.rdp"

    def test_gateway_connection(self, vault, session) -> None:
        vault.add(
            "POST",
            "/API/Accounts/12_3/PSMConnect",
            json={"PSMGWURL": "https://psmgw/guac", "PSMGWRequest": "blob"},
        )

        result = get_psm_connection_parameter(
            session, "PSM-RDP", account_id="12_3", connection_method="psmgw"
        )

        assert isinstance(result, PSMGatewayConnection)
        assert result.PSMGWURL == "https://psmgw/guac"
        assert vault.last.headers["Accept"] == "application/json"

    def test_gateway_rejects_path(self, vault, session, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError, match="path only applies"):
            get_psm_connection_parameter(
                session, "PSM-RDP", account_id="1", connection_method="PSMGW", path=tmp_path
            )

    def test_gateway_requires_10_2(self, vault) -> None:
        session = make_session(vault, version=(10, 1))
        with pytest.raises(VersionError, match="10.2"):
            get_psm_connection_parameter(session, "PSM-RDP", account_id="1", connection_method="PSMGW")

    def test_unknown_connection_param(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="Unknown connection parameter"):
            get_psm_connection_parameter(
                session, "PSM-RDP", account_id="1", connection_params={"Colour": "blue"}
            )

    def test_unknown_method(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid connection method"):
            get_psm_connection_parameter(session, "PSM-RDP", account_id="1", connection_method="ssh")


class TestConnectAdHoc:
    def test_body_nests_prerequisites(self, vault, session) -> None:
        vault.add("POST", "/API/Accounts/AdHocConnect", content=RDP_FILE)

        get_psm_connection_parameter(
            session,
            "PSM-RDP",
            user_name="root",
            secret="pw",
            address="srv01",
            platform_id="PSMSecureConnect",
            extra_fields={"Port": "3389"},
            reason="Fix",
        )

        assert vault.last_json() == {
            "UserName": "root",
            "secret": "pw",
            "address": "srv01",
            "platformId": "PSMSecureConnect",
            "extraFields": {"Port": "3389"},
            "PSMConnectPrerequisites": {"ConnectionComponent": "PSM-RDP", "reason": "Fix"},
        }

    def test_missing_arguments(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="need secret, platform_id"):
            get_psm_connection_parameter(session, "PSM-RDP", user_name="root", address="srv01")

    def test_requires_10_5(self, vault) -> None:
        session = make_session(vault, version=(10, 4))
        with pytest.raises(VersionError, match="10.5"):
            get_psm_connection_parameter(
                session, "PSM-RDP", user_name="u", secret="s", address="a", platform_id="p"
            )


class TestLiveSessions:
    def test_list_with_filters(self, vault, session) -> None:
        vault.add("GET", "/API/LiveSessions", json={"LiveSessions": [{"SessionID": "s1"}], "Total": 1})

        sessions = get_psm_session(
            session,
            search="srv01",
            from_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            activities=["Connect", "Window title"],
            limit=10,
            offset=20,
        )

        assert isinstance(sessions[0], PSMSession)
        assert dict(vault.last.url.params) == {
            "Search": "srv01",
            "FromTime": "1704067200",
            "Activities": "Connect,Window title",
            "Limit": "10",
            "Offset": "20",
        }

    def test_one(self, vault, session) -> None:
        vault.add("GET", "/API/LiveSessions/s1", json={"SessionID": "s1"})
        assert get_psm_session(session, "s1").SessionID == "s1"

    def test_terminate(self, vault, session) -> None:
        vault.add("POST", "/API/LiveSessions/s1/Terminate")
        stop_psm_session(session, "s1")
        assert vault.paths() == ["/API/LiveSessions/s1/Terminate"]

    def test_requires_10_6(self, vault) -> None:
        with pytest.raises(VersionError, match="10.6"):
            get_psm_session(make_session(vault, version=(10, 5)))


class TestRecordings:
    def test_list(self, vault, session) -> None:
        vault.add("GET", "/API/Recordings", json={"Recordings": [{"SessionID": "r1"}]})
        recordings = get_psm_recording(session, safe="PSMRecordings", sort="-Start")
        assert isinstance(recordings[0], PSMRecording)
        assert dict(vault.last.url.params) == {"Safe": "PSMRecordings", "Sort": "-Start"}

    def test_one(self, vault, session) -> None:
        vault.add("GET", "/API/Recordings/r1", json={"SessionID": "r1"})
        assert get_psm_recording(session, "r1").SessionID == "r1"
