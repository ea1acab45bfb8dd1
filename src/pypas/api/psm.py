"""Privileged Session Manager (PSM) commands.

:func:`get_psm_connection_parameter` asks the PVWA for what a client needs
to open a PSM session. The answer depends on the connection method:

* ``RDP`` -- an ``.rdp`` file, returned as bytes or written to disk.
* ``PSMGW`` -- JSON describing an HTML5 gateway connection
  (:class:`~pypas.objects.PSMGatewayConnection`).

Connections are either to a vaulted account (``account_id``) or ad-hoc to
an address with supplied credentials.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from pypas.api._params import bound, choose, escape, join_sort, to_epoch
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import (
    PSMGatewayConnection,
    PSMRecording,
    PSMSession,
    add_object_detail,
)
from pypas.versioning import assert_version

CONNECTION_METHODS = ("RDP", "PSMGW")

CONNECTION_PARAMS = (
    "AllowMappingLocalDrives",
    "AllowConnectToConsole",
    "RedirectSmartCards",
    "PSMRemoteMachine",
    "LogonDomain",
    "AllowSelectHTML5",
)


def _connection_params(params: Optional[Mapping[str, Any]]) -> Optional[dict[str, Any]]:
    if not params:
        return None
    lookup = {name.lower(): name for name in CONNECTION_PARAMS}
    body: dict[str, Any] = {}
    for key, value in params.items():
        canonical = lookup.get(key.lower())
        if canonical is None:
            raise InvalidUsageError(
                f"Unknown connection parameter '{key}'; expected one of: {', '.join(CONNECTION_PARAMS)}"
            )
        body[canonical] = value
    return body


def get_psm_connection_parameter(
    session: PASSession,
    connection_component: str,
    account_id: Optional[str] = None,
    reason: Optional[str] = None,
    connection_method: str = "RDP",
    ticketing_system: Optional[str] = None,
    ticket_id: Optional[str] = None,
    connection_params: Optional[Mapping[str, Any]] = None,
    path: Union[str, Path, None] = None,
    user_name: Optional[str] = None,
    secret: Optional[str] = None,
    address: Optional[str] = None,
    platform_id: Optional[str] = None,
    extra_fields: Optional[Mapping[str, Any]] = None,
) -> Union[bytes, Path, PSMGatewayConnection]:
    """Get the parameters needed to connect through PSM. Requires 9.10.

    Args:
        session: An open, logged-on session.
        connection_component: PSM connection component, e.g. ``PSM-RDP``.
        account_id: Vaulted account to connect with. Omit for ad-hoc.
        reason: Reason for access, when the safe requires one.
        connection_method: ``RDP`` (file) or ``PSMGW`` (HTML5 gateway, 10.2+).
        ticketing_system: Ticketing system name.
        ticket_id: Ticket reference.
        connection_params: Extra connection settings, see
            :data:`CONNECTION_PARAMS`.
        path: Directory to write the RDP file to.
        user_name: Ad-hoc connection user (10.5+).
        secret: Ad-hoc connection password.
        address: Ad-hoc target address.
        platform_id: Ad-hoc platform.
        extra_fields: Ad-hoc platform properties.

    Returns:
        The RDP file bytes, the path the file was written to when ``path``
        was given, or a :class:`PSMGatewayConnection` for ``PSMGW``.

    Raises:
        InvalidUsageError: For an unknown method or connection parameter,
            incomplete ad-hoc arguments, or ``path`` with ``PSMGW``.
    """
    assert_version(session, required="9.10", command="get_psm_connection_parameter")
    method = choose(connection_method, CONNECTION_METHODS, "connection method")
    if method == "PSMGW":
        assert_version(session, required="10.2", command="get_psm_connection_parameter (PSMGW)")
        if path is not None:
            raise InvalidUsageError("path only applies to the RDP connection method")

    body: dict[str, Any] = bound(
        reason=reason,
        TicketingSystemName=ticketing_system,
        TicketId=ticket_id,
        ConnectionComponent=connection_component,
        ConnectionParams=_connection_params(connection_params),
    )

    if account_id is not None:
        uri = f"/API/Accounts/{escape(account_id)}/PSMConnect"
        target_name = account_id
    else:
        assert_version(session, required="10.5", command="get_psm_connection_parameter (ad-hoc)")
        missing = [
            name
            for name, value in (
                ("user_name", user_name),
                ("secret", secret),
                ("address", address),
                ("platform_id", platform_id),
            )
            if not value
        ]
        if missing:
            raise InvalidUsageError(
                f"Ad-hoc connections need {', '.join(missing)} (or pass account_id)"
            )
        uri = "/API/Accounts/AdHocConnect"
        target_name = address
        body.update(
            bound(
                UserName=user_name,
                secret=secret,
                address=address,
                platformId=platform_id,
                extraFields=dict(extra_fields) if extra_fields else None,
            )
        )
        prerequisites = bound(
            ConnectionComponent=body.pop("ConnectionComponent", None),
            ConnectionParams=body.pop("ConnectionParams", None),
            reason=body.pop("reason", None),
            TicketingSystemName=body.pop("TicketingSystemName", None),
            TicketId=body.pop("TicketId", None),
        )
        body["PSMConnectPrerequisites"] = prerequisites

    if method == "PSMGW":
        result = session.invoke(
            "POST", uri, json_body=body, headers={"Accept": "application/json"}
        )
        return add_object_detail(result if isinstance(result, dict) else {}, PSMGatewayConnection)

    content, filename = session.invoke_raw("POST", uri, json_body=body)
    if path is None:
        return content

    directory = Path(path).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / (Path(filename).name if filename else f"{target_name}.rdp")
    target.write_bytes(content)
    return target


def get_psm_session(
    session: PASSession,
    live_session_id: Optional[str] = None,
    search: Optional[str] = None,
    safe: Optional[str] = None,
    from_time: Optional[datetime] = None,
    to_time: Optional[datetime] = None,
    activities: Optional[Iterable[str]] = None,
    limit: Optional[int] = None,
    sort: Union[str, Iterable[str], None] = None,
    offset: Optional[int] = None,
) -> Union[PSMSession, list[PSMSession]]:
    """Return one live PSM session, or the sessions matching the filters. Requires 10.6."""
    assert_version(session, required="10.6", command="get_psm_session")
    if live_session_id is not None:
        result = session.invoke("GET", f"/API/LiveSessions/{escape(live_session_id)}")
        return add_object_detail(result, PSMSession)

    params = bound(
        Search=search,
        Safe=safe,
        FromTime=to_epoch(from_time),
        ToTime=to_epoch(to_time),
        Activities=",".join(activities) if activities else None,
        Limit=limit,
        Sort=join_sort(sort),
        Offset=offset,
    )
    result = session.invoke("GET", "/API/LiveSessions", params=params)
    return add_object_detail(unwrap(result, "LiveSessions") or [], PSMSession)


def stop_psm_session(session: PASSession, live_session_id: str) -> None:
    """Terminate a live PSM session. Requires 10.6."""
    assert_version(session, required="10.6", command="stop_psm_session")
    session.invoke("POST", f"/API/LiveSessions/{escape(live_session_id)}/Terminate")


def get_psm_recording(
    session: PASSession,
    recording_id: Optional[str] = None,
    search: Optional[str] = None,
    safe: Optional[str] = None,
    from_time: Optional[datetime] = None,
    to_time: Optional[datetime] = None,
    activities: Optional[Iterable[str]] = None,
    limit: Optional[int] = None,
    sort: Union[str, Iterable[str], None] = None,
    offset: Optional[int] = None,
) -> Union[PSMRecording, list[PSMRecording]]:
    """Return one PSM recording, or the recordings matching the filters. Requires 10.6."""
    assert_version(session, required="10.6", command="get_psm_recording")
    if recording_id is not None:
        result = session.invoke("GET", f"/API/Recordings/{escape(recording_id)}")
        return add_object_detail(result, PSMRecording)

    params = bound(
        Search=search,
        Safe=safe,
        FromTime=to_epoch(from_time),
        ToTime=to_epoch(to_time),
        Activities=",".join(activities) if activities else None,
        Limit=limit,
        Sort=join_sort(sort),
        Offset=offset,
    )
    result = session.invoke("GET", "/API/Recordings", params=params)
    return add_object_detail(unwrap(result, "Recordings") or [], PSMRecording)
