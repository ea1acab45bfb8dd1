"""Server and component health commands."""

from __future__ import annotations

from pypas.api._params import escape
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.objects import (
    ComponentDetail,
    ComponentSummary,
    Server,
    ServerWebService,
    add_object_detail,
)
from pypas.versioning import assert_version


def get_server(session: PASSession) -> Server:
    """Return the vault server details, including ``ExternalVersion``."""
    result = session.invoke("GET", "/WebServices/PIMServices.svc/Server")
    return add_object_detail(result, Server)


def get_server_web_service(session: PASSession) -> ServerWebService:
    """Verify the PVWA web service is up and return its details."""
    result = session.invoke("GET", "/WebServices/PIMServices.svc/Verify")
    return add_object_detail(result, ServerWebService)


def get_component_summary(session: PASSession) -> list[ComponentSummary]:
    """Return the connection status summary of every vault component.

    Requires 10.1 on a self-hosted vault.
    """
    assert_version(session, required="10.1", self_hosted=True, command="get_component_summary")
    result = session.invoke("GET", "/api/ComponentsMonitoringSummary")
    return add_object_detail(unwrap(result, "Components") or [], ComponentSummary)


def get_component_detail(session: PASSession, component_id: str) -> list[ComponentDetail]:
    """Return per-instance details for one component type (``CPM``, ``PVWA``, ``PSM``, ...).

    Requires 10.1 on a self-hosted vault.
    """
    assert_version(session, required="10.1", self_hosted=True, command="get_component_detail")
    result = session.invoke("GET", f"/api/ComponentsMonitoringDetails/{escape(component_id)}")
    return add_object_detail(
        unwrap(result, "ComponentsDetails") or [],
        ComponentDetail,
        ComponentID=component_id,
    )
