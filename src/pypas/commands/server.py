"""Server and component health commands -- ``pypas server ...``."""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import vault_session
from pypas.output import format_response


server_app = typer.Typer(no_args_is_help=True)


@server_app.command("info")
def server_info(ctx: typer.Context) -> None:
    """Show vault server details."""
    from pypas.api.server import get_server

    with vault_session(ctx) as session:
        server = get_server(session)
    format_response(server)


@server_app.command("verify")
def server_verify(ctx: typer.Context) -> None:
    """Check that the PVWA web service answers."""
    from pypas.api.server import get_server_web_service

    with vault_session(ctx) as session:
        result = get_server_web_service(session)
    format_response(result)


@server_app.command("components")
def server_components(
    ctx: typer.Context,
    component_id: Optional[str] = typer.Argument(None, help="Component type (CPM, PVWA, PSM, ...); omit for the summary."),
) -> None:
    """Show component health."""
    from pypas.api.server import get_component_detail, get_component_summary

    with vault_session(ctx) as session:
        if component_id:
            result = get_component_detail(session, component_id)
        else:
            result = get_component_summary(session)
    format_response(result)
