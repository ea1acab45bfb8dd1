"""Application identity commands -- ``pypas application ...``."""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import vault_session
from pypas.output import format_response, success


application_app = typer.Typer(no_args_is_help=True)


@application_app.command("get")
def application_get(
    ctx: typer.Context,
    app_id: Optional[str] = typer.Argument(None, help="Application ID or search term."),
    exact: bool = typer.Option(False, "--exact", help="Look up app_id by exact name."),
    location: Optional[str] = typer.Option(None, "--location"),
    sublocations: Optional[bool] = typer.Option(None, "--sublocations/--no-sublocations"),
) -> None:
    """Show applications."""
    from pypas.api.applications import get_application

    with vault_session(ctx) as session:
        result = get_application(
            session,
            app_id=app_id,
            exact=exact,
            location=location,
            include_sublocations=sublocations,
        )
    format_response(result)


@application_app.command("add")
def application_add(
    ctx: typer.Context,
    app_id: str = typer.Argument(help="Application ID."),
    description: Optional[str] = typer.Option(None, "--description"),
    location: str = typer.Option("\\", "--location"),
    access_from: Optional[int] = typer.Option(None, "--access-from", help="First allowed hour (0-23)."),
    access_to: Optional[int] = typer.Option(None, "--access-to", help="Last allowed hour (0-23)."),
    disabled: Optional[bool] = typer.Option(None, "--disabled/--enabled"),
) -> None:
    """Create an application identity."""
    from pypas.api.applications import add_application

    with vault_session(ctx) as session:
        application = add_application(
            session,
            app_id,
            description=description,
            location=location,
            access_permitted_from=access_from,
            access_permitted_to=access_to,
            disabled=disabled,
        )
    format_response(application)


@application_app.command("remove")
def application_remove(ctx: typer.Context, app_id: str = typer.Argument(help="Application ID.")) -> None:
    """Delete an application identity."""
    from pypas.api.applications import remove_application

    with vault_session(ctx) as session:
        remove_application(session, app_id)
    success(f'Application "{app_id}" removed.')


@application_app.command("auth")
def application_auth(ctx: typer.Context, app_id: str = typer.Argument(help="Application ID.")) -> None:
    """List an application's authentication methods."""
    from pypas.api.applications import get_application_auth_method

    with vault_session(ctx) as session:
        methods = get_application_auth_method(session, app_id)
    format_response(methods)


@application_app.command("add-auth")
def application_add_auth(
    ctx: typer.Context,
    app_id: str = typer.Argument(help="Application ID."),
    auth_type: str = typer.Option(..., "--type", help="path, hash, osUser, machineAddress, ..."),
    auth_value: str = typer.Option(..., "--value"),
    comment: Optional[str] = typer.Option(None, "--comment"),
) -> None:
    """Add an authentication method to an application."""
    from pypas.api.applications import add_application_auth_method

    with vault_session(ctx) as session:
        add_application_auth_method(session, app_id, auth_type, auth_value, comment=comment)
    success(f'Authentication method added to "{app_id}".')
