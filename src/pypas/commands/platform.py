"""Platform commands -- ``pypas platform ...``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from pypas.commands._common import vault_session
from pypas.output import format_response, success


platform_app = typer.Typer(no_args_is_help=True)


@platform_app.command("get")
def platform_get(
    ctx: typer.Context,
    platform_id: Optional[str] = typer.Argument(None, help="Platform ID; omit to list platforms."),
    active: Optional[bool] = typer.Option(None, "--active/--inactive"),
    platform_type: Optional[str] = typer.Option(None, "--type", help="Regular, Group, Dependent, RotationalGroup."),
    search: Optional[str] = typer.Option(None, "--search"),
) -> None:
    """Show one platform, or list platforms."""
    from pypas.api.platforms import get_platform

    with vault_session(ctx) as session:
        result = get_platform(
            session,
            platform_id=platform_id,
            active=active,
            platform_type=platform_type,
            search=search,
        )
    format_response(result)


@platform_app.command("targets")
def platform_targets(
    ctx: typer.Context,
    search: Optional[str] = typer.Option(None, "--search"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive"),
) -> None:
    """List target platforms."""
    from pypas.api.platforms import get_target_platform

    with vault_session(ctx) as session:
        result = get_target_platform(session, search=search, active=active)
    format_response(result)


@platform_app.command("import")
def platform_import(
    ctx: typer.Context,
    path: Path = typer.Argument(help="Platform package (.zip)."),
) -> None:
    """Import a platform package."""
    from pypas.api.platforms import import_platform

    with vault_session(ctx) as session:
        imported = import_platform(session, path)
    format_response(imported)


@platform_app.command("export")
def platform_export(
    ctx: typer.Context,
    platform_id: str = typer.Argument(help="Platform ID."),
    path: Path = typer.Option(Path("."), "--path", help="Target directory or .zip file."),
) -> None:
    """Export a platform package."""
    from pypas.api.platforms import export_platform

    with vault_session(ctx) as session:
        written = export_platform(session, platform_id, path)
    success(f"Platform {platform_id} exported to {written}")
