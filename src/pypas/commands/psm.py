"""Privileged Session Manager commands -- ``pypas psm ...``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from pypas.commands._common import parse_pairs, vault_session
from pypas.output import format_response, print_data, success


psm_app = typer.Typer(no_args_is_help=True)


@psm_app.command("connect")
def psm_connect(
    ctx: typer.Context,
    account_id: str = typer.Argument(help="Account to connect with."),
    component: str = typer.Option("PSM-RDP", "--component", help="Connection component."),
    method: str = typer.Option("RDP", "--method", help="RDP or PSMGW."),
    reason: Optional[str] = typer.Option(None, "--reason"),
    param: Optional[list[str]] = typer.Option(None, "--param", help="Connection parameter KEY=VALUE."),
    path: Optional[Path] = typer.Option(None, "--path", help="Directory to write the .rdp file to."),
) -> None:
    """Get PSM connection parameters for an account."""
    from pypas.api.psm import get_psm_connection_parameter

    params = parse_pairs(param, "--param")
    with vault_session(ctx) as session:
        result = get_psm_connection_parameter(
            session,
            component,
            account_id=account_id,
            reason=reason,
            connection_method=method,
            connection_params=params or None,
            path=path,
        )
    if isinstance(result, Path):
        success(f"RDP file written to {result}")
    elif isinstance(result, bytes):
        print_data(result.decode("utf-8", errors="replace"))
    else:
        format_response(result)


@psm_app.command("sessions")
def psm_sessions(
    ctx: typer.Context,
    live_session_id: Optional[str] = typer.Argument(None, help="Live session ID; omit to list."),
    search: Optional[str] = typer.Option(None, "--search"),
    safe: Optional[str] = typer.Option(None, "--safe"),
    limit: Optional[int] = typer.Option(None, "--limit"),
) -> None:
    """Show live PSM sessions."""
    from pypas.api.psm import get_psm_session

    with vault_session(ctx) as session:
        result = get_psm_session(
            session, live_session_id=live_session_id, search=search, safe=safe, limit=limit
        )
    format_response(result)


@psm_app.command("terminate")
def psm_terminate(
    ctx: typer.Context,
    live_session_id: str = typer.Argument(help="Live session ID."),
) -> None:
    """Terminate a live PSM session."""
    from pypas.api.psm import stop_psm_session

    with vault_session(ctx) as session:
        stop_psm_session(session, live_session_id)
    success(f"Session {live_session_id} terminated.")


@psm_app.command("recordings")
def psm_recordings(
    ctx: typer.Context,
    recording_id: Optional[str] = typer.Argument(None, help="Recording ID; omit to list."),
    search: Optional[str] = typer.Option(None, "--search"),
    safe: Optional[str] = typer.Option(None, "--safe"),
    limit: Optional[int] = typer.Option(None, "--limit"),
) -> None:
    """Show PSM recordings."""
    from pypas.api.psm import get_psm_recording

    with vault_session(ctx) as session:
        result = get_psm_recording(
            session, recording_id=recording_id, search=search, safe=safe, limit=limit
        )
    format_response(result)
