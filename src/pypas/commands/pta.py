"""Privileged Threat Analytics commands -- ``pypas pta ...``."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import typer

from pypas.commands._common import vault_session
from pypas.output import format_response


pta_app = typer.Typer(no_args_is_help=True)


@pta_app.command("remediation")
def pta_remediation(ctx: typer.Context) -> None:
    """Show automatic remediation settings."""
    from pypas.api.pta import get_pta_remediation

    with vault_session(ctx) as session:
        settings = get_pta_remediation(session)
    format_response(settings)


@pta_app.command("set-remediation")
def pta_set_remediation(
    ctx: typer.Context,
    credentials_theft: Optional[bool] = typer.Option(
        None, "--credentials-theft/--no-credentials-theft",
        help="Change the password on suspected credentials theft.",
    ),
    over_pass_the_hash: Optional[bool] = typer.Option(
        None, "--over-pass-the-hash/--no-over-pass-the-hash",
        help="Change the password on suspected over-pass-the-hash.",
    ),
    suspicious_change: Optional[bool] = typer.Option(
        None, "--suspicious-change/--no-suspicious-change",
        help="Reconcile on suspicious password change.",
    ),
    unmanaged_account: Optional[bool] = typer.Option(
        None, "--unmanaged-account/--no-unmanaged-account",
        help="Add unmanaged privileged accounts to pending.",
    ),
) -> None:
    """Update automatic remediation settings."""
    from pypas.api.pta import set_pta_remediation

    with vault_session(ctx) as session:
        settings = set_pta_remediation(
            session,
            change_password_on_suspected_credentials_theft=credentials_theft,
            change_password_on_over_pass_the_hash=over_pass_the_hash,
            slow_reconcile_on_suspicious_password_change=suspicious_change,
            add_to_pending_on_unmanaged_privileged_account=unmanaged_account,
        )
    format_response(settings)


@pta_app.command("events")
def pta_events(
    ctx: typer.Context,
    since: Optional[datetime] = typer.Option(None, "--since", help="Only events updated since (UTC)."),
    status: Optional[str] = typer.Option(None, "--status", help="OPEN or CLOSED."),
    account_id: Optional[str] = typer.Option(None, "--account-id"),
) -> None:
    """List security events."""
    from pypas.api.pta import get_pta_event

    with vault_session(ctx) as session:
        events = get_pta_event(
            session, last_updated_event_date=since, status=status, account_id=account_id
        )
    format_response(events)


@pta_app.command("rules")
def pta_rules(ctx: typer.Context) -> None:
    """List risky-activity rules."""
    from pypas.api.pta import get_pta_rule

    with vault_session(ctx) as session:
        rules = get_pta_rule(session)
    format_response(rules)


@pta_app.command("add-rule")
def pta_add_rule(
    ctx: typer.Context,
    category: str = typer.Option(..., "--category", help="KEYSTROKES, SQL, SCP or KUBERNETES."),
    activity: list[str] = typer.Option(..., "--activity", help="Risky activity pattern (repeatable)."),
    severity: str = typer.Option(..., "--severity", help="LOW, MEDIUM, HIGH or CRITICAL."),
    description: Optional[str] = typer.Option(None, "--description"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive"),
) -> None:
    """Add a risky-activity rule."""
    from pypas.api.pta import add_pta_rule

    with vault_session(ctx) as session:
        rules = add_pta_rule(session, category, activity, severity, description, active)
    format_response(rules)


@pta_app.command("set-rule")
def pta_set_rule(
    ctx: typer.Context,
    id: int = typer.Argument(help="Rule ID."),
    category: str = typer.Option(..., "--category"),
    activity: list[str] = typer.Option(..., "--activity"),
    severity: str = typer.Option(..., "--severity"),
    description: Optional[str] = typer.Option(None, "--description"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive"),
) -> None:
    """Replace a risky-activity rule."""
    from pypas.api.pta import set_pta_rule

    with vault_session(ctx) as session:
        rules = set_pta_rule(session, id, category, activity, severity, description, active)
    format_response(rules)
