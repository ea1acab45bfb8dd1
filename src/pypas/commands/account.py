"""Account commands -- ``pypas account ...``.

Typical workflow::

    pypas account get --search linux --safe-name Unix
    pypas account password 12_34 --reason "maintenance"
    pypas account cpm 12_34 change
"""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import handle_errors, parse_pairs, vault_session
from pypas.output import format_response, info, print_data, success


account_app = typer.Typer(no_args_is_help=True)


@account_app.command("get")
def account_get(
    ctx: typer.Context,
    id: Optional[str] = typer.Option(None, "--id", help="Account ID."),
    search: Optional[str] = typer.Option(None, "--search", help="Free-text search."),
    search_type: Optional[str] = typer.Option(None, "--search-type", help="contains or startswith."),
    safe_name: Optional[str] = typer.Option(None, "--safe-name", help="Only accounts in this safe."),
    saved_filter: Optional[str] = typer.Option(None, "--saved-filter", help="Saved filter (11.1+)."),
    sort: Optional[list[str]] = typer.Option(None, "--sort", help="Sort property, e.g. 'userName desc'."),
    limit: Optional[int] = typer.Option(None, "--limit", help="Page size."),
    keywords: Optional[str] = typer.Option(None, "--keywords", help="Classic search keywords."),
    safe: Optional[str] = typer.Option(None, "--safe", help="Classic safe filter."),
) -> None:
    """Find accounts by ID, v10 search, or classic keyword search."""
    from pypas.api.accounts import get_account

    with vault_session(ctx) as session:
        result = get_account(
            session,
            id=id,
            search=search,
            search_type=search_type,
            safe_name=safe_name,
            saved_filter=saved_filter,
            sort=sort or None,
            limit=limit,
            keywords=keywords,
            safe=safe,
        )
    if result is None:
        info("No matching account.")
        return
    format_response(result)


@account_app.command("add")
def account_add(
    ctx: typer.Context,
    address: str = typer.Option(..., "--address", help="Target address."),
    user_name: str = typer.Option(..., "--user-name", help="Account username."),
    platform_id: str = typer.Option(..., "--platform-id", help="Platform ID."),
    safe_name: str = typer.Option(..., "--safe-name", help="Safe to store the account in."),
    name: Optional[str] = typer.Option(None, "--name", help="Account object name."),
    secret_type: Optional[str] = typer.Option(None, "--secret-type", help="password or key."),
    secret_source: Optional[str] = typer.Option(
        None, "--secret-source", help="env:VAR, file:/path or prompt."
    ),
    property_: Optional[list[str]] = typer.Option(
        None, "--property", help="Platform property KEY=VALUE (repeatable)."
    ),
    manual_reason: Optional[str] = typer.Option(
        None, "--manual-reason", help="Disable automatic management with this reason."
    ),
) -> None:
    """Add an account."""
    from pypas.api.accounts import add_account
    from pypas.config import resolve_credential

    properties = parse_pairs(property_, "--property")
    secret = None
    if secret_source:
        with handle_errors():
            secret = resolve_credential(secret_source, prompt="Secret: ")

    with vault_session(ctx) as session:
        account = add_account(
            session,
            address=address,
            user_name=user_name,
            platform_id=platform_id,
            safe_name=safe_name,
            name=name,
            secret_type=secret_type,
            secret=secret,
            platform_account_properties=properties or None,
            automatic_management_enabled=False if manual_reason else None,
            manual_management_reason=manual_reason,
        )
    format_response(account)


@account_app.command("set")
def account_set(
    ctx: typer.Context,
    id: str = typer.Argument(help="Account ID."),
    replace: Optional[list[str]] = typer.Option(
        None, "--replace", help="PATH=VALUE to replace (repeatable)."
    ),
    add: Optional[list[str]] = typer.Option(None, "--add", help="PATH=VALUE to add (repeatable)."),
    remove: Optional[list[str]] = typer.Option(None, "--remove", help="PATH to remove (repeatable)."),
) -> None:
    """Update account properties.

    Example::

        pypas account set 12_34 --replace /address=srv02 --remove /platformAccountProperties/Port
    """
    from pypas.api.accounts import set_account

    operations = [
        {"op": "replace", "path": path, "value": value}
        for path, value in parse_pairs(replace, "--replace").items()
    ]
    operations += [
        {"op": "add", "path": path, "value": value}
        for path, value in parse_pairs(add, "--add").items()
    ]
    operations += [{"op": "remove", "path": path} for path in remove or []]

    with vault_session(ctx) as session:
        account = set_account(session, id, operations)
    format_response(account)


@account_app.command("remove")
def account_remove(
    ctx: typer.Context,
    id: str = typer.Argument(help="Account ID."),
    classic: bool = typer.Option(False, "--classic", help="Use the classic endpoint."),
) -> None:
    """Delete an account."""
    from pypas.api.accounts import remove_account

    with vault_session(ctx) as session:
        remove_account(session, id, classic=classic)
    success(f"Account {id} removed.")


@account_app.command("password")
def account_password(
    ctx: typer.Context,
    id: str = typer.Argument(help="Account ID."),
    reason: Optional[str] = typer.Option(None, "--reason", help="Reason for access."),
    ticketing_system: Optional[str] = typer.Option(None, "--ticketing-system"),
    ticket_id: Optional[str] = typer.Option(None, "--ticket-id"),
    version: Optional[int] = typer.Option(None, "--version", help="Password version."),
) -> None:
    """Retrieve an account's password to stdout."""
    from pypas.api.accounts import get_account_password

    with vault_session(ctx) as session:
        credential = get_account_password(
            session,
            id,
            reason=reason,
            ticketing_system=ticketing_system,
            ticket_id=ticket_id,
            version=version,
        )
    if credential.Password is not None:
        print_data(credential.Password)


@account_app.command("activity")
def account_activity(
    ctx: typer.Context,
    id: str = typer.Argument(help="Account ID."),
) -> None:
    """Show an account's activity log."""
    from pypas.api.accounts import get_account_activity

    with vault_session(ctx) as session:
        activities = get_account_activity(session, id)
    format_response(activities)


@account_app.command("cpm")
def account_cpm(
    ctx: typer.Context,
    id: str = typer.Argument(help="Account ID."),
    operation: str = typer.Argument(help="verify, change or reconcile."),
    entire_group: Optional[bool] = typer.Option(
        None, "--entire-group/--single", help="Change the whole account group (change only)."
    ),
) -> None:
    """Ask the CPM to verify, change or reconcile a password."""
    from pypas.api.accounts import invoke_cpm_operation

    with vault_session(ctx) as session:
        invoke_cpm_operation(session, id, operation, change_entire_group=entire_group)
    success(f"CPM {operation.lower()} requested for {id}.")
