"""Safe and safe member commands -- ``pypas safe ...``."""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import vault_session
from pypas.output import format_response, success


safe_app = typer.Typer(no_args_is_help=True)
member_app = typer.Typer(no_args_is_help=True)
safe_app.add_typer(member_app, name="member", help="Safe membership.")


@safe_app.command("get")
def safe_get(
    ctx: typer.Context,
    safe_name: Optional[str] = typer.Argument(None, help="Safe name; omit to list safes."),
    search: Optional[str] = typer.Option(None, "--search", help="Free-text search."),
    include_accounts: Optional[bool] = typer.Option(None, "--include-accounts/--no-accounts"),
    extended: Optional[bool] = typer.Option(None, "--extended", help="Include extended details."),
    classic: bool = typer.Option(False, "--classic", help="Use the classic endpoints."),
) -> None:
    """Show one safe, or list safes."""
    from pypas.api.safes import get_safe

    with vault_session(ctx) as session:
        result = get_safe(
            session,
            safe_name=safe_name,
            search=search,
            include_accounts=include_accounts,
            extended_details=extended,
            classic=classic,
        )
    format_response(result)


@safe_app.command("add")
def safe_add(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    description: Optional[str] = typer.Option(None, "--description"),
    location: Optional[str] = typer.Option(None, "--location"),
    managing_cpm: Optional[str] = typer.Option(None, "--managing-cpm", help="CPM user managing the safe."),
    versions: Optional[int] = typer.Option(None, "--versions", help="Password versions to retain."),
    days: Optional[int] = typer.Option(None, "--days", help="Days to retain password versions."),
    olac: Optional[bool] = typer.Option(None, "--olac/--no-olac", help="Object-level access control."),
) -> None:
    """Create a safe."""
    from pypas.api.safes import add_safe

    with vault_session(ctx) as session:
        safe = add_safe(
            session,
            safe_name,
            description=description,
            location=location,
            olac_enabled=olac,
            managing_cpm=managing_cpm,
            number_of_versions_retention=versions,
            number_of_days_retention=days,
        )
    format_response(safe)


@safe_app.command("set")
def safe_set(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    new_name: Optional[str] = typer.Option(None, "--rename", help="New safe name."),
    description: Optional[str] = typer.Option(None, "--description"),
    managing_cpm: Optional[str] = typer.Option(None, "--managing-cpm"),
    versions: Optional[int] = typer.Option(None, "--versions"),
    days: Optional[int] = typer.Option(None, "--days"),
) -> None:
    """Update a safe."""
    from pypas.api.safes import set_safe

    with vault_session(ctx) as session:
        safe = set_safe(
            session,
            safe_name,
            new_safe_name=new_name,
            description=description,
            managing_cpm=managing_cpm,
            number_of_versions_retention=versions,
            number_of_days_retention=days,
        )
    format_response(safe)


@safe_app.command("remove")
def safe_remove(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
) -> None:
    """Delete a safe."""
    from pypas.api.safes import remove_safe

    with vault_session(ctx) as session:
        remove_safe(session, safe_name)
    success(f'Safe "{safe_name}" removed.')


def _permission_flags(allow: Optional[list[str]], deny: Optional[list[str]]) -> Optional[dict[str, bool]]:
    if not allow and not deny:
        return None
    permissions = {name: True for name in allow or []}
    permissions.update({name: False for name in deny or []})
    return permissions


@member_app.command("list")
def member_list(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    member_type: Optional[str] = typer.Option(None, "--member-type", help="User, Group or Role."),
    search: Optional[str] = typer.Option(None, "--search"),
) -> None:
    """List the members of a safe."""
    from pypas.api.safe_members import get_safe_member

    with vault_session(ctx) as session:
        members = get_safe_member(session, safe_name, member_type=member_type, search=search)
    format_response(members)


@member_app.command("add")
def member_add(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    member_name: str = typer.Argument(help="User, group or role name."),
    search_in: Optional[str] = typer.Option(None, "--search-in", help="Vault or a directory name."),
    member_type: Optional[str] = typer.Option(None, "--member-type", help="User, Group or Role."),
    allow: Optional[list[str]] = typer.Option(None, "--allow", help="Permission to grant (repeatable)."),
    deny: Optional[list[str]] = typer.Option(None, "--deny", help="Permission to deny (repeatable)."),
) -> None:
    """Add a member to a safe.

    Example::

        pypas safe member add Unix ops --allow useAccounts --allow listAccounts
    """
    from pypas.api.safe_members import add_safe_member

    with vault_session(ctx) as session:
        member = add_safe_member(
            session,
            safe_name,
            member_name,
            search_in=search_in,
            member_type=member_type,
            permissions=_permission_flags(allow, deny),
        )
    format_response(member)


@member_app.command("set")
def member_set(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    member_name: str = typer.Argument(help="Member name."),
    allow: Optional[list[str]] = typer.Option(None, "--allow"),
    deny: Optional[list[str]] = typer.Option(None, "--deny"),
) -> None:
    """Change a member's permissions."""
    from pypas.api.safe_members import set_safe_member

    with vault_session(ctx) as session:
        member = set_safe_member(
            session, safe_name, member_name, permissions=_permission_flags(allow, deny)
        )
    format_response(member)


@member_app.command("remove")
def member_remove(
    ctx: typer.Context,
    safe_name: str = typer.Argument(help="Safe name."),
    member_name: str = typer.Argument(help="Member name."),
) -> None:
    """Remove a member from a safe."""
    from pypas.api.safe_members import remove_safe_member

    with vault_session(ctx) as session:
        remove_safe_member(session, safe_name, member_name)
    success(f'Removed "{member_name}" from safe "{safe_name}".')
