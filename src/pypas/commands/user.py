"""User and group commands -- ``pypas user ...`` and ``pypas group ...``."""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import handle_errors, vault_session
from pypas.output import format_response, success


user_app = typer.Typer(no_args_is_help=True)
group_app = typer.Typer(no_args_is_help=True)


@user_app.command("get")
def user_get(
    ctx: typer.Context,
    id: Optional[int] = typer.Argument(None, help="User ID; omit to list users."),
    search: Optional[str] = typer.Option(None, "--search"),
    user_type: Optional[str] = typer.Option(None, "--user-type"),
    extended: Optional[bool] = typer.Option(None, "--extended"),
) -> None:
    """Show one user, or list users."""
    from pypas.api.users import get_user

    with vault_session(ctx) as session:
        result = get_user(session, id=id, search=search, user_type=user_type, extended_details=extended)
    format_response(result)


@user_app.command("whoami")
def user_whoami(ctx: typer.Context) -> None:
    """Show the user owning the stored session."""
    from pypas.api.users import get_logged_on_user

    with vault_session(ctx) as session:
        user = get_logged_on_user(session)
    format_response(user)


@user_app.command("add")
def user_add(
    ctx: typer.Context,
    username: str = typer.Argument(help="Username."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", "-s", help="Initial password: env:VAR, file:/path or prompt."
    ),
    user_type: Optional[str] = typer.Option(None, "--user-type"),
    location: Optional[str] = typer.Option(None, "--location"),
    email: Optional[str] = typer.Option(None, "--email"),
    first_name: Optional[str] = typer.Option(None, "--first-name"),
    last_name: Optional[str] = typer.Option(None, "--last-name"),
    change_on_logon: Optional[bool] = typer.Option(None, "--change-on-logon/--no-change-on-logon"),
) -> None:
    """Create a vault user."""
    from pypas.api.users import new_user
    from pypas.config import resolve_credential

    password = None
    if password_source:
        with handle_errors():
            password = resolve_credential(password_source, prompt="Initial password: ")

    with vault_session(ctx) as session:
        user = new_user(
            session,
            username,
            initial_password=password,
            user_type=user_type,
            location=location,
            change_pass_on_next_logon=change_on_logon,
            first_name=first_name,
            last_name=last_name,
            email=email,
        )
    format_response(user)


@user_app.command("remove")
def user_remove(ctx: typer.Context, id: int = typer.Argument(help="User ID.")) -> None:
    """Delete a vault user."""
    from pypas.api.users import remove_user

    with vault_session(ctx) as session:
        remove_user(session, id)
    success(f"User {id} removed.")


@user_app.command("unblock")
def user_unblock(ctx: typer.Context, id: int = typer.Argument(help="User ID.")) -> None:
    """Activate a suspended user."""
    from pypas.api.users import unblock_user

    with vault_session(ctx) as session:
        unblock_user(session, id)
    success(f"User {id} activated.")


@group_app.command("list")
def group_list(
    ctx: typer.Context,
    search: Optional[str] = typer.Option(None, "--search"),
    group_type: Optional[str] = typer.Option(None, "--group-type", help="Directory or Vault."),
    members: Optional[bool] = typer.Option(None, "--members", help="Include members."),
) -> None:
    """List vault groups."""
    from pypas.api.groups import get_group

    with vault_session(ctx) as session:
        groups = get_group(session, search=search, group_type=group_type, include_members=members)
    format_response(groups)


@group_app.command("add-member")
def group_add_member(
    ctx: typer.Context,
    group_id: int = typer.Argument(help="Group ID."),
    member: str = typer.Argument(help="Username to add."),
    member_type: str = typer.Option("Vault", "--member-type", help="Vault or Domain."),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name for domain members."),
) -> None:
    """Add a member to a group."""
    from pypas.api.groups import add_group_member

    with vault_session(ctx) as session:
        result = add_group_member(session, group_id, member, member_type=member_type, domain_name=domain)
    format_response(result)


@group_app.command("remove-member")
def group_remove_member(
    ctx: typer.Context,
    group_id: int = typer.Argument(help="Group ID."),
    member: str = typer.Argument(help="Member name."),
) -> None:
    """Remove a member from a group."""
    from pypas.api.groups import remove_group_member

    with vault_session(ctx) as session:
        remove_group_member(session, group_id, member)
    success(f'Removed "{member}" from group {group_id}.')
