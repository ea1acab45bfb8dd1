"""Profile commands -- manage the vaults pypas can talk to.

A profile names one PVWA and how to log on to it::

    pypas profile add prod --base-uri https://pvwa.example.com \\
        --logon-type ldap --username svc_reports --password-source env:PAS_PASSWORD
    pypas profile use prod
"""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import handle_errors
from pypas.exceptions import ConfigError, InvalidUsageError
from pypas.output import format_response, get_output, info, success, suggest


profile_app = typer.Typer(no_args_is_help=True)


def _require_profile(name: str) -> None:
    from pypas.config import profile_exists

    if not profile_exists(name):
        raise ConfigError(f'Profile "{name}" not found.')


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    base_uri: str = typer.Option(..., "--base-uri", "-u", help="PVWA address, e.g. https://pvwa.example.com"),
    application: str = typer.Option("PasswordVault", "--application", help="PVWA application path."),
    logon_type: str = typer.Option("cyberark", "--logon-type", "-t", help="cyberark, ldap, radius or shared."),
    username: Optional[str] = typer.Option(None, "--username", help="Vault username."),
    password_source: str = typer.Option(
        "prompt", "--password-source", "-s", help="env:VAR, file:/path or prompt."
    ),
    classic_api: bool = typer.Option(False, "--classic-api", help="Log on through the classic endpoints."),
    no_verify_ssl: bool = typer.Option(False, "--no-verify-ssl", help="Skip TLS certificate checks."),
    client_certificate: Optional[str] = typer.Option(
        None, "--client-certificate", help="PEM certificate for shared logon."
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing profile."),
) -> None:
    """Create a profile.

    Exits with code 2 if the profile exists (without ``--overwrite``) or
    the settings are invalid.
    """
    from pydantic import ValidationError

    from pypas.config import (
        list_profiles,
        load_global_config,
        profile_exists,
        save_global_config,
        save_profile,
    )
    from pypas.models import LogonConfig, Profile, RequestConfig

    with handle_errors():
        if profile_exists(name) and not overwrite:
            raise InvalidUsageError(f'Profile "{name}" already exists. Replace it with --overwrite')

        try:
            profile = Profile(
                name=name,
                base_uri=base_uri,
                application=application,
                logon=LogonConfig(
                    type=logon_type,
                    username=username,
                    password_source=password_source,
                    classic_api=classic_api,
                ),
                request=RequestConfig(
                    verify_ssl=not no_verify_ssl,
                    client_certificate=client_certificate,
                ),
            )
        except ValidationError as exc:
            raise InvalidUsageError(f"Invalid profile: {exc}") from None

        first = not list_profiles()
        save_profile(profile)
        success(f'Profile "{name}" saved.')
        if first:
            config = load_global_config()
            config.default_profile = name
            save_global_config(config)
            info(f'"{name}" is now the default profile.')
    suggest(f"Log on: pypas --profile {name} logon")


@profile_app.command("list")
def profile_list() -> None:
    """List configured profiles."""
    from pypas.config import list_profiles, load_global_config, load_profile

    names = list_profiles()
    if not names:
        info("No profiles configured.")
        suggest("Create one: pypas profile add <name> --base-uri <url>")
        return

    with handle_errors():
        default = load_global_config().default_profile
    rows: list[list[str]] = []
    for name in names:
        try:
            profile = load_profile(name)
        except ConfigError:
            rows.append([name, "error", "-", "-"])
            continue
        marker = "*" if name == default else ""
        rows.append([name + marker, profile.base_uri, profile.logon.type, profile.logon.username or "-"])

    get_output().print_table(["Profile", "PVWA", "Logon", "User"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show one profile."""
    from pypas.config import load_profile

    with handle_errors():
        profile = load_profile(name)
    format_response(profile)


@profile_app.command("remove")
def profile_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Profile name."),
) -> None:
    """Delete a profile and its stored session."""
    from pypas.auth.session_store import SessionStore
    from pypas.config import delete_profile, load_global_config, save_global_config

    with handle_errors():
        _require_profile(name)

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm(f'Remove profile "{name}"?'):
        info("Cancelled.")
        raise typer.Exit()

    with handle_errors():
        delete_profile(name)
        SessionStore(name).clear()
        config = load_global_config()
        if config.default_profile == name:
            config.default_profile = None
            save_global_config(config)
    success(f'Profile "{name}" removed.')


@profile_app.command("use")
def profile_use(name: str = typer.Argument(help="Profile name.")) -> None:
    """Make a profile the default."""
    from pypas.config import load_global_config, save_global_config

    with handle_errors():
        _require_profile(name)
        config = load_global_config()
        config.default_profile = name
        save_global_config(config)
    success(f'Default profile set to "{name}".')
