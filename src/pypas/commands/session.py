"""Logon, logoff and session status for the active profile.

``pypas logon`` stores the session token (see
:class:`~pypas.auth.session_store.SessionStore`) so every later vault
command reuses it until ``pypas logoff``.
"""

from __future__ import annotations

from typing import Optional

import typer

from pypas.commands._common import active_profile, ctx_option, handle_errors
from pypas.output import format_response, info, success, suggest, warning


def logon_command(
    ctx: typer.Context,
    username: Optional[str] = typer.Option(None, "--username", help="Override the profile's username."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", "-s", help="env:VAR, file:/path or prompt."
    ),
    new_password_source: Optional[str] = typer.Option(
        None, "--new-password-source", help="Change the password on logon (env:VAR, file:/path, prompt)."
    ),
    concurrent: bool = typer.Option(False, "--concurrent", help="Allow concurrent sessions."),
) -> None:
    """Log on to the vault of the active profile and store the session."""
    from pypas.api.session import new_session
    from pypas.auth.session_store import SessionEntry, SessionStore
    from pypas.config import resolve_credential

    with handle_errors():
        profile = active_profile(ctx)
        logon = profile.logon
        user = username or logon.username

        password = None
        new_password = None
        if logon.type != "shared":
            password = resolve_credential(
                password_source or logon.password_source,
                prompt=f"Password for {user}: ",
            )
            if new_password_source:
                new_password = resolve_credential(new_password_source, prompt="New password: ")

        session = new_session(
            profile.base_uri,
            username=user,
            password=password,
            logon_type=logon.type,
            application=profile.application,
            classic=logon.classic_api,
            new_password=new_password,
            concurrent_session=concurrent or logon.concurrent_session or None,
            request=profile.request,
            dry_run=bool(ctx_option(ctx, "dry_run", False)),
            transport=ctx_option(ctx, "transport"),
        )
        try:
            if session.dry_run:
                info("Dry run: session not stored.")
                return
            SessionStore(profile.name).save(SessionEntry.from_session(session, logon.type))
        finally:
            session.close()

    success(f'Logged on to "{profile.name}" as {user or "(certificate)"}.')


def logoff_command(ctx: typer.Context) -> None:
    """Log off the stored session of the active profile."""
    from pypas.api.session import close_session
    from pypas.auth.session_store import SessionStore
    from pypas.client.session import PASSession
    from pypas.exceptions import PASError

    with handle_errors():
        profile = active_profile(ctx)
        store = SessionStore(profile.name)
        entry = store.load()
        if entry is None:
            info(f'No stored session for "{profile.name}".')
            return

        session = PASSession.from_entry(
            entry, request=profile.request, transport=ctx_option(ctx, "transport")
        )
        session.dry_run = bool(ctx_option(ctx, "dry_run", False))
        try:
            close_session(session)
        except PASError as exc:
            warning(f"Logoff failed, discarding the stored session anyway: {exc}")
        if not session.dry_run:
            store.clear()

    success(f'Logged off from "{profile.name}".')


def session_command(ctx: typer.Context) -> None:
    """Show the stored session of the active profile."""
    from pypas.api.session import get_session_info
    from pypas.auth.session_store import SessionStore
    from pypas.client.session import PASSession

    with handle_errors():
        profile = active_profile(ctx)
        entry = SessionStore(profile.name).load()
        if entry is None:
            info(f'No stored session for "{profile.name}".')
            suggest("Log on: pypas logon")
            return
        session = PASSession.from_entry(entry, request=profile.request)
        format_response(get_session_info(session))
