"""Helpers shared by the vault command groups.

Every vault command resolves the active profile, rebuilds the stored
session for it and runs one :mod:`pypas.api` call. :func:`vault_session`
packages that sequence and turns :class:`~pypas.exceptions.PASError` into
an error message plus the matching exit code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from pypas.exceptions import AuthError, ConfigError, PASError
from pypas.models import Profile
from pypas.output import error, suggest


def ctx_option(ctx: typer.Context, key: str, default: Any = None) -> Any:
    return ctx.obj.get(key, default) if ctx.obj else default


def active_profile(ctx: typer.Context) -> Profile:
    """Resolve the profile selected by ``--profile``, env, project or global config.

    Raises:
        ConfigError: If no profile is selected and none can be picked.
    """
    from pypas.config import resolve_config

    _, profile = resolve_config(
        cli_profile=ctx_option(ctx, "profile"),
        cli_base_uri=ctx_option(ctx, "base_uri"),
    )
    if profile is None:
        raise ConfigError(
            "No profile selected. Pass --profile, set PYPAS_PROFILE, "
            "or run: pypas profile use <name>"
        )
    return profile


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report :class:`PASError` on stderr and exit with its code."""
    try:
        yield
    except PASError as exc:
        error(str(exc))
        if isinstance(exc, AuthError) and exc.status_code in (401, 403):
            suggest("The session may have expired. Log on again: pypas logon")
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def vault_session(ctx: typer.Context) -> Iterator[Any]:
    """Yield an open :class:`~pypas.client.PASSession` for the active profile.

    The session is rebuilt from the token stored by ``pypas logon``; it is
    closed (but not logged off) on exit.

    Raises:
        typer.Exit: With the error's exit code on any :class:`PASError`.
    """
    from pypas.auth.session_store import SessionStore
    from pypas.client.session import PASSession

    with handle_errors():
        profile = active_profile(ctx)
        entry = SessionStore(profile.name).load()
        if entry is None:
            raise AuthError(f'Not logged on to profile "{profile.name}". Run: pypas logon')

        session = PASSession.from_entry(
            entry, request=profile.request, transport=ctx_option(ctx, "transport")
        )
        session.dry_run = bool(ctx_option(ctx, "dry_run", False))
        with session:
            yield session


def parse_pairs(values: Optional[list[str]], option: str) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options into a dict.

    Raises:
        typer.BadParameter: If an item has no ``=``.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint=option)
        pairs[key] = value
    return pairs
