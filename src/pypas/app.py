"""Typer application and CLI entry point for pypas.

This module wires together the top-level Typer application and registers
the built-in sub-command groups: ``profile``, ``config``, the session
commands (``logon``, ``logoff``, ``session``) and one group per area of
the vault REST API.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~pypas.exceptions.PASError` exits with its mapped code; any other
exception is written to a crash log under the data directory.

See Also:
    :mod:`pypas.config`: Profile and global configuration resolution.
    :mod:`pypas.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from pypas import __version__
from pypas.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="pypas",
    help="Command-line access to a Privileged Access Security vault.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"pypas {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    base_uri: Optional[str] = typer.Option(
        None, "--base-uri", help="Override the PVWA address of the selected profile."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show REST call traces."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests without sending them."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~pypas.output.OutputManager` from CLI
    flags, and stores shared options (``profile``, ``dry_run``, ``force``,
    ...) in the Typer context so that sub-commands can read them via
    ``ctx.obj``.
    """
    from pypas.config import load_global_config
    from pypas.exceptions import ConfigError
    from pypas.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        try:
            fmt = OutputFormat(load_global_config().output.format)
        except (ConfigError, ValueError):
            fmt = OutputFormat.AUTO

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["base_uri"] = base_uri
    ctx.obj["dry_run"] = dry_run
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from pypas.commands.account import account_app  # noqa: E402
from pypas.commands.application import application_app  # noqa: E402
from pypas.commands.config import config_app  # noqa: E402
from pypas.commands.platform import platform_app  # noqa: E402
from pypas.commands.profile import profile_app  # noqa: E402
from pypas.commands.psm import psm_app  # noqa: E402
from pypas.commands.pta import pta_app  # noqa: E402
from pypas.commands.safe import safe_app  # noqa: E402
from pypas.commands.server import server_app  # noqa: E402
from pypas.commands.session import logoff_command, logon_command, session_command  # noqa: E402
from pypas.commands.user import group_app, user_app  # noqa: E402

app.add_typer(profile_app, name="profile", help="Vault profile management.")
app.add_typer(config_app, name="config", help="Configuration management.")
app.command("logon")(logon_command)
app.command("logoff")(logoff_command)
app.command("session")(session_command)
app.add_typer(account_app, name="account", help="Accounts and passwords.")
app.add_typer(safe_app, name="safe", help="Safes and safe members.")
app.add_typer(platform_app, name="platform", help="Platforms.")
app.add_typer(pta_app, name="pta", help="Privileged Threat Analytics.")
app.add_typer(psm_app, name="psm", help="Privileged Session Manager.")
app.add_typer(server_app, name="server", help="Server and component health.")
app.add_typer(user_app, name="user", help="Vault users.")
app.add_typer(group_app, name="group", help="Vault groups.")
app.add_typer(application_app, name="application", help="Application identities.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from pypas.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``pypas`` console script.

    Unhandled :class:`~pypas.exceptions.PASError` instances cause a clean
    exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from pypas.exceptions import PASError
        from pypas.output import error

        if isinstance(exc, PASError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
