"""Vault version requirements.

Most commands only exist from a given PVWA release onward, a few were
removed in later releases, and some only apply to self-hosted vaults or to
Privilege Cloud. Commands call :func:`assert_version` before building their
request so that an unsupported call fails locally with a clear
:class:`~pypas.exceptions.VersionError` instead of an opaque 404.

When the session's version could not be read at logon it is ``(0, 0)``
and the minimum/maximum checks are skipped.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from pypas.client.session import UNKNOWN_VERSION, PASSession
from pypas.exceptions import VersionError
from pypas.output import debug

VersionLike = Union[str, tuple[int, ...], None]


def parse_version(value: VersionLike) -> tuple[int, ...]:
    """Parse ``"12.6.1"`` into ``(12, 6, 1)``.

    Tuples pass through; ``None`` and unparsable strings become ``(0, 0)``.
    Trailing non-numeric suffixes (``"11.2 Beta"``) are ignored.
    """
    if value is None:
        return UNKNOWN_VERSION
    if isinstance(value, tuple):
        return value
    match = re.match(r"\s*v?(\d+(?:\.\d+)*)", str(value))
    if not match:
        return UNKNOWN_VERSION
    return tuple(int(part) for part in match.group(1).split("."))


def format_version(version: tuple[int, ...]) -> str:
    return ".".join(str(part) for part in version)


def _pad(version: tuple[int, ...], width: int) -> tuple[int, ...]:
    return version + (0,) * (width - len(version))


def compare_versions(a: tuple[int, ...], b: tuple[int, ...]) -> int:
    """Return -1, 0 or 1 as *a* is lower, equal or higher than *b*."""
    width = max(len(a), len(b))
    pa, pb = _pad(a, width), _pad(b, width)
    return (pa > pb) - (pa < pb)


def assert_version(
    session: PASSession,
    required: VersionLike = None,
    maximum: VersionLike = None,
    self_hosted: bool = False,
    privilege_cloud: bool = False,
    command: Optional[str] = None,
) -> None:
    """Check that *session* can run a command.

    Args:
        session: The vault session.
        required: Minimum vault version, e.g. ``"10.4"``.
        maximum: Last vault version supporting the command.
        self_hosted: The command is unavailable on Privilege Cloud.
        privilege_cloud: The command only exists on Privilege Cloud.
        command: Name used in the error message.

    Raises:
        VersionError: If any requirement is not met.
    """
    name = command or "This command"

    if self_hosted and session.is_privilege_cloud:
        raise VersionError(f"{name} is only available on self-hosted vaults")
    if privilege_cloud and not session.is_privilege_cloud:
        raise VersionError(f"{name} is only available on Privilege Cloud")

    if required is None and maximum is None:
        return

    current = session.external_version
    if compare_versions(current, UNKNOWN_VERSION) == 0:
        debug(f"Vault version unknown; skipping version check for {name}")
        return

    if required is not None:
        minimum = parse_version(required)
        if compare_versions(current, minimum) < 0:
            raise VersionError(
                f"{name} requires version {format_version(minimum)} or later; "
                f"connected vault is {format_version(current)}"
            )
    if maximum is not None:
        ceiling = parse_version(maximum)
        # 12.1 as a maximum still admits 12.1.x patch releases
        if compare_versions(current[: len(ceiling)], ceiling) > 0:
            raise VersionError(
                f"{name} is not supported after version {format_version(ceiling)}; "
                f"connected vault is {format_version(current)}"
            )
