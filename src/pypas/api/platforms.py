"""Platform commands: list, inspect, import and export.

Platforms travel as zip packages. :func:`import_platform` uploads one as
base64 inside a JSON body; :func:`export_platform` downloads one as a raw
file.
"""

from __future__ import annotations

import base64
from pathlib import Path
from typing import Optional, Union

from pypas.api._params import bound, build_filter, escape
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import (
    ImportedPlatform,
    Platform,
    PlatformDetails,
    TargetPlatform,
    add_object_detail,
)
from pypas.output import debug
from pypas.versioning import assert_version

PLATFORM_TYPES = ("Regular", "Group", "Dependent", "RotationalGroup")


def get_platform(
    session: PASSession,
    platform_id: Optional[str] = None,
    active: Optional[bool] = None,
    platform_type: Optional[str] = None,
    search: Optional[str] = None,
) -> Union[PlatformDetails, list[Platform]]:
    """Return one platform's details, or the platforms matching the filters.

    A single platform needs 11.1; the list needs 11.4.
    """
    if platform_id is not None:
        assert_version(session, required="11.1", command="get_platform")
        result = session.invoke("GET", f"/api/Platforms/{escape(platform_id)}")
        return add_object_detail(result, PlatformDetails)

    assert_version(session, required="11.4", command="get_platform")
    if platform_type is not None and platform_type not in PLATFORM_TYPES:
        raise InvalidUsageError(
            f"Invalid platform type '{platform_type}'; expected one of: {', '.join(PLATFORM_TYPES)}"
        )
    params = bound(Active=active, PlatformType=platform_type, Search=search)
    result = session.invoke("GET", "/api/Platforms", params=params)
    return add_object_detail(unwrap(result, "Platforms") or [], Platform)


def get_target_platform(
    session: PASSession,
    search: Optional[str] = None,
    active: Optional[bool] = None,
) -> list[TargetPlatform]:
    """List target platforms. Requires 11.1."""
    assert_version(session, required="11.1", command="get_target_platform")
    params = bound(
        search=search,
        filter=build_filter(f"active eq {str(active).lower()}" if active is not None else None),
    )
    result = session.invoke("GET", "/api/Platforms/targets", params=params)
    return add_object_detail(unwrap(result, "Platforms") or [], TargetPlatform)


def import_platform(session: PASSession, path: Union[str, Path]) -> ImportedPlatform:
    """Import a platform package. Requires 10.3.

    Args:
        path: A ``.zip`` platform package.

    Returns:
        The imported platform, carrying its new ``PlatformID``.

    Raises:
        InvalidUsageError: If the file does not exist or is not a zip.
    """
    assert_version(session, required="10.3", command="import_platform")
    package = Path(path).expanduser()
    if package.suffix.lower() != ".zip":
        raise InvalidUsageError(f"Platform package must be a .zip file: {package}")
    if not package.is_file():
        raise InvalidUsageError(f"Platform package not found: {package}")

    content = package.read_bytes()
    debug(f"Importing platform package {package} ({len(content)} bytes)")
    body = {"ImportFile": base64.b64encode(content).decode("ascii")}
    result = session.invoke("POST", "/api/Platforms/Import", json_body=body)
    return add_object_detail(result if isinstance(result, dict) else {}, ImportedPlatform)


def export_platform(session: PASSession, platform_id: str, path: Union[str, Path]) -> Path:
    """Export a platform package to disk. Requires 10.3.

    Args:
        platform_id: The platform to export.
        path: Target directory (the file is named ``<platform_id>.zip``) or
            a target file path ending in ``.zip``.

    Returns:
        The path of the written file.
    """
    assert_version(session, required="10.3", command="export_platform")
    content, _ = session.invoke_raw("POST", f"/api/Platforms/{escape(platform_id)}/Export")

    target = Path(path).expanduser()
    if target.suffix.lower() != ".zip":
        target.mkdir(parents=True, exist_ok=True)
        target = target / f"{platform_id}.zip"
    else:
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target
