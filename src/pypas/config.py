"""Configuration management: XDG directories, vault profiles, precedence.

Layout on Linux/BSD follows the XDG Base Directory conventions; macOS and
Windows use ``~/.pypas/``:

* ``<config>/config.json`` -- the :class:`~pypas.models.GlobalConfig`.
* ``<config>/profiles/<name>.json`` -- one :class:`~pypas.models.Profile`
  per PVWA.
* ``<data>/sessions/<name>.json`` -- logged-on sessions kept by
  :class:`~pypas.auth.session_store.SessionStore`.
* ``./pypas.json`` -- optional project-local config pinning a profile.

:func:`resolve_config` merges CLI flags, environment variables, project
config and global config. :func:`resolve_credential` turns a password
source descriptor into the secret itself.

Writes go through :func:`_atomic_write` (temp file then rename).
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pypas.exceptions import ConfigError
from pypas.models import GlobalConfig, Profile

_APP_NAME = "pypas"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "pypas.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on Linux and the BSDs."""
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _fallback_base_dir() -> Path:
    """``~/.pypas`` for platforms without XDG conventions."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Read an XDG base directory from *env_var*, else build it under ``$HOME``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/pypas/`` (default ``~/.config/pypas/``).
    Elsewhere: ``~/.pypas/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (sessions, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/pypas/`` (default ``~/.local/share/pypas/``).
    Elsewhere: ``~/.pypas/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_sessions_dir() -> Path:
    """Return ``<data_dir>/sessions/``, creating it if necessary."""
    path = get_data_dir() / "sessions"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write *data* to *path* via a sibling temp file and ``os.replace``.

    When *mode* is given the temp file gets those permissions before any
    content is written. The temp file is removed on any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    handle = None
    tmp_path: Optional[str] = None
    try:
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = handle.name
        if mode is not None:
            os.chmod(tmp_path, mode)
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
        handle.close()
        handle = None
        os.replace(tmp_path, path)
    except BaseException:
        if handle is not None:
            handle.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return the names of all saved profiles, sorted."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate the profile called *name*.

    Raises:
        ConfigError: If the profile does not exist or is invalid.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    data = _read_json(path, f"profile '{name}'")
    try:
        return Profile.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist *profile* as ``<profiles_dir>/<profile.name>.json``."""
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a saved profile.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./pypas.json`` if present.

    The file typically holds ``{"default_profile": "<name>"}`` so that a
    working directory can pin which vault it talks to.

    Raises:
        ConfigError: If the file exists but is not valid JSON.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json(path, "project config")


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_uri: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[Profile]]:
    """Resolve the effective config and active profile.

    Precedence (high to low):
        1. CLI flags (``cli_profile``, ``cli_base_uri``, ``cli_format``)
        2. Environment variables (``PYPAS_PROFILE``, ``PYPAS_BASE_URI``)
        3. Project config (``./pypas.json``)
        4. User config (``~/.config/pypas/config.json``)
        5. Defaults

    When no profile is named anywhere and exactly one profile exists, it
    is selected automatically (unless ``auto_select_single_profile`` is
    off).

    Returns:
        A tuple of ``(global_config, active_profile_or_None)``.

    Raises:
        ConfigError: If a base URI override is given but no profile
            resolves, or the selected profile cannot be loaded.
    """
    global_cfg = load_global_config()

    profile_name: Optional[str] = global_cfg.default_profile
    project = load_project_config()
    if project is not None and project.get("default_profile"):
        profile_name = project["default_profile"]
    env_profile = os.environ.get("PYPAS_PROFILE")
    if env_profile:
        profile_name = env_profile
    if cli_profile is not None:
        profile_name = cli_profile

    if profile_name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            profile_name = profiles[0]

    env_base_uri = os.environ.get("PYPAS_BASE_URI")
    base_uri = cli_base_uri if cli_base_uri is not None else env_base_uri

    profile: Optional[Profile] = None
    if profile_name is not None:
        profile = load_profile(profile_name)
        if base_uri:
            profile.base_uri = base_uri.rstrip("/")
    elif base_uri:
        source = "--base-uri" if cli_base_uri is not None else "PYPAS_BASE_URI"
        raise ConfigError(
            f"{source} overrides the PVWA address of a profile, but no profile is selected. "
            "Pass --profile or run: pypas profile add <name> --base-uri <url>"
        )

    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg, profile


# --- Credential source resolution ---


def resolve_credential(source: str, prompt: str = "Password: ") -> str:
    """Resolve a secret from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass(prompt)

    raise ConfigError(f"Unknown credential source format: {source}")
