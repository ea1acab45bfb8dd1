"""Tests for pypas.config -- XDG paths, atomic writes, profiles, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from pypas.config import (
    _atomic_write,
    delete_profile,
    get_config_dir,
    get_data_dir,
    get_sessions_dir,
    list_profiles,
    load_global_config,
    load_profile,
    load_project_config,
    profile_exists,
    resolve_config,
    resolve_credential,
    save_global_config,
    save_profile,
)
from pypas.exceptions import ConfigError
from pypas.models import GlobalConfig, LogonConfig, Profile


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_profile(name: str = "prod", base_uri: str = "https://pvwa.example.com") -> Profile:
    return Profile(name=name, base_uri=base_uri)


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pypas.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "pypas"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pypas.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "custom"))

        assert get_config_dir() == tmp_path / "custom" / "pypas"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pypas.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

        assert get_data_dir() == tmp_path / "data" / "pypas"
        assert get_sessions_dir() == tmp_path / "data" / "pypas" / "sessions"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pypas.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".pypas"
        assert get_data_dir() == tmp_path / ".pypas" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("pypas.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []

    def test_mode_applied(self, tmp_path: Path) -> None:
        target = tmp_path / "secret.json"
        _atomic_write(target, "{}", mode=0o600)
        assert target.stat().st_mode & 0o777 == 0o600


# ---------------------------------------------------------------------------
# Global config and profiles
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config.default_profile is None
        assert config.auto_select_single_profile is True

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_profile="prod"))
        assert load_global_config().default_profile == "prod"

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


class TestProfiles:
    def test_list_empty(self, isolated_config: Path) -> None:
        assert list_profiles() == []

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        profile = Profile(
            name="prod",
            base_uri="https://pvwa.example.com/",
            logon=LogonConfig(type="LDAP", username="svc", password_source="env:PW"),
        )
        save_profile(profile)

        loaded = load_profile("prod")
        assert loaded.base_uri == "https://pvwa.example.com"
        assert loaded.logon.type == "ldap"
        assert loaded.logon.username == "svc"
        assert list_profiles() == ["prod"]

    def test_unknown_logon_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown logon type"):
            LogonConfig(type="windows")

    def test_load_nonexistent_raises_config_error(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_profile("missing")

    def test_delete_profile(self, isolated_config: Path) -> None:
        save_profile(_make_profile())
        delete_profile("prod")
        assert not profile_exists("prod")

    def test_delete_nonexistent_raises_config_error(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            delete_profile("missing")


class TestProjectConfig:
    def test_load_returns_none_when_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_load_valid_project_config(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "pypas.json", {"default_profile": "dev"})
        assert load_project_config() == {"default_profile": "dev"}


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > project > global > defaults."""

    def test_defaults_no_profile(self, isolated_config: Path) -> None:
        cfg, profile = resolve_config()
        assert isinstance(cfg, GlobalConfig)
        assert profile is None

    def test_global_default_profile(self, isolated_config: Path) -> None:
        save_profile(_make_profile("global"))
        save_profile(_make_profile("other"))
        save_global_config(GlobalConfig(default_profile="global"))

        _, profile = resolve_config()
        assert profile is not None and profile.name == "global"

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_profile(_make_profile("global"))
        save_profile(_make_profile("project"))
        save_global_config(GlobalConfig(default_profile="global"))
        _write_json(isolated_config / "pypas.json", {"default_profile": "project"})

        _, profile = resolve_config()
        assert profile is not None and profile.name == "project"

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("project"))
        save_profile(_make_profile("env"))
        _write_json(isolated_config / "pypas.json", {"default_profile": "project"})
        monkeypatch.setenv("PYPAS_PROFILE", "env")

        _, profile = resolve_config()
        assert profile is not None and profile.name == "env"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("env"))
        save_profile(_make_profile("cli"))
        monkeypatch.setenv("PYPAS_PROFILE", "env")

        _, profile = resolve_config(cli_profile="cli")
        assert profile is not None and profile.name == "cli"

    def test_base_uri_overrides(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_profile(_make_profile("prod"))
        monkeypatch.setenv("PYPAS_BASE_URI", "https://env.example.com/")

        _, profile = resolve_config(cli_profile="prod")
        assert profile.base_uri == "https://env.example.com"

        _, profile = resolve_config(cli_profile="prod", cli_base_uri="https://cli.example.com")
        assert profile.base_uri == "https://cli.example.com"

    def test_base_uri_without_profile(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="--base-uri"):
            resolve_config(cli_base_uri="https://cli.example.com")

    def test_env_base_uri_without_profile(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PYPAS_BASE_URI", "https://env.example.com")
        with pytest.raises(ConfigError, match="PYPAS_BASE_URI"):
            resolve_config()

    def test_auto_select_single_profile(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        _, profile = resolve_config()
        assert profile is not None and profile.name == "only"

    def test_auto_select_disabled(self, isolated_config: Path) -> None:
        save_profile(_make_profile("only"))
        save_global_config(GlobalConfig(auto_select_single_profile=False))
        _, profile = resolve_config()
        assert profile is None


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAS_PW", "s3cret")
        assert resolve_credential("env:PAS_PW") == "s3cret"

    def test_env_source_missing_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PAS_PW", raising=False)
        with pytest.raises(ConfigError, match="PAS_PW"):
            resolve_credential("env:PAS_PW")

    def test_file_source_strips_whitespace(self, tmp_path: Path) -> None:
        secret = tmp_path / "pw.txt"
        secret.write_text("s3cret\n", encoding="utf-8")
        assert resolve_credential(f"file:{secret}") == "s3cret"

    def test_file_source_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_prompt_source_non_tty_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: False)
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_prompt_source_with_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin.isatty", lambda: True)
        with patch("pypas.config.getpass.getpass", return_value="typed"):
            assert resolve_credential("prompt") == "typed"

    def test_unknown_source_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("keyring:pas")
