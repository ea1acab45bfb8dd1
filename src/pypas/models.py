"""Pydantic configuration models shared across pypas.

These models are serialised as JSON in the user's config directory:
:class:`LogonConfig`, :class:`RequestConfig`, :class:`OutputConfig`,
:class:`GlobalConfig`, and :class:`Profile`.

Vault *result* models live in :mod:`pypas.objects`; they keep arbitrary
vendor fields, whereas the models here are strict about their shape.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


LOGON_TYPES = ("cyberark", "ldap", "radius", "shared")


class LogonConfig(BaseModel):
    """How a :class:`Profile` logs on to the vault.

    Example::

        LogonConfig(
            type="ldap",
            username="svc_reports",
            password_source="env:PAS_PASSWORD",
        )
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(
        default="cyberark", description="Logon method: cyberark, ldap, radius, shared"
    )
    username: Optional[str] = Field(
        default=None, description="Vault username (not used by shared logon)"
    )
    password_source: str = Field(
        default="prompt",
        description="Password source: env:VAR, file:/path, prompt",
    )
    classic_api: bool = Field(
        default=False,
        description="Use the classic WebServices logon endpoints instead of api/Auth",
    )
    concurrent_session: bool = Field(
        default=False, description="Allow concurrent sessions for the same user"
    )

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        value = value.lower()
        if value not in LOGON_TYPES:
            raise ValueError(
                f"Unknown logon type '{value}'; expected one of {', '.join(LOGON_TYPES)}"
            )
        return value


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every call in a session."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Max retry attempts")
    client_certificate: Optional[str] = Field(
        default=None, description="PEM client certificate (shared logon)"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/pypas/config.json``.

    Fields here have the lowest precedence and can be overridden by project
    config, environment variables, or CLI flags. See
    :func:`~pypas.config.resolve_config` for the full precedence chain.
    """

    default_profile: Optional[str] = None
    auto_select_single_profile: bool = True
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """Per-vault profile stored as JSON under the ``profiles/`` config directory.

    Each profile points at one PVWA (``base_uri`` plus ``application``) and
    bundles the logon and request settings needed to talk to it.

    See Also:
        :func:`~pypas.config.load_profile`: Deserialise a profile by name.
        :func:`~pypas.config.save_profile`: Persist a profile to disk.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    base_uri: str = Field(description="PVWA scheme and host, e.g. https://pvwa.example.com")
    application: str = Field(
        default="PasswordVault", description="PVWA application path"
    )
    logon: LogonConfig = Field(default_factory=LogonConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("base_uri")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")
