"""Typed result objects returned by the :mod:`pypas.api` commands.

The vault returns loosely shaped JSON whose fields vary by version, so
every model here keeps unknown fields verbatim (``extra="allow"``) and
exposes them as attributes::

    account = get_account(session, id="12_34")
    account.userName            # vendor field, kept as returned
    account.type_name           # "CyberArk.Vault.Account.V10"

The ``type_name`` class attribute is the result *tag*: it records which
command shape produced the object, which matters where one command can
return different shapes (classic vs v10 accounts, RDP file vs PSM gateway
connection).

:func:`add_object_detail` is the single conversion point from decoded
JSON to these models.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, TypeVar, Union, overload

from pydantic import BaseModel, ConfigDict


class PASObject(BaseModel):
    """Base class for all vault result objects."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type_name: ClassVar[str] = "CyberArk.Vault"

    def get(self, key: str, default: Any = None) -> Any:
        """Dict-style access to a field, declared or extra."""
        return self.model_dump().get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


T = TypeVar("T", bound=PASObject)


# --- Accounts ---


class Account(PASObject):
    """Account returned by the classic ``PIMServices.svc/Accounts`` search.

    ``Properties`` key/value pairs are flattened onto the object.
    """

    type_name: ClassVar[str] = "CyberArk.Vault.Account"

    AccountID: Optional[str] = None
    InternalProperties: dict[str, Any] = {}


class AccountV10(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Account.V10"

    id: Optional[str] = None


class AccountActivity(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Account.Activity"


class Credential(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Credential"

    Password: Optional[str] = None


# --- Safes ---


class Safe(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Safe"


class SafeMember(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Safe.Member"


# --- Users and groups ---


class User(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.User"


class LoggedOnUser(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.User.LoggedOn"


class Group(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Group"


class GroupMember(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Group.Member"


# --- Platforms ---


class Platform(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Platform"


class PlatformDetails(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Platform.Details"

    PlatformID: Optional[str] = None


class TargetPlatform(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Platform.Target"


class ImportedPlatform(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Platform.Imported"

    PlatformID: Optional[str] = None


# --- PTA ---


class PTARemediation(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.PTA.Remediation"


class PTAEvent(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.PTA.Event"


class PTARule(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.PTA.Rule"


# --- PSM ---


class PSMGatewayConnection(PASObject):
    """HTML5 gateway connection details returned for ``PSMGW`` connections."""

    type_name: ClassVar[str] = "CyberArk.Vault.PSM.Connection.PSMGW"

    PSMGWURL: Optional[str] = None
    PSMGWRequest: Optional[str] = None


class PSMSession(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.PSM.Session"


class PSMRecording(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.PSM.Recording"


# --- Server ---


class Server(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Server"

    ExternalVersion: Optional[str] = None
    InternalVersion: Optional[str] = None


class ServerWebService(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Server.WebService"


class ComponentSummary(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Component.Summary"


class ComponentDetail(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Component.Detail"


# --- Applications ---


class Application(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Application"


class ApplicationAuthMethod(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Application.AuthenticationMethod"


# --- Session ---


class SessionInfo(PASObject):
    type_name: ClassVar[str] = "CyberArk.Vault.Session"


@overload
def add_object_detail(data: list[Any], model: type[T], **properties: Any) -> list[T]: ...


@overload
def add_object_detail(data: dict[str, Any], model: type[T], **properties: Any) -> T: ...


@overload
def add_object_detail(data: None, model: type[T], **properties: Any) -> None: ...


def add_object_detail(
    data: Union[list[Any], dict[str, Any], None],
    model: type[T],
    **properties: Any,
) -> Union[list[T], T, None]:
    """Convert decoded JSON into *model* instances.

    Each object gets *properties* merged in (existing fields are not
    overwritten), which is how commands attach context the vault leaves
    out, e.g. the ``safeName`` of each safe member.

    Args:
        data: A dict, a list of dicts, or ``None``.
        model: The :class:`PASObject` subclass to build.
        **properties: Extra fields to add to every object.

    Returns:
        One model for a dict, a list of models for a list, ``None`` for
        ``None``.
    """
    if data is None:
        return None
    if isinstance(data, list):
        return [_build(item, model, properties) for item in data]
    return _build(data, model, properties)


def _build(item: Any, model: type[T], properties: dict[str, Any]) -> T:
    if isinstance(item, model):
        return item
    if not isinstance(item, dict):
        raise TypeError(f"Cannot build {model.__name__} from {type(item).__name__}")
    merged = {**properties, **item}
    return model.model_validate(merged)
