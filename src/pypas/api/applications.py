"""Application identity commands (classic ``PIMServices.svc/Applications``).

Applications are the AAM identities that retrieve credentials without a
user logon. Each one carries a list of authentication methods (path, hash,
OS user, machine address, certificate attributes) the provider checks
before releasing a password.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pypas.api._params import bound, choose, escape
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import Application, ApplicationAuthMethod, add_object_detail

APPLICATIONS_PATH = "/WebServices/PIMServices.svc/Applications"

AUTH_TYPES = (
    "path",
    "hash",
    "osUser",
    "machineAddress",
    "certificateserialnumber",
    "certificateattr",
)


def get_application(
    session: PASSession,
    app_id: Optional[str] = None,
    exact: bool = False,
    location: Optional[str] = None,
    include_sublocations: Optional[bool] = None,
) -> Union[Application, list[Application]]:
    """Return applications.

    With ``exact=True`` the vault is asked for ``app_id`` by name and one
    :class:`Application` comes back; otherwise ``app_id`` is a search term
    and a list is returned.
    """
    if exact:
        if not app_id:
            raise InvalidUsageError("An exact application lookup needs an app_id")
        result = session.invoke("GET", f"{APPLICATIONS_PATH}/{escape(app_id)}")
        return add_object_detail(unwrap(result, "application") or {}, Application)

    params = bound(
        AppID=app_id,
        Location=location,
        IncludeSublocations=include_sublocations,
    )
    result = session.invoke("GET", APPLICATIONS_PATH, params=params)
    return add_object_detail(unwrap(result, "application") or [], Application)


def _format_date(value: Union[datetime, str, None]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.strftime("%m/%d/%Y")
    return value


def add_application(
    session: PASSession,
    app_id: str,
    description: Optional[str] = None,
    location: str = "\\",
    access_permitted_from: Optional[int] = None,
    access_permitted_to: Optional[int] = None,
    expiration_date: Union[datetime, str, None] = None,
    disabled: Optional[bool] = None,
    business_owner_first_name: Optional[str] = None,
    business_owner_last_name: Optional[str] = None,
    business_owner_email: Optional[str] = None,
    business_owner_phone: Optional[str] = None,
) -> Application:
    """Create an application identity.

    Args:
        app_id: Application name.
        location: Vault location, ``\\`` for the root.
        access_permitted_from: First hour of the day (0-23) access is allowed.
        access_permitted_to: Last hour of the day (0-23) access is allowed.
        expiration_date: When the application stops working; sent as
            ``MM/DD/YYYY``.

    Raises:
        InvalidUsageError: If an access hour is outside 0-23.
    """
    for name, hour in (
        ("access_permitted_from", access_permitted_from),
        ("access_permitted_to", access_permitted_to),
    ):
        if hour is not None and not 0 <= hour <= 23:
            raise InvalidUsageError(f"{name} must be an hour between 0 and 23, got {hour}")

    application = bound(
        AppID=app_id,
        Description=description,
        Location=location,
        AccessPermittedFrom=access_permitted_from,
        AccessPermittedTo=access_permitted_to,
        ExpirationDate=_format_date(expiration_date),
        Disabled=disabled,
        BusinessOwnerFName=business_owner_first_name,
        BusinessOwnerLName=business_owner_last_name,
        BusinessOwnerEmail=business_owner_email,
        BusinessOwnerPhone=business_owner_phone,
    )
    session.invoke("POST", APPLICATIONS_PATH, json_body={"application": application})
    return add_object_detail(application, Application)


def remove_application(session: PASSession, app_id: str) -> None:
    """Delete an application identity."""
    session.invoke("DELETE", f"{APPLICATIONS_PATH}/{escape(app_id)}")


def get_application_auth_method(session: PASSession, app_id: str) -> list[ApplicationAuthMethod]:
    """Return the authentication methods of an application, tagged with ``AppID``."""
    result = session.invoke("GET", f"{APPLICATIONS_PATH}/{escape(app_id)}/Authentications")
    return add_object_detail(
        unwrap(result, "authentication") or [],
        ApplicationAuthMethod,
        AppID=app_id,
    )


def add_application_auth_method(
    session: PASSession,
    app_id: str,
    auth_type: str,
    auth_value: str,
    is_folder: Optional[bool] = None,
    allow_internal_scripts: Optional[bool] = None,
    subject: Optional[str] = None,
    issuer: Optional[str] = None,
    subject_alternative_name: Optional[str] = None,
    comment: Optional[str] = None,
) -> None:
    """Add an authentication method to an application.

    ``is_folder`` and ``allow_internal_scripts`` only apply to ``path``;
    ``subject``/``issuer``/``subject_alternative_name`` only to
    ``certificateattr``.

    Raises:
        InvalidUsageError: For an unknown ``auth_type`` or an option that
            does not apply to it.
    """
    canonical = choose(auth_type, AUTH_TYPES, "authentication type")
    if canonical != "path" and (is_folder is not None or allow_internal_scripts is not None):
        raise InvalidUsageError("is_folder and allow_internal_scripts only apply to 'path'")
    certificate_fields = bound(
        Subject=subject, Issuer=issuer, SubjectAlternativeName=subject_alternative_name
    )
    if canonical != "certificateattr" and certificate_fields:
        raise InvalidUsageError(
            "subject, issuer and subject_alternative_name only apply to 'certificateattr'"
        )

    authentication: dict[str, Any] = bound(
        AuthType=canonical,
        AuthValue=auth_value,
        IsFolder=is_folder,
        AllowInternalScripts=allow_internal_scripts,
        Comment=comment,
    )
    authentication.update(certificate_fields)
    session.invoke(
        "POST",
        f"{APPLICATIONS_PATH}/{escape(app_id)}/Authentications",
        json_body={"authentication": authentication},
    )
