"""Vault user commands (``api/Users``, 10.9+)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional, Union

from pypas.api._params import bound, build_filter, escape, to_epoch
from pypas.client.response import unwrap
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import LoggedOnUser, User, add_object_detail
from pypas.versioning import assert_version


def get_user(
    session: PASSession,
    id: Optional[int] = None,
    search: Optional[str] = None,
    user_type: Optional[str] = None,
    component_user: Optional[bool] = None,
    extended_details: Optional[bool] = None,
) -> Union[User, list[User]]:
    """Return one user by numeric ID, or the users matching the filters. Requires 10.9."""
    assert_version(session, required="10.9", command="get_user")
    if id is not None:
        result = session.invoke("GET", f"/api/Users/{escape(id)}")
        return add_object_detail(result, User)

    params = bound(
        search=search,
        filter=build_filter(f"userType eq {user_type}" if user_type else None),
        componentUser=component_user,
        ExtendedDetails=extended_details,
    )
    result = session.invoke("GET", "/api/Users", params=params)
    return add_object_detail(unwrap(result, "Users") or [], User)


def get_logged_on_user(session: PASSession) -> LoggedOnUser:
    """Return the user owning the session token."""
    result = session.invoke("GET", "/WebServices/PIMServices.svc/User")
    return add_object_detail(result, LoggedOnUser)


def new_user(
    session: PASSession,
    username: str,
    initial_password: Optional[str] = None,
    user_type: Optional[str] = None,
    authentication_method: Optional[Iterable[str]] = None,
    location: Optional[str] = None,
    expiry_date: Optional[datetime] = None,
    enable_user: Optional[bool] = None,
    change_pass_on_next_logon: Optional[bool] = None,
    password_never_expires: Optional[bool] = None,
    vault_authorization: Optional[Iterable[str]] = None,
    description: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """Create a vault user. Requires 10.9."""
    assert_version(session, required="10.9", command="new_user")
    body: dict[str, Any] = bound(
        username=username,
        initialPassword=initial_password,
        userType=user_type,
        authenticationMethod=list(authentication_method) if authentication_method else None,
        location=location,
        expiryDate=to_epoch(expiry_date),
        enableUser=enable_user,
        changePassOnNextLogon=change_pass_on_next_logon,
        passwordNeverExpires=password_never_expires,
        vaultAuthorization=list(vault_authorization) if vault_authorization else None,
        description=description,
    )
    personal = bound(FirstName=first_name, LastName=last_name)
    if personal:
        body["personalDetails"] = personal
    if email is not None:
        body["internet"] = {"businessEmail": email}

    result = session.invoke("POST", "/api/Users", json_body=body)
    return add_object_detail(result, User)


def set_user(session: PASSession, id: int, **fields: Any) -> User:
    """Replace a user's properties (``PUT api/Users/{id}``). Requires 10.9.

    ``fields`` are sent verbatim as the vault property names (``username``,
    ``enableUser``, ``personalDetails``, ...). ``username`` is required by
    the endpoint.
    """
    assert_version(session, required="10.9", command="set_user")
    if "username" not in fields:
        raise InvalidUsageError("set_user requires the 'username' field")
    result = session.invoke("PUT", f"/api/Users/{escape(id)}", json_body=dict(fields))
    return add_object_detail(result, User)


def remove_user(session: PASSession, id: int) -> None:
    """Delete a vault user. Requires 10.9."""
    assert_version(session, required="10.9", command="remove_user")
    session.invoke("DELETE", f"/api/Users/{escape(id)}")


def unblock_user(session: PASSession, id: int) -> None:
    """Activate a suspended user. Requires 10.10."""
    assert_version(session, required="10.10", command="unblock_user")
    session.invoke("POST", f"/api/Users/{escape(id)}/Activate")
