"""Tests for application identity commands."""

from __future__ import annotations

from datetime import datetime

import pytest

from pypas.api.applications import (
    add_application,
    add_application_auth_method,
    get_application,
    get_application_auth_method,
    remove_application,
)
from pypas.exceptions import InvalidUsageError
from pypas.objects import Application, ApplicationAuthMethod

APPS = "/WebServices/PIMServices.svc/Applications"


class TestGetApplication:
    def test_search(self, vault, session) -> None:
        vault.add("GET", APPS, json={"application": [{"AppID": "Billing"}, {"AppID": "BillingQA"}]})

        apps = get_application(session, "Bill", location="\\Apps", include_sublocations=True)

        assert [a.AppID for a in apps] == ["Billing", "BillingQA"]
        assert dict(vault.last.url.params) == {
            "AppID": "Bill",
            "Location": "\\Apps",
            "IncludeSublocations": "true",
        }

    def test_exact(self, vault, session) -> None:
        vault.add("GET", f"{APPS}/Billing", json={"application": {"AppID": "Billing"}})
        app = get_application(session, "Billing", exact=True)
        assert isinstance(app, Application)
        assert app.AppID == "Billing"

    def test_exact_needs_app_id(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="needs an app_id"):
            get_application(session, exact=True)


class TestAddRemoveApplication:
    def test_add_body(self, vault, session) -> None:
        vault.add("POST", APPS, status=201)

        app = add_application(
            session,
            "Billing",
            description="Billing service",
            access_permitted_from=8,
            access_permitted_to=18,
            expiration_date=datetime(2030, 6, 15),
            business_owner_email="owner@example.com",
        )

        assert app.AppID == "Billing"
        assert vault.last_json() == {
            "application": {
                "AppID": "Billing",
                "Description": "Billing service",
                "Location": "\\",
                "AccessPermittedFrom": 8,
                "AccessPermittedTo": 18,
                "ExpirationDate": "06/15/2030",
                "BusinessOwnerEmail": "owner@example.com",
            }
        }

    @pytest.mark.parametrize("hour", [-1, 24])
    def test_access_hours_validated(self, vault, session, hour) -> None:
        with pytest.raises(InvalidUsageError, match="between 0 and 23"):
            add_application(session, "Billing", access_permitted_to=hour)
        assert vault.requests == []

    def test_remove(self, vault, session) -> None:
        vault.add("DELETE", f"{APPS}/Billing")
        remove_application(session, "Billing")
        assert vault.last.method == "DELETE"


class TestAuthMethods:
    def test_list_tagged_with_app(self, vault, session) -> None:
        vault.add(
            "GET",
            f"{APPS}/Billing/Authentications",
            json={"authentication": [{"AuthType": "path", "AuthValue": "/opt/billing"}]},
        )

        methods = get_application_auth_method(session, "Billing")

        assert isinstance(methods[0], ApplicationAuthMethod)
        assert methods[0].AppID == "Billing"

    def test_add_path(self, vault, session) -> None:
        vault.add("POST", f"{APPS}/Billing/Authentications")

        add_application_auth_method(
            session, "Billing", "PATH", "/opt/billing", is_folder=True, comment="binary dir"
        )

        assert vault.last_json() == {
            "authentication": {
                "AuthType": "path",
                "AuthValue": "/opt/billing",
                "IsFolder": True,
                "Comment": "binary dir",
            }
        }

    def test_add_certificate_attributes(self, vault, session) -> None:
        vault.add("POST", f"{APPS}/Billing/Authentications")

        add_application_auth_method(
            session, "Billing", "certificateattr", "", subject="CN=billing", issuer="CN=CA"
        )

        body = vault.last_json()["authentication"]
        assert body["Subject"] == "CN=billing"
        assert body["Issuer"] == "CN=CA"

    def test_path_options_rejected_for_hash(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="only apply to 'path'"):
            add_application_auth_method(session, "Billing", "hash", "abc", is_folder=True)

    def test_certificate_options_rejected_for_path(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="only apply to 'certificateattr'"):
            add_application_auth_method(session, "Billing", "path", "/x", subject="CN=x")

    def test_unknown_type(self, vault, session) -> None:
        with pytest.raises(InvalidUsageError, match="Invalid authentication type"):
            add_application_auth_method(session, "Billing", "fingerprint", "x")
