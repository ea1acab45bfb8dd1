"""Privileged Threat Analytics (PTA) commands.

PTA is exposed through the PVWA under ``API/pta/API/``: automatic
remediation settings, security events and risky-activity rules.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional, Union

from pypas.api._params import bound, choose, escape, to_epoch
from pypas.client.session import PASSession
from pypas.exceptions import InvalidUsageError
from pypas.objects import PTAEvent, PTARemediation, PTARule, add_object_detail
from pypas.versioning import assert_version

SETTINGS_PATH = "/API/pta/API/Settings"
RULES_PATH = "/API/pta/API/Settings/RiskyActivities/"
EVENTS_PATH = "/API/pta/API/Events/"

RULE_CATEGORIES = ("KEYSTROKES", "SQL", "SCP", "KUBERNETES")
RULE_SEVERITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")
EVENT_STATUSES = ("OPEN", "CLOSED")


def get_pta_remediation(session: PASSession) -> PTARemediation:
    """Return the PTA automatic remediation settings. Requires 10.4."""
    assert_version(session, required="10.4", command="get_pta_remediation")
    result = session.invoke("GET", SETTINGS_PATH)
    return add_object_detail(_remediation(result), PTARemediation)


def _remediation(result: Any) -> dict[str, Any]:
    if isinstance(result, dict):
        return result.get("automaticRemediation") or {}
    return {}


def set_pta_remediation(
    session: PASSession,
    change_password_on_suspected_credentials_theft: Optional[bool] = None,
    change_password_on_over_pass_the_hash: Optional[bool] = None,
    slow_reconcile_on_suspicious_password_change: Optional[bool] = None,
    add_to_pending_on_unmanaged_privileged_account: Optional[bool] = None,
) -> PTARemediation:
    """Update PTA automatic remediation. Requires 10.4.

    Only the flags that are passed are sent; the others keep their current
    value on the vault.

    Raises:
        InvalidUsageError: If no flag is passed.
    """
    assert_version(session, required="10.4", command="set_pta_remediation")
    settings = bound(
        changePassword_SuspectedCredentialsTheft=change_password_on_suspected_credentials_theft,
        changePassword_OverPassTheHash=change_password_on_over_pass_the_hash,
        slowReconcile_SuspiciousPasswordChange=slow_reconcile_on_suspicious_password_change,
        add_PendingAccount_UnmanagedPrivilegedAccount=add_to_pending_on_unmanaged_privileged_account,
    )
    if not settings:
        raise InvalidUsageError("set_pta_remediation needs at least one remediation flag")

    result = session.invoke(
        "PATCH", SETTINGS_PATH, json_body={"automaticRemediation": settings}
    )
    return add_object_detail(_remediation(result), PTARemediation)


def get_pta_event(
    session: PASSession,
    last_updated_event_date: Optional[datetime] = None,
    status: Optional[str] = None,
    account_id: Optional[str] = None,
) -> list[PTAEvent]:
    """Return PTA security events. Requires 11.3.

    Args:
        last_updated_event_date: Only events updated since this time (sent
            as the ``lastUpdatedEventDate`` header in epoch milliseconds).
        status: ``OPEN`` or ``CLOSED``.
        account_id: Only events for this account (12.2+).
    """
    assert_version(session, required="11.3", command="get_pta_event")
    if account_id is not None:
        assert_version(session, required="12.2", command="get_pta_event with account_id")

    canonical = choose(status, EVENT_STATUSES, "event status")
    clauses = []
    if canonical:
        clauses.append(f"status eq {canonical}")
    if account_id:
        clauses.append(f"accountId eq {account_id}")
    headers = None
    if last_updated_event_date is not None:
        headers = {"lastUpdatedEventDate": str(to_epoch(last_updated_event_date, milliseconds=True))}

    result = session.invoke(
        "GET",
        EVENTS_PATH,
        params=bound(filter=" AND ".join(clauses) or None),
        headers=headers,
    )
    return add_object_detail(result if isinstance(result, list) else [], PTAEvent)


def get_pta_rule(session: PASSession) -> list[PTARule]:
    """Return the risky-activity rules. Requires 10.4."""
    assert_version(session, required="10.4", command="get_pta_rule")
    result = session.invoke("GET", RULES_PATH)
    return add_object_detail(result if isinstance(result, list) else [], PTARule)


def _rule_body(
    category: str,
    activities: Union[str, Iterable[str]],
    severity: str,
    description: Optional[str],
    status: Optional[bool],
) -> dict[str, Any]:
    if not isinstance(activities, str):
        activities = ";".join(activities)
    return bound(
        category=choose(category, RULE_CATEGORIES, "rule category"),
        regex=activities,
        severity=choose(severity, RULE_SEVERITIES, "rule severity"),
        description=description,
        active=status,
    )


def add_pta_rule(
    session: PASSession,
    category: str,
    activities: Union[str, Iterable[str]],
    severity: str,
    description: Optional[str] = None,
    status: Optional[bool] = None,
) -> list[PTARule]:
    """Add a risky-activity rule. Requires 10.4.

    The vault answers with the full, updated rule list.

    Raises:
        InvalidUsageError: For an unknown category or severity.
    """
    assert_version(session, required="10.4", command="add_pta_rule")
    body = _rule_body(category, activities, severity, description, status)
    result = session.invoke("POST", RULES_PATH, json_body=body)
    return add_object_detail(result if isinstance(result, list) else [], PTARule)


def set_pta_rule(
    session: PASSession,
    id: int,
    category: str,
    activities: Union[str, Iterable[str]],
    severity: str,
    description: Optional[str] = None,
    status: Optional[bool] = None,
) -> list[PTARule]:
    """Replace a risky-activity rule. Requires 10.4."""
    assert_version(session, required="10.4", command="set_pta_rule")
    body = _rule_body(category, activities, severity, description, status)
    result = session.invoke("PUT", f"{RULES_PATH}{escape(id)}", json_body=body)
    return add_object_detail(result if isinstance(result, list) else [], PTARule)
