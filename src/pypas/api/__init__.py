"""Vault commands.

Every command takes an open :class:`~pypas.client.PASSession` as its first
argument::

    from pypas.api import new_session, get_account, close_session

    session = new_session("https://pvwa.example.com", "admin", "secret")
    try:
        accounts = get_account(session, search="linux", safe_name="Unix")
    finally:
        close_session(session)
"""

from pypas.api.accounts import (
    add_account,
    get_account,
    get_account_activity,
    get_account_password,
    invoke_cpm_operation,
    remove_account,
    set_account,
)
from pypas.api.applications import (
    add_application,
    add_application_auth_method,
    get_application,
    get_application_auth_method,
    remove_application,
)
from pypas.api.groups import add_group_member, get_group, remove_group_member
from pypas.api.platforms import (
    export_platform,
    get_platform,
    get_target_platform,
    import_platform,
)
from pypas.api.psm import (
    get_psm_connection_parameter,
    get_psm_recording,
    get_psm_session,
    stop_psm_session,
)
from pypas.api.pta import (
    add_pta_rule,
    get_pta_event,
    get_pta_remediation,
    get_pta_rule,
    set_pta_remediation,
    set_pta_rule,
)
from pypas.api.safe_members import (
    add_safe_member,
    get_safe_member,
    remove_safe_member,
    set_safe_member,
)
from pypas.api.safes import add_safe, get_safe, remove_safe, set_safe
from pypas.api.server import (
    get_component_detail,
    get_component_summary,
    get_server,
    get_server_web_service,
)
from pypas.api.session import close_session, get_session_info, new_session
from pypas.api.users import (
    get_logged_on_user,
    get_user,
    new_user,
    remove_user,
    set_user,
    unblock_user,
)

__all__ = [
    "add_account",
    "add_application",
    "add_application_auth_method",
    "add_group_member",
    "add_pta_rule",
    "add_safe",
    "add_safe_member",
    "close_session",
    "export_platform",
    "get_account",
    "get_account_activity",
    "get_account_password",
    "get_application",
    "get_application_auth_method",
    "get_component_detail",
    "get_component_summary",
    "get_group",
    "get_logged_on_user",
    "get_platform",
    "get_psm_connection_parameter",
    "get_psm_recording",
    "get_psm_session",
    "get_pta_event",
    "get_pta_remediation",
    "get_pta_rule",
    "get_safe",
    "get_safe_member",
    "get_server",
    "get_server_web_service",
    "get_session_info",
    "get_target_platform",
    "get_user",
    "import_platform",
    "invoke_cpm_operation",
    "new_session",
    "new_user",
    "remove_account",
    "remove_application",
    "remove_group_member",
    "remove_safe",
    "remove_safe_member",
    "set_account",
    "set_pta_remediation",
    "set_pta_rule",
    "set_safe",
    "set_safe_member",
    "set_user",
    "stop_psm_session",
    "unblock_user",
]
