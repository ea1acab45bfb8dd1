"""pypas -- Python command facade for the Privileged Access Security REST API.

Each vault REST operation (get account, import platform, get PTA
remediation settings, get PSM connection parameters, ...) is exposed as a
plain function taking a :class:`~pypas.client.PASSession` as its first
argument. Responses are reshaped into typed :mod:`pypas.objects` models.

Typical workflow::

    from pypas.api import new_session, get_account

    with new_session("https://pvwa.example.com", username, password) as session:
        for account in get_account(session, safe_name="Windows"):
            print(account.id, account.userName)

A Typer CLI (``pypas``) wraps the most common commands.

Modules:
    api: The command functions, one module per vault area.
    client: Vault session, shared HTTP invoker and pagination.
    auth: Logon methods and the persisted session store.
    objects: Typed result models.
    versioning: Vault version requirement checks.
    models: Pydantic configuration models.
    config: XDG-aware configuration and profile management.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
