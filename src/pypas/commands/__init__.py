"""Built-in CLI sub-commands for pypas.

This package groups the Typer sub-command modules that form the CLI's
command tree:

* :mod:`~pypas.commands.profile` -- manage vault profiles.
* :mod:`~pypas.commands.config` -- view and modify global settings.
* :mod:`~pypas.commands.session` -- ``logon``, ``logoff`` and ``session``.
* :mod:`~pypas.commands.account`, :mod:`~pypas.commands.safe`,
  :mod:`~pypas.commands.platform`, :mod:`~pypas.commands.pta`,
  :mod:`~pypas.commands.psm`, :mod:`~pypas.commands.server`,
  :mod:`~pypas.commands.user` and :mod:`~pypas.commands.application` --
  one group per area of the vault REST API.

Multi-command groups export a :class:`typer.Typer` sub-application; the
session commands are plain callbacks registered on the root app.
"""
