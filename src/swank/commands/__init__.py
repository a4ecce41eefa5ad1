"""Built-in CLI sub-commands for swank.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~swank.commands.validate` -- ``validate``, ``paths`` and ``tags``,
  each running the pipeline over one document.
* :mod:`~swank.commands.config` -- view and modify global settings.
* :mod:`~swank.commands.cache` -- inspect and empty the schema cache.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config`` and ``cache``) or plain callback functions
registered directly on the root app.
"""
