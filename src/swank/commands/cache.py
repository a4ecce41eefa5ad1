"""Cache commands -- inspect and empty the on-disk schema cache.

Provides the ``swank cache`` sub-command group. The cache only holds
official JSON schemas fetched by ``--validator schema`` or ``both`` runs,
and only when ``cache.enabled`` is set (see ``swank config set``).
"""

from __future__ import annotations

from typing import Optional

import typer

from swank.output import error, format_response, info, success, warning


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache():
    from swank.cache import SchemaCache
    from swank.config import get_cache_dir, resolve_config
    from swank.exceptions import ConfigError

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    return SchemaCache(get_cache_dir(), config.cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show whether the schema cache is enabled, its size and location.

    Example::

        swank cache stats
        swank --json cache stats
    """
    cache = _open_cache()
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(
        None, help="Schema URL to drop. Omit to empty the whole cache."
    ),
) -> None:
    """Drop one cached schema, or every cached schema.

    Emptying the whole cache asks for confirmation unless ``--force`` is
    active.

    Example::

        swank cache clear https://example.com/schemas/v2.0/schema.json
        swank --force cache clear
    """
    cache = _open_cache()
    try:
        if not cache.enabled:
            warning("Schema cache is disabled; nothing to clear.")
            return

        if url is not None:
            cache.invalidate(url)
            success(f"Removed cached schema for {url}")
            return

        force = ctx.obj.get("force", False) if ctx.obj else False
        if not force and not typer.confirm("Remove every cached schema?"):
            info("Cancelled.")
            return
        cache.clear()
        success("Schema cache cleared.")
    finally:
        cache.close()
