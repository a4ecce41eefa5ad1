"""Document commands -- validate a document and inspect its normalised form.

Provides the ``swank validate``, ``swank paths`` and ``swank tags``
commands. Each one resolves the effective configuration, runs the full
pipeline (load, optional schema fetch, validation, normalisation) over the
given source, and presents one facet of the result.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import typer

from swank.exit_codes import EXIT_INVALID_USAGE, EXIT_VALIDATION_FAILED
from swank.models import Options, OrderPaths, ValidatorMode
from swank.output import (
    debug,
    error,
    format_response,
    get_output,
    print_table,
    print_violations,
    progress,
    success,
    warning,
)
from swank.pipeline import LifecycleEvent, PipelineResult


_SOURCE_HELP = "Document URL, local file path, or '-' to read stdin."


def _read_source(source: str) -> Any:
    """Turn the SOURCE argument into something the document loader accepts."""
    from swank.parser.loader import is_url

    if is_url(source):
        return source
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        error(f"No such file: {source}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    return path


def _progress_listener(source: str) -> Callable[[LifecycleEvent], None]:
    def _listener(event: LifecycleEvent) -> None:
        if event == LifecycleEvent.LOADING_STARTED:
            progress(f"Loading {source}...")
        else:
            debug(f"Finished processing {source}")

    return _listener


def _run(
    ctx: typer.Context,
    source: str,
    order_paths: Optional[OrderPaths] = None,
    validator: Optional[ValidatorMode] = None,
    schema_base_url: Optional[str] = None,
    rules: Optional[Path] = None,
) -> tuple[PipelineResult, Options]:
    """Resolve configuration, build a pipeline, and run it over *source*.

    Returns:
        The pipeline result and the effective run options.

    Raises:
        typer.Exit: With the failure's exit code when configuration is
            invalid or a pipeline stage fails.
    """
    from swank.cache import SchemaCache
    from swank.config import get_cache_dir, resolve_config
    from swank.exceptions import SwankError
    from swank.parser import HttpxFetcher
    from swank.pipeline import Pipeline
    from swank.validation import RuleEngine, default_registry

    document_source = _read_source(source)
    cli_format = ctx.obj.get("format") if ctx.obj else None
    cache: Optional[SchemaCache] = None
    try:
        config = resolve_config(
            cli_order_paths=order_paths.value if order_paths else None,
            cli_validator=validator.value if validator else None,
            cli_schema_base_url=schema_base_url,
            cli_format=cli_format,
        )
        registry = default_registry()
        if rules is not None:
            registry.load_file(rules)
            debug(f"Loaded ruleset file {rules}; versions: {', '.join(registry.versions())}")
        if config.cache.enabled:
            cache = SchemaCache(get_cache_dir(), config.cache)
    except SwankError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    pipeline = Pipeline(
        engine=RuleEngine(registry),
        fetcher=HttpxFetcher(timeout=float(config.schemas.timeout)),
        schema_cache=cache,
    )
    pipeline.subscribe(_progress_listener(source))
    options = config.to_options()
    try:
        result = asyncio.run(pipeline.run(document_source, options))
    finally:
        if cache is not None:
            cache.close()

    if result.failure is not None:
        error(str(result.failure))
        raise typer.Exit(code=result.failure.exit_code)
    return result, options


def _path_rows(paths: dict[str, Any], order: OrderPaths) -> list[list[str]]:
    """Flatten grouped ``paths`` into ``[group, route, methods]`` rows."""
    from swank.normalizer import HTTP_METHODS

    rows: list[list[str]] = []
    if order == OrderPaths.ROUTE:
        for route, item in paths.items():
            methods = [m for m in HTTP_METHODS if isinstance(item, dict) and m in item]
            rows.append([route, route, ", ".join(m.upper() for m in methods)])
        return rows

    for group, routes in paths.items():
        for route, operations in routes.items():
            rows.append([group, route, ", ".join(m.upper() for m in operations)])
    return rows


# ------------------------------------------------------------------ #
# Shared options
# ------------------------------------------------------------------ #

_VALIDATOR_OPTION = typer.Option(
    None, "--validator", help="Validators to apply: rules, schema, or both."
)
_SCHEMA_URL_OPTION = typer.Option(
    None, "--schema-base-url", help="Base URL of the official JSON schemas."
)
_RULES_OPTION = typer.Option(
    None,
    "--rules",
    help="Extra ruleset file (JSON/YAML with 'version' and 'rules').",
    exists=True,
    dir_okay=False,
)


def validate_command(
    ctx: typer.Context,
    source: str = typer.Argument(help=_SOURCE_HELP),
    validator: Optional[ValidatorMode] = _VALIDATOR_OPTION,
    schema_base_url: Optional[str] = _SCHEMA_URL_OPTION,
    rules: Optional[Path] = _RULES_OPTION,
) -> None:
    """Validate a Swagger/OpenAPI document.

    Every rule and schema violation is printed, one per line, on stdout.
    With ``--json`` a single report object is printed instead.

    Raises:
        typer.Exit: With code 8 when violations were reported, or the
            failure's own code when loading or validation could not finish.

    Example::

        swank validate https://petstore.swagger.io/v2/swagger.json
        swank --json validate --validator both petstore.yaml
    """
    result, _ = _run(
        ctx, source, validator=validator, schema_base_url=schema_base_url, rules=rules
    )

    if get_output().is_json:
        format_response(
            {
                "source": source,
                "version": result.version,
                "valid": result.valid,
                "errors": result.errors,
            }
        )
    else:
        print_violations(result.errors)

    if result.errors:
        warning(f"{len(result.errors)} validation error(s) in {source}")
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)
    success(f"{source} is a valid {result.version} document.")


def paths_command(
    ctx: typer.Context,
    source: str = typer.Argument(help=_SOURCE_HELP),
    order_paths: Optional[OrderPaths] = typer.Option(
        None, "--order-paths", help="Group paths by route, method, or tag."
    ),
    validator: Optional[ValidatorMode] = _VALIDATOR_OPTION,
    schema_base_url: Optional[str] = _SCHEMA_URL_OPTION,
    rules: Optional[Path] = _RULES_OPTION,
) -> None:
    """Show the document's paths grouped by route, method, or tag.

    Validation still runs; violations are summarised on stderr but do not
    change the exit code.

    Example::

        swank paths petstore.yaml
        swank --json paths --order-paths method petstore.yaml
    """
    result, options = _run(
        ctx,
        source,
        order_paths=order_paths,
        validator=validator,
        schema_base_url=schema_base_url,
        rules=rules,
    )
    if result.errors:
        warning(f"{len(result.errors)} validation error(s); run 'swank validate' for details.")

    if get_output().is_json:
        format_response(result.paths)
        return

    print_table(
        ["Group", "Route", "Methods"],
        _path_rows(result.paths, options.order_paths),
        title=f"Paths by {options.order_paths.value}",
    )


def tags_command(
    ctx: typer.Context,
    source: str = typer.Argument(help=_SOURCE_HELP),
    validator: Optional[ValidatorMode] = _VALIDATOR_OPTION,
    rules: Optional[Path] = _RULES_OPTION,
) -> None:
    """List the document's tags (declared, or inferred from operations).

    Example::

        swank tags petstore.yaml
    """
    result, _ = _run(ctx, source, validator=validator, rules=rules)
    if result.errors:
        warning(f"{len(result.errors)} validation error(s); run 'swank validate' for details.")
    format_response(result.tags)
