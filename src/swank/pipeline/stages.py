"""The built-in pipeline stages.

Each stage is ``async def stage(ctx) -> ctx``: it reads what earlier stages
left in the :class:`~swank.pipeline.context.PipelineContext`, adds its own
payload, and returns the context.  Only :func:`load_document` and
:func:`fetch_schema` suspend (on network I/O); validation and grouping are
plain synchronous work.

Stages raise :class:`~swank.exceptions.SwankError` for infrastructure
failures.  Rule and schema violations are appended to ``ctx.errors``
instead.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from swank.models import ValidatorMode
from swank.normalizer import normalize
from swank.parser import parse_content
from swank.pipeline.context import PipelineContext
from swank.validation import declared_version, schema_url_for

logger = logging.getLogger(__name__)

Stage = Callable[[PipelineContext], Awaitable[PipelineContext]]

_RULE_MODES = (ValidatorMode.RULES, ValidatorMode.BOTH)
_SCHEMA_MODES = (ValidatorMode.SCHEMA, ValidatorMode.BOTH)


async def load_document(ctx: PipelineContext) -> PipelineContext:
    """Load the input into a document and record its declared version."""
    ctx.document = await ctx.services.loader.load(ctx.source)
    ctx.version = declared_version(ctx.document)
    return ctx


async def fetch_schema(ctx: PipelineContext) -> PipelineContext:
    """Fetch the JSON schema for the document's version (schema modes only)."""
    if ctx.options.validator not in _SCHEMA_MODES:
        return ctx

    url = schema_url_for(ctx.version or "", ctx.options.schema_base_url)
    ctx.schema_url = url
    cache = ctx.services.schema_cache
    cached = cache.get(url) if cache is not None else None
    if cached is not None:
        logger.debug("Schema cache hit for %s", url)
        ctx.schema = cached
        return ctx

    text = await ctx.services.fetcher(url)
    ctx.schema = parse_content(text, hint="json")
    if cache is not None:
        cache.set(url, ctx.schema)
    return ctx


async def validate_document(ctx: PipelineContext) -> PipelineContext:
    """Apply the rule engine and/or the schema validator."""
    mode = ctx.options.validator
    if mode in _RULE_MODES:
        report = ctx.services.engine.validate(ctx.document)
        ctx.results = report.results
        ctx.errors.extend(report.errors)
    if mode in _SCHEMA_MODES:
        ctx.violations = ctx.services.schema_validator.validate(
            ctx.document, ctx.schema_url, ctx.schema
        )
        ctx.errors.extend(str(violation) for violation in ctx.violations)
    if ctx.errors:
        logger.info("%d validation error(s) reported", len(ctx.errors))
    return ctx


async def normalize_paths(ctx: PipelineContext) -> PipelineContext:
    """Derive the tag list and regroup ``paths`` per ``options.order_paths``."""
    normalized = normalize(ctx.document, ctx.options)
    ctx.tags = normalized.tags
    ctx.paths = normalized.paths
    return ctx


DEFAULT_STAGES: tuple[Stage, ...] = (
    load_document,
    fetch_schema,
    validate_document,
    normalize_paths,
)
