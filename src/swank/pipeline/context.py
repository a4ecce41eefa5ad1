"""State threaded through a pipeline run.

This module provides the carrier types of the orchestrator:

* :class:`PipelineServices` -- the collaborators stages call into (loader,
  rule engine, schema validator, fetcher, optional schema cache).
* :class:`PipelineContext` -- a mutable dataclass each stage receives and
  returns.  Fields are progressively filled as the run advances.
* :class:`PipelineResult` -- the immutable outcome handed back to callers.
* :class:`LifecycleEvent` -- notifications broadcast to listeners.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from swank.cache import SchemaCache
from swank.exceptions import SwankError
from swank.models import Options, RuleResult, SchemaViolation
from swank.parser import DocumentLoader, Fetcher
from swank.validation import RuleEngine, SchemaValidator


class LifecycleEvent(str, enum.Enum):
    """Notifications sent at the start and end of every run."""

    LOADING_STARTED = "loading-started"
    LOADING_FINISHED = "loading-finished"


@dataclass(frozen=True)
class PipelineServices:
    """Collaborators shared by the stages of a pipeline.

    They hold no per-run state, so one set can serve concurrent runs.
    """

    loader: DocumentLoader
    engine: RuleEngine
    schema_validator: SchemaValidator
    fetcher: Fetcher
    schema_cache: Optional[SchemaCache] = None


@dataclass
class PipelineContext:
    """Mutable context object threaded through the stage chain.

    Attributes:
        source: The raw input (URL, path, text, or mapping).
        options: Run options.
        services: Collaborators available to the stages.
        document: The loaded document (set by the load stage).
        version: The document's declared spec version.
        schema_url: URL of the JSON schema (schema validation only).
        schema: The fetched schema document (schema validation only).
        errors: Readable rule and schema violations, in report order.
        results: Per-path rule results from the rule engine.
        violations: Structured schema violations.
        tags: Derived tag names.
        paths: The regrouped ``paths`` map.
        stage: Name of the stage currently running.
        failure: The error that ended the run, if any.
    """

    source: Any
    options: Options
    services: PipelineServices
    document: Optional[dict[str, Any]] = None
    version: Optional[str] = None
    schema_url: Optional[str] = None
    schema: Optional[dict[str, Any]] = None
    errors: list[str] = field(default_factory=list)
    results: dict[str, RuleResult] = field(default_factory=dict)
    violations: list[SchemaViolation] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    paths: dict[str, Any] = field(default_factory=dict)
    stage: Optional[str] = None
    failure: Optional[SwankError] = None


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run.

    A failed run keeps whatever earlier stages produced (``document`` may be
    ``None``) and carries the failure message as the last entry of
    ``errors``, so an empty error list always means a valid document.
    """

    document: Optional[dict[str, Any]]
    version: Optional[str]
    tags: list[str]
    paths: dict[str, Any]
    errors: list[str]
    results: dict[str, RuleResult]
    violations: list[SchemaViolation]
    failure: Optional[SwankError] = None
    failed_stage: Optional[str] = None

    @property
    def ok(self) -> bool:
        """``True`` when every stage completed."""
        return self.failure is None

    @property
    def valid(self) -> bool:
        """``True`` when every stage completed and nothing was reported."""
        return self.ok and not self.errors

    @classmethod
    def from_context(cls, ctx: PipelineContext) -> PipelineResult:
        return cls(
            document=ctx.document,
            version=ctx.version,
            tags=list(ctx.tags),
            paths=ctx.paths,
            errors=list(ctx.errors),
            results=dict(ctx.results),
            violations=list(ctx.violations),
            failure=ctx.failure,
            failed_stage=ctx.stage if ctx.failure is not None else None,
        )
