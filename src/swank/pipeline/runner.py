"""Sequential async runner for the validation pipeline.

:class:`Pipeline` awaits its stages strictly in order, threading one
:class:`~swank.pipeline.context.PipelineContext` per run.  A
:class:`~swank.exceptions.SwankError` from any stage ends the run: later
stages are skipped, the failure is logged and recorded on the result, and
nothing is raised to the caller.  Listeners hear
:attr:`~swank.pipeline.context.LifecycleEvent.LOADING_STARTED` and
:attr:`~swank.pipeline.context.LifecycleEvent.LOADING_FINISHED` around
every run, whatever its outcome.

Example::

    pipeline = Pipeline()
    pipeline.subscribe(lambda event: print(event.value))
    result = await pipeline.run("https://petstore.swagger.io/v2/swagger.json")
    for message in result.errors:
        print(message)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from swank.cache import SchemaCache
from swank.exceptions import SwankError
from swank.models import Options
from swank.parser import DocumentLoader, Fetcher, HttpxFetcher
from swank.parser.loader import Source
from swank.pipeline.context import (
    LifecycleEvent,
    PipelineContext,
    PipelineResult,
    PipelineServices,
)
from swank.pipeline.stages import DEFAULT_STAGES, Stage
from swank.validation import RuleEngine, SchemaValidator

logger = logging.getLogger(__name__)

Listener = Callable[[LifecycleEvent], None]


class Pipeline:
    """Load -> fetch schema -> validate -> derive tags, as ordered async stages.

    Args:
        loader: Document loader.  Defaults to one sharing *fetcher*.
        engine: Rule engine.  Defaults to the built-in rulesets.
        schema_validator: JSON-Schema adapter.
        fetcher: Async fetch capability for documents and schemas.
        schema_cache: Optional on-disk schema cache.
        stages: Override the stage sequence.
    """

    def __init__(
        self,
        loader: Optional[DocumentLoader] = None,
        engine: Optional[RuleEngine] = None,
        schema_validator: Optional[SchemaValidator] = None,
        fetcher: Optional[Fetcher] = None,
        schema_cache: Optional[SchemaCache] = None,
        stages: Optional[Iterable[Stage]] = None,
    ) -> None:
        fetcher = fetcher or HttpxFetcher()
        self.services = PipelineServices(
            loader=loader or DocumentLoader(fetcher),
            engine=engine or RuleEngine(),
            schema_validator=schema_validator or SchemaValidator(),
            fetcher=fetcher,
            schema_cache=schema_cache,
        )
        self.stages: tuple[Stage, ...] = tuple(stages) if stages is not None else DEFAULT_STAGES
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for lifecycle events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def run(self, source: Source, options: Optional[Options] = None) -> PipelineResult:
        """Run every stage for *source* and return the outcome.

        Args:
            source: URL, :class:`~pathlib.Path`, raw JSON/YAML text, or a
                mapping.
            options: Run options; defaults to :class:`~swank.models.Options`.

        Returns:
            A :class:`~swank.pipeline.context.PipelineResult`.  Check
            :attr:`~swank.pipeline.context.PipelineResult.ok` for
            infrastructure failures and ``errors`` for violations.
        """
        ctx = PipelineContext(
            source=source,
            options=options or Options(),
            services=self.services,
        )
        self._notify(LifecycleEvent.LOADING_STARTED)
        try:
            for stage in self.stages:
                ctx.stage = getattr(stage, "__name__", type(stage).__name__)
                logger.debug("Running stage %s", ctx.stage)
                ctx = await stage(ctx)
        except SwankError as exc:
            logger.error("Pipeline stage %s failed: %s", ctx.stage, exc)
            ctx.failure = exc
            ctx.errors.append(str(exc))
        finally:
            self._notify(LifecycleEvent.LOADING_FINISHED)
        return PipelineResult.from_context(ctx)

    def _notify(self, event: LifecycleEvent) -> None:
        """Deliver *event* to every listener; listener errors never reach the run."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.warning("Lifecycle listener failed on %s", event.value, exc_info=True)


async def run_pipeline(
    source: Source,
    options: Optional[Options] = None,
    **pipeline_kwargs: object,
) -> PipelineResult:
    """Build a :class:`Pipeline` from *pipeline_kwargs* and run it once."""
    return await Pipeline(**pipeline_kwargs).run(source, options)  # type: ignore[arg-type]
