"""The validation-and-normalisation pipeline.

Typical usage::

    from swank.models import Options
    from swank.pipeline import run_pipeline

    result = await run_pipeline(document, Options(order_paths="method"))
    if not result.valid:
        print("\\n".join(result.errors))

Sub-modules:

* :mod:`~swank.pipeline.context` -- context, result, and lifecycle types.
* :mod:`~swank.pipeline.stages` -- the four built-in stages.
* :mod:`~swank.pipeline.runner` -- the sequential runner.
"""

from swank.pipeline.context import (
    LifecycleEvent,
    PipelineContext,
    PipelineResult,
    PipelineServices,
)
from swank.pipeline.runner import Pipeline, run_pipeline
from swank.pipeline.stages import DEFAULT_STAGES

__all__ = [
    "DEFAULT_STAGES",
    "LifecycleEvent",
    "Pipeline",
    "PipelineContext",
    "PipelineResult",
    "PipelineServices",
    "run_pipeline",
]
