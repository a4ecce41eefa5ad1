"""Tests for swank.pipeline -- the async stage runner."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import pytest

from swank.cache import SchemaCache
from swank.exceptions import FetchError, ParseError, UnsupportedVersionError, ValidatorUnavailableError
from swank.models import CacheConfig, Options, OrderPaths, ValidatorMode
from swank.parser import HttpxFetcher
from swank.pipeline import DEFAULT_STAGES, LifecycleEvent, Pipeline, PipelineContext, run_pipeline
from swank.pipeline.stages import load_document, normalize_paths
from swank.validation import RuleEngine, RulesetRegistry, SchemaValidator

BASE_URL = "https://schemas.example.com"
SCHEMA_URL = f"{BASE_URL}/v2.0/schema.json"

SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["swagger", "info", "paths"],
    "properties": {"host": {"type": "string"}},
}


def _pipeline(routes: dict[str, Any], transport_factory: Any, **kwargs: Any) -> Pipeline:
    return Pipeline(fetcher=HttpxFetcher(transport=transport_factory(routes)), **kwargs)


def _schema_options(mode: ValidatorMode = ValidatorMode.SCHEMA) -> Options:
    return Options(validator=mode, schema_base_url=BASE_URL)


# ---------------------------------------------------------------------------
# Successful runs
# ---------------------------------------------------------------------------


class TestPipelineRun:
    """Test end-to-end runs over in-memory and fetched documents."""

    @pytest.mark.asyncio
    async def test_valid_document(self, petstore_20_raw: dict[str, Any]) -> None:
        result = await Pipeline().run(petstore_20_raw)
        assert result.ok
        assert result.valid
        assert result.version == "2.0"
        assert result.tags == ["pet", "store", "user"]
        assert set(result.paths) == {"pet", "store", "user", "untagged"}
        assert result.results["swagger"].is_valid

    @pytest.mark.asyncio
    async def test_missing_info_version(self) -> None:
        result = await Pipeline().run({"swagger": "2.0", "info": {"title": "X"}, "paths": {}})
        assert result.ok
        assert not result.valid
        assert len(result.errors) == 1
        assert "info.version" in result.errors[0]

    @pytest.mark.asyncio
    async def test_violations_do_not_stop_normalisation(self, scenario_paths: dict[str, Any]) -> None:
        document = {"swagger": "1.0", "info": {"title": "X", "version": "1"}, "paths": scenario_paths}
        result = await Pipeline().run(document, Options(order_paths=OrderPaths.TAG))
        assert len(result.errors) == 1
        assert "'swagger'" in result.errors[0]
        assert result.paths == {
            "x": {"/a": {"get": {"tags": ["x"], "operationId": "getA"}}},
            "untagged": {"/b": {"post": {}}},
        }

    @pytest.mark.asyncio
    async def test_method_order(self, minimal_swagger: dict[str, Any], scenario_paths: dict[str, Any]) -> None:
        minimal_swagger["paths"] = scenario_paths
        result = await Pipeline().run(minimal_swagger, Options(order_paths="method"))
        assert result.paths["get"] == {"/a": {"get": {"tags": ["x"], "operationId": "getA"}}}
        assert result.paths["post"] == {"/b": {"post": {}}}
        assert result.paths["patch"] == {}

    @pytest.mark.asyncio
    async def test_loads_from_url(
        self, transport_factory: Any, petstore_20_raw: dict[str, Any]
    ) -> None:
        pipeline = _pipeline({"https://api.example.com/swagger.json": petstore_20_raw}, transport_factory)
        result = await pipeline.run("https://api.example.com/swagger.json")
        assert result.valid
        assert result.document == petstore_20_raw

    @pytest.mark.asyncio
    async def test_loads_yaml_file(self, petstore_20_yaml_path: Path) -> None:
        result = await run_pipeline(petstore_20_yaml_path)
        assert result.valid
        assert result.tags == ["pet", "store"]
        assert result.document["tags"] == [{"name": "pet"}, {"name": "store"}]

    @pytest.mark.asyncio
    async def test_custom_stages(self, minimal_swagger: dict[str, Any]) -> None:
        result = await Pipeline(stages=[load_document, normalize_paths]).run(minimal_swagger)
        assert result.valid
        assert result.results == {}

    @pytest.mark.asyncio
    async def test_stages_run_in_order(self, minimal_swagger: dict[str, Any]) -> None:
        order: list[str] = []

        def recording(stage: Any) -> Any:
            async def _stage(ctx: PipelineContext) -> PipelineContext:
                order.append(stage.__name__)
                await asyncio.sleep(0)
                return await stage(ctx)

            _stage.__name__ = stage.__name__
            return _stage

        await Pipeline(stages=[recording(s) for s in DEFAULT_STAGES]).run(minimal_swagger)
        assert order == ["load_document", "fetch_schema", "validate_document", "normalize_paths"]

    @pytest.mark.asyncio
    async def test_concurrent_runs_are_isolated(
        self, minimal_swagger: dict[str, Any], petstore_20_raw: dict[str, Any]
    ) -> None:
        pipeline = Pipeline()
        broken = {"swagger": "2.0", "info": {"title": "X"}, "paths": {}}
        results = await asyncio.gather(
            pipeline.run(minimal_swagger),
            pipeline.run(broken),
            pipeline.run(petstore_20_raw),
        )
        assert [len(r.errors) for r in results] == [0, 1, 0]
        assert results[2].tags == ["pet", "store", "user"]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestPipelineFailures:
    """A stage failure ends the run without raising."""

    @pytest.mark.asyncio
    async def test_parse_error_short_circuits(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="swank.pipeline.runner"):
            result = await Pipeline().run('{"swagger": "2.0",')
        assert isinstance(result.failure, ParseError)
        assert result.failed_stage == "load_document"
        assert not result.ok
        assert not result.valid
        assert result.document is None
        assert result.paths == {}
        assert result.errors == [str(result.failure)]
        assert "in JSON" not in result.errors[0]
        assert "load_document" in caplog.text

    @pytest.mark.asyncio
    async def test_fetch_error(self, transport_factory: Any) -> None:
        pipeline = _pipeline({"https://api.example.com/swagger.json": 503}, transport_factory)
        result = await pipeline.run("https://api.example.com/swagger.json")
        assert isinstance(result.failure, FetchError)
        assert result.failure.status_code == 503

    @pytest.mark.asyncio
    async def test_malformed_url_fails_the_run(self) -> None:
        events: list[LifecycleEvent] = []
        pipeline = Pipeline()
        pipeline.subscribe(events.append)
        result = await pipeline.run("http://[::1/swagger.json")
        assert isinstance(result.failure, FetchError)
        assert result.failed_stage == "load_document"
        assert not result.valid
        assert events == [LifecycleEvent.LOADING_STARTED, LifecycleEvent.LOADING_FINISHED]

    @pytest.mark.asyncio
    async def test_unsupported_version_is_not_valid(self) -> None:
        result = await Pipeline().run({"openapi": "3.0.3", "info": {}, "paths": {}})
        assert isinstance(result.failure, UnsupportedVersionError)
        assert result.failed_stage == "validate_document"
        assert not result.valid
        assert result.errors
        assert result.paths == {}

    @pytest.mark.asyncio
    async def test_later_stages_skipped(self, minimal_swagger: dict[str, Any]) -> None:
        calls: list[str] = []

        async def boom(ctx: PipelineContext) -> PipelineContext:
            raise ParseError("boom")

        async def never(ctx: PipelineContext) -> PipelineContext:
            calls.append("never")
            return ctx

        result = await Pipeline(stages=[load_document, boom, never]).run(minimal_swagger)
        assert calls == []
        assert result.failed_stage == "boom"
        assert result.document == minimal_swagger

    @pytest.mark.asyncio
    async def test_non_swank_errors_propagate(self, minimal_swagger: dict[str, Any]) -> None:
        async def bug(ctx: PipelineContext) -> PipelineContext:
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await Pipeline(stages=[bug]).run(minimal_swagger)


# ---------------------------------------------------------------------------
# Lifecycle events
# ---------------------------------------------------------------------------


class TestLifecycle:
    """Listeners hear start and finish whatever the outcome."""

    @pytest.mark.asyncio
    async def test_events_on_success(self, minimal_swagger: dict[str, Any]) -> None:
        events: list[LifecycleEvent] = []
        pipeline = Pipeline()
        pipeline.subscribe(events.append)
        await pipeline.run(minimal_swagger)
        assert events == [LifecycleEvent.LOADING_STARTED, LifecycleEvent.LOADING_FINISHED]

    @pytest.mark.asyncio
    async def test_events_on_failure(self) -> None:
        events: list[str] = []
        pipeline = Pipeline()
        pipeline.subscribe(lambda event: events.append(event.value))
        await pipeline.run("not: [valid")
        assert events == ["loading-started", "loading-finished"]

    @pytest.mark.asyncio
    async def test_events_on_crash(self) -> None:
        events: list[LifecycleEvent] = []

        async def bug(ctx: PipelineContext) -> PipelineContext:
            raise RuntimeError("bug")

        pipeline = Pipeline(stages=[bug])
        pipeline.subscribe(events.append)
        with pytest.raises(RuntimeError):
            await pipeline.run({})
        assert events[-1] == LifecycleEvent.LOADING_FINISHED

    @pytest.mark.asyncio
    async def test_unsubscribe(self, minimal_swagger: dict[str, Any]) -> None:
        events: list[LifecycleEvent] = []
        pipeline = Pipeline()
        unsubscribe = pipeline.subscribe(events.append)
        unsubscribe()
        unsubscribe()
        await pipeline.run(minimal_swagger)
        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_is_contained(
        self, minimal_swagger: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        events: list[LifecycleEvent] = []

        def broken(event: LifecycleEvent) -> None:
            raise ValueError("listener bug")

        pipeline = Pipeline()
        pipeline.subscribe(broken)
        pipeline.subscribe(events.append)
        with caplog.at_level(logging.WARNING, logger="swank.pipeline.runner"):
            result = await pipeline.run(minimal_swagger)
        assert result.valid
        assert len(events) == 2
        assert "Lifecycle listener failed" in caplog.text


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


class TestSchemaStage:
    """Test the fetch-schema and schema-validation path."""

    @pytest.mark.asyncio
    async def test_rules_mode_skips_fetch(self, transport_factory: Any, minimal_swagger: dict[str, Any]) -> None:
        calls: list[str] = []
        pipeline = Pipeline(fetcher=HttpxFetcher(transport=transport_factory({}, calls)))
        result = await pipeline.run(minimal_swagger)
        assert result.valid
        assert calls == []

    @pytest.mark.asyncio
    async def test_schema_violations_become_errors(self, transport_factory: Any) -> None:
        calls: list[str] = []
        pipeline = Pipeline(fetcher=HttpxFetcher(transport=transport_factory({SCHEMA_URL: SCHEMA}, calls)))
        document = {"swagger": "2.0", "info": {"title": "X"}, "host": 5}
        result = await pipeline.run(document, _schema_options())

        assert calls == [SCHEMA_URL]
        assert [v.code for v in result.violations] == ["required", "type"]
        assert result.errors == [
            "{ROOT}/: 'paths' is a required property (required)",
            "{ROOT}/host: 5 is not of type 'string' (type)",
        ]
        assert result.results == {}

    @pytest.mark.asyncio
    async def test_both_mode_rules_first(self, transport_factory: Any) -> None:
        pipeline = _pipeline({SCHEMA_URL: SCHEMA}, transport_factory)
        document = {"swagger": "2.0", "info": {"title": "X"}, "paths": {}}
        result = await pipeline.run(document, _schema_options(ValidatorMode.BOTH))
        assert len(result.errors) == 1
        assert "info.version" in result.errors[0]
        assert result.violations == []

    @pytest.mark.asyncio
    async def test_schema_fetch_failure(self, transport_factory: Any, minimal_swagger: dict[str, Any]) -> None:
        result = await _pipeline({}, transport_factory).run(minimal_swagger, _schema_options())
        assert isinstance(result.failure, FetchError)
        assert result.failed_stage == "fetch_schema"

    @pytest.mark.asyncio
    async def test_bad_schema_aborts(self, transport_factory: Any, minimal_swagger: dict[str, Any]) -> None:
        pipeline = _pipeline({SCHEMA_URL: {"type": 12}}, transport_factory)
        result = await pipeline.run(minimal_swagger, _schema_options())
        assert isinstance(result.failure, ValidatorUnavailableError)
        assert result.failed_stage == "validate_document"

    @pytest.mark.asyncio
    async def test_schema_cache_skips_network(
        self, tmp_path: Path, transport_factory: Any, minimal_swagger: dict[str, Any]
    ) -> None:
        calls: list[str] = []
        cache = SchemaCache(tmp_path, CacheConfig(enabled=True))
        try:
            pipeline = Pipeline(
                fetcher=HttpxFetcher(transport=transport_factory({SCHEMA_URL: SCHEMA}, calls)),
                schema_cache=cache,
            )
            first = await pipeline.run(dict(minimal_swagger), _schema_options())
            second = await pipeline.run(dict(minimal_swagger), _schema_options())
        finally:
            cache.close()
        assert first.valid and second.valid
        assert calls == [SCHEMA_URL]

    @pytest.mark.asyncio
    async def test_custom_engine_and_validator(self, transport_factory: Any) -> None:
        registry = RulesetRegistry()
        registry.register("2.0", [{"path": "x-owner", "required": True, "error": "Owner missing."}])
        seen: list[Any] = []

        def factory(schema: Any) -> Any:
            seen.append(schema)
            return type("V", (), {"iter_errors": lambda self, doc: iter(())})()

        pipeline = _pipeline(
            {SCHEMA_URL: json.dumps(SCHEMA)},
            transport_factory,
            engine=RuleEngine(registry),
            schema_validator=SchemaValidator(factory),
        )
        result = await pipeline.run({"swagger": "2.0"}, _schema_options(ValidatorMode.BOTH))
        assert result.errors == ["Owner missing."]
        assert seen == [SCHEMA]
