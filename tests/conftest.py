"""Shared test fixtures for swank.

Provides reusable fixtures for loading document fixtures, creating isolated
config environments, managing output and logging state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

import httpx
import pytest

from swank.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the CLI log handler after every test.

    The OutputManager and the Rich log handler cache references to
    sys.stdout/sys.stderr at creation time.  When Typer's CliRunner
    redirects those streams during a test and the test finishes, the cached
    references become stale ("I/O operation on closed file").
    """
    yield
    reset_output()
    package_logger = logging.getLogger("swank")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_20_path() -> Path:
    """Path to the Swagger 2.0 petstore JSON fixture."""
    return FIXTURES_DIR / "petstore_2.0.json"


@pytest.fixture
def petstore_20_raw(petstore_20_path: Path) -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore document."""
    with open(petstore_20_path) as f:
        return json.load(f)


@pytest.fixture
def petstore_20_yaml_path() -> Path:
    """Path to the Swagger 2.0 petstore YAML fixture (no declared tags)."""
    return FIXTURES_DIR / "petstore_2.0.yaml"


@pytest.fixture
def minimal_swagger() -> dict[str, Any]:
    """The smallest document the Swagger 2.0 ruleset accepts."""
    return {
        "swagger": "2.0",
        "info": {"title": "X", "version": "1.0"},
        "paths": {},
    }


@pytest.fixture
def scenario_paths() -> dict[str, Any]:
    """One tagged GET route and one untagged POST route."""
    return copy.deepcopy(
        {
            "/a": {"get": {"tags": ["x"], "operationId": "getA"}},
            "/b": {"post": {}},
        }
    )


# ---------------------------------------------------------------------------
# Network fixtures
# ---------------------------------------------------------------------------


def _make_transport(routes: dict[str, Any], calls: list[str] | None = None) -> httpx.MockTransport:
    """Build a MockTransport serving *routes* (URL -> body, or status int).

    Unknown URLs answer 404.  Every requested URL is appended to *calls*
    when a list is given.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        body = routes.get(url)
        if body is None:
            return httpx.Response(404, text="not found")
        if isinstance(body, int):
            return httpx.Response(body, text="error")
        if isinstance(body, (dict, list)):
            return httpx.Response(200, json=body)
        return httpx.Response(200, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def transport_factory():
    """Factory fixture: ``transport_factory(routes, calls=None)`` -> MockTransport."""
    return _make_transport


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all SWANK_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    config_dir = tmp_path / "config"
    cache_dir = tmp_path / "cache"
    data_dir = tmp_path / "data"

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("XDG_CACHE_HOME", str(cache_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))
    monkeypatch.setattr("swank.config._is_xdg_platform", lambda: True)

    for var in [
        "SWANK_ORDER_PATHS",
        "SWANK_VALIDATOR",
        "SWANK_SCHEMA_BASE_URL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
