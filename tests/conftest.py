"""Shared test fixtures for cfcli.

Provides reusable fixtures for loading fixture documents, compiling them,
creating isolated config environments, managing output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
import yaml

from cfcli.generator import compile_tree, write_tree
from cfcli.models import CommandTree
from cfcli.output import OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager's Rich console keeps a reference to sys.stderr taken
    at creation time. When Typer's CliRunner redirects the streams during a
    test and the test finishes, the cached reference becomes stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cloudflare_doc() -> dict[str, Any]:
    """Load the Cloudflare excerpt document as a plain dict."""
    with open(FIXTURES_DIR / "cloudflare_excerpt.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def cloudflare_tree(cloudflare_doc: dict[str, Any]) -> CommandTree:
    """The compiled tree of the Cloudflare excerpt."""
    return compile_tree(cloudflare_doc)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, and clears every
    environment variable cfcli reads.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("cfcli.config._is_xdg_platform", lambda: True)

    for var in [
        "CLOUDFLARE_API_TOKEN",
        "CLOUDFLARE_API_URL",
        "CLOUDFLARE_ACCOUNT_ID",
        "CLOUDFLARE_ZONE_ID",
        "CFCLI_TREE",
        "OPENAPI_URL",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def tree_file(isolated_config: Path, cloudflare_tree: CommandTree) -> Path:
    """Write the compiled excerpt tree to the default tree location."""
    path = isolated_config / "data" / "cfcli" / "command_tree.json"
    write_tree(cloudflare_tree, path)
    return path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for the test."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_api(monkeypatch: pytest.MonkeyPatch) -> Callable[[Callable[[httpx.Request], httpx.Response]], list[httpx.Request]]:
    """Route every ``httpx.Client`` created by cfcli through a handler.

    Usage::

        requests = mock_api(lambda request: httpx.Response(200, json={...}))

    Returns a function installing the handler; it returns the list that
    collects every request the handler received.
    """
    real_client = httpx.Client

    def install(handler: Callable[[httpx.Request], httpx.Response]) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        def _factory(**kwargs: Any) -> httpx.Client:
            return real_client(transport=httpx.MockTransport(_record), **kwargs)

        monkeypatch.setattr(httpx, "Client", _factory)
        return seen

    return install


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout and stderr
    separately.
    """
    from typer.testing import CliRunner

    return CliRunner()
