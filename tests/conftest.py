"""Shared test fixtures for letterboxd_client.

Provides isolated config environments, output state management, credential
bundles and a recording mock transport. These fixtures are discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from letterboxd_client.models import Credentials
from letterboxd_client.output import OutputFormat, OutputManager, reset_output, set_output

TEST_BASE_URL = "https://api.test/api/v0"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references go stale. Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at ``tmp_path / "config"``, clears every
    ``LETTERBOXD_*`` variable and changes the working directory to
    tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("letterboxd_client.config._is_xdg_platform", lambda: True)

    for var in [
        "LETTERBOXD_PROFILE",
        "LETTERBOXD_BASE_URL",
        "LETTERBOXD_API_KEY",
        "LETTERBOXD_API_SECRET",
        "LETTERBOXD_ACCESS_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


@pytest.fixture
def signed_credentials() -> Credentials:
    return Credentials(api_key="test-key", api_secret="test-secret")


@pytest.fixture
def bearer_credentials() -> Credentials:
    return Credentials(api_key="test-key", api_secret="test-secret", access_token="tok123")


# ---------------------------------------------------------------------------
# HTTP mocking
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """:class:`httpx.MockTransport` that keeps every request it receives.

    Args:
        responder: Optional callable producing the response for a request.
            Defaults to ``200 {"ok": true}``.
    """

    def __init__(
        self, responder: Optional[Callable[[httpx.Request], httpx.Response]] = None
    ) -> None:
        self.requests: list[httpx.Request] = []
        self._responder = responder or (lambda request: json_response({"ok": True}))
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Build an httpx.Response with a JSON body."""
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": "application/json"},
        content=json.dumps(data).encode("utf-8"),
    )


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()
