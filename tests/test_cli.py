"""CLI tests for the ``letterboxd-auth`` Typer application.

Network commands run against a recording :class:`httpx.MockTransport` by
patching the ``make_client`` factory each command module uses.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest
from typer.testing import CliRunner

from conftest import RecordingTransport, json_response
from letterboxd_client import __version__
from letterboxd_client.app import app, main
from letterboxd_client.client.api import LetterboxdClient
from letterboxd_client.config import load_profile, save_profile
from letterboxd_client.exceptions import OAuthError
from letterboxd_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_HTTP_ERROR,
    EXIT_INVALID_USAGE,
)
from letterboxd_client.models import Credentials, Profile
from letterboxd_client.oauth.pkce import create_code_challenge

TOKENS = {"access_token": "at-1", "refresh_token": "rt-1", "expires_in": 3600}


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _use_transport(
    monkeypatch: pytest.MonkeyPatch, transport: httpx.MockTransport, module: str
) -> None:
    def _make_client(profile: Profile, credentials: Credentials) -> LetterboxdClient:
        return LetterboxdClient(credentials, config=profile, transport=transport)

    monkeypatch.setattr(f"letterboxd_client.commands.{module}.make_client", _make_client)


def _signed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LETTERBOXD_API_KEY", "cli-key")
    monkeypatch.setenv("LETTERBOXD_API_SECRET", "cli-secret")


def _json(output: str) -> Any:
    return json.loads(output)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, [])
        assert "auth" in result.output
        assert "request" in result.output


# ---------------------------------------------------------------------------
# auth
# ---------------------------------------------------------------------------


class TestAuthPkce:
    def test_pair(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "-q", "auth", "pkce"])
        assert result.exit_code == 0, result.output

        data = _json(result.stdout)
        assert len(data["code_verifier"]) == 86
        assert data["code_challenge"] == create_code_challenge(data["code_verifier"])

    def test_bytes_option(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "-q", "auth", "pkce", "--bytes", "32"])
        assert len(_json(result.stdout)["code_verifier"]) == 43

    def test_bytes_out_of_range(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["auth", "pkce", "--bytes", "10"])
        assert result.exit_code == EXIT_INVALID_USAGE


class TestAuthAuthorizeUrl:
    def test_generates_pkce_and_state(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--json", "-q", "auth", "authorize-url",
                "--client-id", "app", "--redirect-uri", "https://cb",
                "--scope", "content:modify", "--scope", "list:write",
            ],
        )
        assert result.exit_code == 0, result.output

        data = _json(result.stdout)
        query = dict(parse_qsl(urlsplit(data["url"]).query))
        assert query["client_id"] == "app"
        assert query["redirect_uri"] == "https://cb"
        assert query["scope"] == "content:modify list:write"
        assert query["state"] == data["state"]
        assert query["code_challenge"] == create_code_challenge(data["code_verifier"])

    def test_given_challenge(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--json", "-q", "auth", "authorize-url", "--client-id", "app",
                "--redirect-uri", "https://cb", "--code-challenge", "ch", "--state", "s1",
            ],
        )
        data = _json(result.stdout)
        assert "code_verifier" not in data
        assert data["state"] == "s1"
        assert dict(parse_qsl(urlsplit(data["url"]).query))["code_challenge"] == "ch"

    def test_profile_defaults(self, runner: CliRunner, isolated_config: Path) -> None:
        save_profile(Profile(name="default", client_id="from-profile", redirect_uri="https://p"))
        result = runner.invoke(app, ["--json", "-q", "auth", "authorize-url"])
        query = dict(parse_qsl(urlsplit(_json(result.stdout)["url"]).query))
        assert query["client_id"] == "from-profile"
        assert query["redirect_uri"] == "https://p"

    def test_missing_client_id(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["auth", "authorize-url", "--redirect-uri", "https://cb"])
        assert result.exit_code == EXIT_INVALID_USAGE


class TestAuthTokenCommands:
    def test_exchange(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        transport = RecordingTransport(lambda request: json_response(TOKENS))
        _use_transport(monkeypatch, transport, "auth")

        result = runner.invoke(
            app,
            [
                "--json", "-q", "auth", "exchange", "--code", "abc",
                "--code-verifier", "v", "--redirect-uri", "https://cb",
            ],
        )
        assert result.exit_code == 0, result.output
        assert _json(result.stdout)["access_token"] == "at-1"
        assert transport.requests[0].content == (
            b"grant_type=authorization_code&code=abc&code_verifier=v"
            b"&redirect_uri=https%3A%2F%2Fcb"
        )

    def test_exchange_rejected(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        transport = RecordingTransport(
            lambda request: json_response({"error": "invalid_grant"}, status_code=400)
        )
        _use_transport(monkeypatch, transport, "auth")

        result = runner.invoke(
            app,
            ["auth", "exchange", "--code", "abc", "--code-verifier", "v", "--redirect-uri", "https://cb"],
        )
        assert result.exit_code == EXIT_AUTH_FAILURE
        assert "invalid_grant" in result.output

    def test_refresh(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        transport = RecordingTransport(lambda request: json_response({"access_token": "at-2"}))
        _use_transport(monkeypatch, transport, "auth")

        result = runner.invoke(app, ["--json", "-q", "auth", "refresh", "--refresh-token", "rt-1"])
        assert result.exit_code == 0, result.output
        assert _json(result.stdout)["refresh_token"] == "rt-1"

    def test_password_grant_is_signed(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)
        monkeypatch.setenv("LETTERBOXD_ACCESS_TOKEN", "ignored")
        transport = RecordingTransport(lambda request: json_response(TOKENS))
        _use_transport(monkeypatch, transport, "auth")

        result = runner.invoke(
            app, ["--json", "-q", "auth", "token", "--username", "user", "--password", "hunter1"]
        )
        assert result.exit_code == 0, result.output
        request = transport.requests[0]
        assert request.content == b"grant_type=password&username=user&password=hunter1"
        assert "authorization" not in request.headers
        assert "signature" in dict(parse_qsl(request.url.query.decode("ascii")))

    def test_password_grant_without_credentials(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        transport = RecordingTransport()
        _use_transport(monkeypatch, transport, "auth")

        result = runner.invoke(app, ["auth", "token", "--username", "u", "--password", "p"])
        assert result.exit_code == EXIT_AUTH_FAILURE
        assert transport.requests == []


# ---------------------------------------------------------------------------
# request
# ---------------------------------------------------------------------------


class TestRequestCommand:
    def test_signed_get(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)
        transport = RecordingTransport(lambda request: json_response({"items": []}))
        _use_transport(monkeypatch, transport, "request")

        result = runner.invoke(
            app, ["--json", "-q", "request", "GET", "films", "--param", "perPage=5"]
        )
        assert result.exit_code == 0, result.output
        assert _json(result.stdout) == {"items": []}

        request = transport.requests[0]
        assert request.url.path == "/api/v0/films"
        query = dict(parse_qsl(request.url.query.decode("ascii")))
        assert query["perPage"] == "5"
        assert query["apikey"] == "cli-key"

    def test_bearer_from_env(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LETTERBOXD_ACCESS_TOKEN", "env-token")
        transport = RecordingTransport()
        _use_transport(monkeypatch, transport, "request")

        result = runner.invoke(app, ["-q", "request", "GET", "/me"])
        assert result.exit_code == 0, result.output
        assert transport.requests[0].headers["authorization"] == "Bearer env-token"

    def test_form_body(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)
        transport = RecordingTransport()
        _use_transport(monkeypatch, transport, "request")

        result = runner.invoke(
            app, ["-q", "request", "POST", "/x", "--body", '{"a": "b c"}', "--form"]
        )
        assert result.exit_code == 0, result.output
        assert transport.requests[0].content == b"a=b+c"

    def test_base_url_override(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)
        transport = RecordingTransport()
        _use_transport(monkeypatch, transport, "request")

        runner.invoke(app, ["-q", "--base-url", "https://staging.test/v0", "request", "GET", "/x"])
        assert str(transport.requests[0].url).startswith("https://staging.test/v0/x?")

    def test_http_error_exit_code(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)
        transport = RecordingTransport(
            lambda request: json_response({"message": "Not found"}, status_code=404)
        )
        _use_transport(monkeypatch, transport, "request")

        result = runner.invoke(app, ["request", "GET", "/film/nope"])
        assert result.exit_code == EXIT_HTTP_ERROR

    def test_connection_error_exit_code(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _signed_env(monkeypatch)

        def _fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        _use_transport(monkeypatch, RecordingTransport(_fail), "request")

        result = runner.invoke(app, ["request", "GET", "/films"])
        assert result.exit_code == EXIT_CONNECTION_ERROR

    def test_missing_credentials(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["request", "GET", "/films"])
        assert result.exit_code == EXIT_AUTH_FAILURE

    @pytest.mark.parametrize("args", [["--body", "[1, 2]"], ["--body", "{oops"], ["--param", "novalue"]])
    def test_invalid_usage(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, args: list[str]
    ) -> None:
        _signed_env(monkeypatch)
        result = runner.invoke(app, ["request", "POST", "/x", *args])
        assert result.exit_code == EXIT_INVALID_USAGE


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_init_and_list(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app, ["config", "init", "main", "--client-id", "app", "--redirect-uri", "https://cb"]
        )
        assert result.exit_code == 0, result.output
        assert load_profile("main").client_id == "app"

        listed = runner.invoke(app, ["--plain", "config", "list"])
        assert "main\thttps://api.letterboxd.com/api/v0\tapp" in listed.output

    def test_init_refuses_overwrite(self, runner: CliRunner, isolated_config: Path) -> None:
        save_profile(Profile(name="main"))
        result = runner.invoke(app, ["config", "init", "main"])
        assert result.exit_code == 1

        forced = runner.invoke(app, ["config", "init", "main", "--force", "--client-id", "new"])
        assert forced.exit_code == 0
        assert load_profile("main").client_id == "new"

    def test_show_masks_secrets(
        self, runner: CliRunner, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LETTERBOXD_API_KEY", "abcdefgh")
        monkeypatch.setenv("LETTERBOXD_API_SECRET", "supersecret")

        result = runner.invoke(app, ["--json", "-q", "config", "show"])
        assert result.exit_code == 0, result.output
        data = _json(result.stdout)
        assert data["resolved"]["api_key"] == "****efgh"
        assert data["resolved"]["mode"] == "signed"
        assert "supersecret" not in result.output

    def test_show_missing_profile(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "show", "nope"])
        assert result.exit_code == 1

    def test_list_empty(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "list"])
        assert result.exit_code == 0
        assert "No profiles configured" in result.output


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_library_error_exit_code(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _raise(**kwargs: Any) -> None:
            raise OAuthError("invalid_grant", status_code=400)

        monkeypatch.setattr("letterboxd_client.app.app", _raise)
        monkeypatch.setattr("letterboxd_client.app._setup_signal_handlers", lambda: None)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == EXIT_AUTH_FAILURE

    def test_transport_error_exit_code(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _raise(**kwargs: Any) -> None:
            raise httpx.ConnectError("refused")

        monkeypatch.setattr("letterboxd_client.app.app", _raise)
        monkeypatch.setattr("letterboxd_client.app._setup_signal_handlers", lambda: None)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == EXIT_CONNECTION_ERROR
