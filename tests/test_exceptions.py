"""Tests for the exception hierarchy and error classification."""

from __future__ import annotations

import httpx
import pytest

from letterboxd_client.exceptions import (
    ConfigError,
    ErrorKind,
    InvalidUsageError,
    LetterboxdError,
    MissingAccessTokenError,
    MissingCredentialsError,
    OAuthError,
    classify_error,
)
from letterboxd_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class TestExitCodes:
    @pytest.mark.parametrize(
        "exc, code",
        [
            (MissingCredentialsError(), EXIT_AUTH_FAILURE),
            (MissingAccessTokenError(), EXIT_AUTH_FAILURE),
            (OAuthError("invalid_grant"), EXIT_AUTH_FAILURE),
            (InvalidUsageError("bad"), EXIT_INVALID_USAGE),
            (ConfigError("bad"), EXIT_GENERIC_FAILURE),
        ],
    )
    def test_class_exit_codes(self, exc: LetterboxdError, code: int) -> None:
        assert exc.exit_code == code

    def test_exit_code_override(self) -> None:
        assert LetterboxdError("x", exit_code=7).exit_code == 7


class TestOAuthError:
    def test_message_with_all_fields(self) -> None:
        exc = OAuthError("invalid_grant", "Bad credentials", status_code=400)
        assert str(exc) == "HTTP 400: OAuth error 'invalid_grant': Bad credentials"
        assert exc.error == "invalid_grant"
        assert exc.error_description == "Bad credentials"

    def test_message_minimal(self) -> None:
        assert str(OAuthError("invalid_token_response")) == "OAuth error 'invalid_token_response'"


class TestClassifyError:
    @pytest.mark.parametrize(
        "exc, kind",
        [
            (MissingCredentialsError(), ErrorKind.MISSING_CREDENTIALS),
            (MissingAccessTokenError(), ErrorKind.MISSING_ACCESS_TOKEN),
            (OAuthError("invalid_grant"), ErrorKind.OAUTH_FAILURE),
            (InvalidUsageError("x"), ErrorKind.INVALID_USAGE),
            (ConfigError("x"), ErrorKind.CONFIG),
            (httpx.ConnectTimeout("slow"), ErrorKind.TRANSPORT),
        ],
    )
    def test_kinds(self, exc: BaseException, kind: ErrorKind) -> None:
        assert classify_error(exc) is kind

    def test_foreign_exception(self) -> None:
        assert classify_error(ValueError("x")) is None
