"""Exception hierarchy for letterboxd_client.

All exceptions inherit from :class:`LetterboxdError`, which carries two
class-level attributes:

* ``kind`` -- a member of the closed :class:`ErrorKind` enumeration, so
  callers can branch on the failure category without inspecting classes.
* ``exit_code`` -- the CLI exit status from :mod:`letterboxd_client.exit_codes`.

Transport failures are *not* wrapped: ``httpx.HTTPError`` propagates
unchanged from the dispatcher and :func:`classify_error` reports it as
:attr:`ErrorKind.TRANSPORT`.

Subclass hierarchy::

    LetterboxdError (exit 1)
    +-- MissingCredentialsError  (exit 3)
    +-- MissingAccessTokenError  (exit 3)
    +-- OAuthError               (exit 3)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
"""

from __future__ import annotations

import enum
from typing import Optional

import httpx

from letterboxd_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class ErrorKind(str, enum.Enum):
    """Closed set of failure categories surfaced by the package."""

    MISSING_CREDENTIALS = "missing_credentials"
    MISSING_ACCESS_TOKEN = "missing_access_token"
    OAUTH_FAILURE = "oauth_failure"
    TRANSPORT = "transport"
    INVALID_USAGE = "invalid_usage"
    CONFIG = "config"


class LetterboxdError(Exception):
    """Base exception for all letterboxd_client errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.INVALID_USAGE
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class MissingCredentialsError(LetterboxdError):
    """Raised when signed mode is required but the API key or secret is absent."""

    kind = ErrorKind.MISSING_CREDENTIALS
    exit_code = EXIT_AUTH_FAILURE

    def __init__(
        self,
        message: str = "Request signing requires both an API key and an API secret.",
    ):
        super().__init__(message)


class MissingAccessTokenError(LetterboxdError):
    """Raised when a bearer-only endpoint is called without an access token."""

    kind = ErrorKind.MISSING_ACCESS_TOKEN
    exit_code = EXIT_AUTH_FAILURE

    def __init__(
        self,
        message: str = "This endpoint requires the client to be set up with a user access token.",
    ):
        super().__init__(message)


class OAuthError(LetterboxdError):
    """Raised when the token endpoint answers with a non-2xx status.

    Carries the provider's ``error`` / ``error_description`` fields so the
    caller can decide whether to re-authenticate, retry or give up.

    Args:
        error: Provider error code, usually ``invalid_grant``.
        error_description: Provider's human-readable description.
        status_code: HTTP status of the token endpoint response, if any.
    """

    kind = ErrorKind.OAUTH_FAILURE
    exit_code = EXIT_AUTH_FAILURE

    def __init__(
        self,
        error: str,
        error_description: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.error = error
        self.error_description = error_description
        self.status_code = status_code
        message = f"OAuth error '{error}'"
        if status_code is not None:
            message = f"HTTP {status_code}: {message}"
        if error_description:
            message = f"{message}: {error_description}"
        super().__init__(message)


class InvalidUsageError(LetterboxdError):
    """Raised for caller contract violations (missing required arguments, bad options)."""

    kind = ErrorKind.INVALID_USAGE
    exit_code = EXIT_INVALID_USAGE


class ConfigError(LetterboxdError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    kind = ErrorKind.CONFIG
    exit_code = EXIT_GENERIC_FAILURE


def classify_error(exc: BaseException) -> Optional[ErrorKind]:
    """Map *exc* onto the :class:`ErrorKind` enumeration.

    Returns:
        The error kind, or ``None`` for exceptions this package does not
        produce or propagate.
    """
    if isinstance(exc, LetterboxdError):
        return exc.kind
    if isinstance(exc, httpx.HTTPError):
        return ErrorKind.TRANSPORT
    return None
