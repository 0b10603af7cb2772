"""Canonical Pydantic models shared across all letterboxd_client modules.

The models fall into three groups:

**Credentials and auth modes** -- the caller-owned :class:`Credentials`
bundle and the :data:`AuthMode` tagged union (:class:`SignedAuth` or
:class:`BearerAuth`) that the resolver derives from it once per request.

**Request and response shapes** -- :class:`SigningContext`,
:class:`RequestDescriptor`, :class:`AuthorizedRequest`, the
:data:`ResponseBody` union (:class:`ParsedJson` or :class:`RawText`) and
:class:`ApiResponse`.

**OAuth and configuration** -- :class:`PkcePair`, :class:`TokenPair`,
:class:`RequestConfig` and :class:`Profile`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

BASE_URL = "https://api.letterboxd.com/api/v0"
TOKEN_URL = f"{BASE_URL}/auth/token"
AUTHORIZE_URL = f"{BASE_URL}/auth/authorize"


# --- Credentials ---


class Credentials(BaseModel):
    """Caller-owned credential bundle passed into every dispatch.

    When ``access_token`` is set, requests are sent with a bearer header and
    signing is skipped entirely. Otherwise both ``api_key`` and
    ``api_secret`` are required to sign.

    The bundle is mutable: rotating the access token after a refresh is a
    plain assignment (or :meth:`apply_token`). Requests already in flight
    keep the headers they were built with.

    Example::

        credentials = Credentials(api_key="key", api_secret="secret")
        credentials.apply_token(token_pair)
    """

    model_config = ConfigDict(validate_assignment=True)

    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    access_token: Optional[str] = None

    def apply_token(self, token: TokenPair) -> None:
        """Switch to bearer mode using the access token from *token*."""
        self.access_token = token.access_token

    def clear_access_token(self) -> None:
        """Drop the access token, returning to signed mode."""
        self.access_token = None


class SignedAuth(BaseModel):
    """Per-request HMAC signing with an API key and secret."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["signed"] = "signed"
    api_key: str
    api_secret: str


class BearerAuth(BaseModel):
    """``Authorization: Bearer`` header with a user access token."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["bearer"] = "bearer"
    access_token: str


AuthMode = Annotated[Union[SignedAuth, BearerAuth], Field(discriminator="mode")]


# --- Requests ---


class SigningContext(BaseModel):
    """Request-scoped values covered by a signature. Never reused."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str = Field(description="Full URL including apikey, nonce and timestamp")
    nonce: str
    timestamp: int = Field(description="Seconds since the Unix epoch")
    body: str = ""


class RequestDescriptor(BaseModel):
    """Caller-facing request shape before authorization is applied."""

    method: str
    path: str
    params: dict[str, Any] = Field(default_factory=dict)
    body: Optional[dict[str, Any]] = None
    headers: dict[str, str] = Field(default_factory=dict)


class AuthorizedRequest(BaseModel):
    """A fully authorized request, ready to hand to the transport.

    ``url`` already carries every query parameter (including ``signature``
    in signed mode) and ``content`` is exactly the body that was signed.
    """

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    content: Optional[str] = None


# --- Responses ---


class ParsedJson(BaseModel):
    """Response body that parsed as JSON."""

    kind: Literal["json"] = "json"
    value: Any = None


class RawText(BaseModel):
    """Response body that was not valid JSON, kept verbatim."""

    kind: Literal["text"] = "text"
    text: str = ""


ResponseBody = Annotated[Union[ParsedJson, RawText], Field(discriminator="kind")]


class ApiResponse(BaseModel):
    """Normalized response: status code plus a JSON-or-text body."""

    status: int
    data: ResponseBody
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


# --- OAuth ---


class PkcePair(BaseModel):
    """A PKCE code verifier (secret) and its S256 challenge (public)."""

    code_verifier: str
    code_challenge: str


class TokenPair(BaseModel):
    """Token endpoint success response.

    Extra fields returned by the provider are preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    issuer: Optional[str] = None


# --- Configuration ---


class RequestConfig(BaseModel):
    """Transport settings applied to every call made with a profile."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class Profile(BaseModel):
    """Named connection profile stored as JSON under ``profiles/``.

    A profile records endpoints and *where* credentials come from
    (``env:VAR``, ``file:/path`` or ``prompt``), never the credentials or
    tokens themselves.

    See Also:
        :func:`~letterboxd_client.config.load_profile`: Deserialise a profile by name.
        :func:`~letterboxd_client.config.load_credentials`: Build a :class:`Credentials`.
    """

    model_config = ConfigDict(extra="allow")

    name: str = "default"
    base_url: str = BASE_URL
    token_url: str = TOKEN_URL
    authorization_url: str = AUTHORIZE_URL
    client_id: Optional[str] = None
    redirect_uri: Optional[str] = None
    scopes: list[str] = Field(default_factory=list)
    api_key_source: Optional[str] = Field(
        default="env:LETTERBOXD_API_KEY",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    api_secret_source: Optional[str] = Field(
        default="env:LETTERBOXD_API_SECRET",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    access_token_source: Optional[str] = Field(
        default="env:LETTERBOXD_ACCESS_TOKEN",
        description="Optional access token source; enables bearer mode when it resolves",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
