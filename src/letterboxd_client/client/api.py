"""Endpoint facade over the request dispatcher.

:class:`LetterboxdClient` binds one caller-owned
:class:`~letterboxd_client.models.Credentials` bundle to an
:class:`~letterboxd_client.client.async_client.AsyncClient` and exposes the
authentication endpoints under ``client.auth`` and the current member
under ``client.me``.

Example::

    credentials = Credentials(api_key="key", api_secret="secret")
    async with LetterboxdClient(credentials) as client:
        tokens = await client.auth.request_auth_token("user", "hunter1")
        credentials.apply_token(tokens)
        me = await client.me.get()
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from letterboxd_client.client.async_client import AsyncClient
from letterboxd_client.exceptions import InvalidUsageError, MissingAccessTokenError
from letterboxd_client.models import ApiResponse, Credentials, Profile, TokenPair
from letterboxd_client.oauth.token_exchange import (
    TOKEN_REQUEST_HEADERS,
    exchange_authorization_code,
    parse_token_response,
)
from letterboxd_client.oauth.token_refresh import refresh_access_token


class AuthEndpoints:
    """Operations under ``/auth``."""

    def __init__(self, client: LetterboxdClient) -> None:
        self._client = client

    async def request_auth_token(self, username: str, password: str) -> TokenPair:
        """Sign in with a member's username and password (password grant).

        The request is a signed, form-encoded ``POST /auth/token``.

        Raises:
            InvalidUsageError: If the credentials already carry an access token.
            MissingCredentialsError: If the API key or secret is missing.
            OAuthError: If the provider rejects the credentials.
        """
        if self._client.credentials.access_token:
            raise InvalidUsageError(
                "You cannot retrieve tokens on a client that has already been "
                "configured with a token. Clear the access token first."
            )
        response = await self._client.request(
            "POST",
            "/auth/token",
            body={"grant_type": "password", "username": username, "password": password},
            headers=dict(TOKEN_REQUEST_HEADERS),
        )
        return parse_token_response(response)

    async def exchange_authorization_code(
        self, code: str, code_verifier: str, redirect_uri: Optional[str] = None
    ) -> TokenPair:
        """Exchange a PKCE authorization code using the profile's token URL.

        *redirect_uri* defaults to the profile's ``redirect_uri``.
        """
        profile = self._client.profile
        redirect_uri = redirect_uri or profile.redirect_uri
        if not redirect_uri:
            raise InvalidUsageError("redirect_uri is required to exchange an authorization code")
        return await exchange_authorization_code(
            code,
            code_verifier,
            redirect_uri,
            token_url=profile.token_url,
            http_client=self._client.http_client,
            timeout=profile.request.timeout,
        )

    async def refresh_access_token(self, refresh_token: str) -> TokenPair:
        profile = self._client.profile
        return await refresh_access_token(
            refresh_token,
            token_url=profile.token_url,
            http_client=self._client.http_client,
            timeout=profile.request.timeout,
        )

    async def get_login_token(self) -> ApiResponse:
        """Generate a single-use website sign-in token for the current member."""
        self._client.require_access_token()
        return await self._client.request("GET", "/auth/get-login-token")

    async def revoke_auth(self) -> ApiResponse:
        """Revoke the current member's access token."""
        self._client.require_access_token()
        return await self._client.request("POST", "/auth/revoke")

    async def username_check(self, username: str) -> ApiResponse:
        """Check whether *username* is available to register."""
        return await self._client.request(
            "GET", "/auth/username-check", params={"username": username}
        )

    async def forgotten_password_request(self, email_address: str) -> ApiResponse:
        """Request a password reset link for the account behind *email_address*."""
        return await self._client.request(
            "POST",
            "/auth/forgotten-password-request",
            body={"emailAddress": email_address},
        )


class MeEndpoints:
    """Operations on the authenticated member."""

    def __init__(self, client: LetterboxdClient) -> None:
        self._client = client

    async def get(self) -> ApiResponse:
        """Fetch the authenticated member's account details."""
        self._client.require_access_token()
        return await self._client.request("GET", "/me")


class LetterboxdClient:
    """Letterboxd API client bound to one credential bundle.

    The bundle is read on every call, so rotating
    ``credentials.access_token`` switches subsequent requests between signed
    and bearer mode without rebuilding the client.

    Args:
        credentials: Caller-owned credentials.
        config: Connection profile (base URL, token URL, timeouts).
        transport: Optional :class:`httpx.AsyncBaseTransport` replacing the
            network.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[Profile] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.credentials = credentials
        self._dispatcher = AsyncClient(config, transport=transport)
        self.auth = AuthEndpoints(self)
        self.me = MeEndpoints(self)

    @property
    def profile(self) -> Profile:
        return self._dispatcher.profile

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._dispatcher.http_client

    async def __aenter__(self) -> LetterboxdClient:
        await self._dispatcher.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._dispatcher.__aexit__(*args)

    def require_access_token(self) -> None:
        """Raise :class:`MissingAccessTokenError` unless a token is set."""
        if not self.credentials.access_token:
            raise MissingAccessTokenError()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        """Dispatch a raw request with this client's credentials."""
        return await self._dispatcher.request(
            method, path, self.credentials, params=params, body=body, headers=headers
        )
