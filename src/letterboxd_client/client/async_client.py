"""Asynchronous request dispatcher.

This module provides :class:`AsyncClient`, which wraps
:class:`httpx.AsyncClient` and turns a
:class:`~letterboxd_client.models.RequestDescriptor` plus the caller's
:class:`~letterboxd_client.models.Credentials` into exactly one HTTP
call:

1. The body is encoded once (form or compact JSON) so the string that is
   signed is the string that is sent.
2. The :class:`~letterboxd_client.auth.manager.AuthManager` resolves the
   auth mode and returns the final query parameters and headers.
3. The final URL is built with :func:`~letterboxd_client.auth.signing.build_url`.
4. The response body is read in full and normalized into an
   :class:`~letterboxd_client.models.ApiResponse`.

Status codes are passed through untouched and nothing is retried.
Transport failures (:class:`httpx.HTTPError`) propagate unchanged.

See Also:
    :class:`~letterboxd_client.client.api.LetterboxdClient` for the
    endpoint-level facade built on top of this dispatcher.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from letterboxd_client.auth.manager import AuthManager, create_default_manager
from letterboxd_client.auth.signing import build_url, encode_form_body, encode_json_body
from letterboxd_client.client.response import to_api_response
from letterboxd_client.models import (
    ApiResponse,
    AuthorizedRequest,
    Credentials,
    Profile,
    RequestDescriptor,
)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def _find_header(headers: dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def encode_body(
    body: Optional[dict[str, Any]], headers: dict[str, str]
) -> Optional[str]:
    """Serialise *body* according to the declared ``Content-Type``.

    A form content type produces a urlencoded string. Any other present body
    is compact JSON, and ``Content-Type: application/json`` is added to
    *headers* when the caller did not declare one.

    Returns:
        The exact body string to sign and send, or ``None`` for no body.
    """
    if body is None:
        return None

    content_type = _find_header(headers, "Content-Type")
    if content_type is not None and content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
        return encode_form_body(body)

    if content_type is None:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    return encode_json_body(body)


class AsyncClient:
    """Asynchronous dispatcher for Letterboxd API calls.

    Must be used as an async context manager; it owns one
    :class:`httpx.AsyncClient` for its lifetime. The dispatcher holds no
    credentials of its own: they are passed into every call, and it keeps
    no state between requests, so many dispatches may run concurrently.

    Args:
        profile: Connection profile providing ``base_url`` and request
            settings (timeout, SSL verification). Defaults to the public API.
        auth_manager: Resolver used to authorize requests. Defaults to
            :func:`~letterboxd_client.auth.manager.create_default_manager`.
        transport: Optional :class:`httpx.AsyncBaseTransport` replacing the
            network, e.g. :class:`httpx.MockTransport` in tests.

    Example::

        async with AsyncClient() as client:
            response = await client.request("GET", "/films", credentials,
                                            params={"perPage": 20})
    """

    def __init__(
        self,
        profile: Optional[Profile] = None,
        auth_manager: Optional[AuthManager] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._profile = profile or Profile()
        self._auth_manager = auth_manager or create_default_manager()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The underlying :class:`httpx.AsyncClient` (only inside the context)."""
        assert self._client is not None, "Client not initialised -- use as async context manager"
        return self._client

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        config = self._profile.request
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            verify=config.verify_ssl,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def authorize(
        self, request: RequestDescriptor, credentials: Credentials
    ) -> AuthorizedRequest:
        """Apply the resolved auth mode to *request* without sending it.

        Raises:
            MissingCredentialsError: If *credentials* satisfy neither mode.
        """
        headers = dict(request.headers)
        content = encode_body(request.body, headers)
        url = f"{self._profile.base_url}{request.path}"
        method = request.method.upper()

        result = self._auth_manager.authenticate(
            credentials, method, url, request.params, content
        )
        headers.update(result.headers)

        return AuthorizedRequest(
            method=method,
            url=build_url(url, result.params),
            headers=headers,
            content=content,
        )

    async def dispatch(
        self, request: RequestDescriptor, credentials: Credentials
    ) -> ApiResponse:
        """Authorize and send *request*, returning the normalized response.

        Exactly one network call is made. A missing-credentials failure is
        raised before any network activity.
        """
        authorized = self.authorize(request, credentials)
        response = await self.http_client.request(
            authorized.method,
            authorized.url,
            headers=authorized.headers,
            content=authorized.content,
        )
        return to_api_response(response)

    async def request(
        self,
        method: str,
        path: str,
        credentials: Credentials,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        """Build a :class:`RequestDescriptor` and :meth:`dispatch` it.

        Args:
            method: HTTP method.
            path: Path appended to the profile's ``base_url``.
            credentials: Caller-owned credential bundle.
            params: Query parameters; ``None`` values are dropped.
            body: Body mapping, encoded per the declared content type.
            headers: Extra request headers.
        """
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            params=params or {},
            body=body,
            headers=headers or {},
        )
        return await self.dispatch(descriptor, credentials)
