"""Authorization code exchange against the token endpoint.

Token requests are plain form POSTs: they are neither signed nor carry a
bearer header. The provider's JSON reply is validated into a
:class:`~letterboxd_client.models.TokenPair`; anything else becomes an
:class:`~letterboxd_client.exceptions.OAuthError`.

Transport failures (:class:`httpx.HTTPError`) are not wrapped and reach the
caller unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx
import pydantic

from letterboxd_client.auth.signing import encode_form_body
from letterboxd_client.client.response import to_api_response
from letterboxd_client.exceptions import OAuthError
from letterboxd_client.models import TOKEN_URL, ApiResponse, ParsedJson, TokenPair

TOKEN_REQUEST_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


def build_oauth_error(response: ApiResponse) -> OAuthError:
    """Translate a non-2xx token endpoint response into an :class:`OAuthError`.

    The provider error code is read from ``error`` and the description from
    ``error_description`` (or ``errorDescription``). A body that is not a
    JSON object becomes the description as-is.
    """
    error: Any = "http_error"
    description: Any = None

    if isinstance(response.data, ParsedJson) and isinstance(response.data.value, dict):
        payload = response.data.value
        error = payload.get("error") or payload.get("type") or error
        description = (
            payload.get("error_description")
            or payload.get("errorDescription")
            or payload.get("message")
        )
    elif isinstance(response.data, ParsedJson):
        description = response.data.value
    else:
        description = response.data.text or None

    return OAuthError(
        str(error),
        error_description=str(description) if description is not None else None,
        status_code=response.status,
    )


def parse_token_response(response: ApiResponse) -> TokenPair:
    """Validate a token endpoint response.

    Raises:
        OAuthError: On a non-2xx status, or when a 2xx body is not a token
            object.
    """
    if not response.ok:
        raise build_oauth_error(response)

    if not (isinstance(response.data, ParsedJson) and isinstance(response.data.value, dict)):
        raise OAuthError(
            "invalid_token_response",
            error_description="Token endpoint did not return a JSON object",
            status_code=response.status,
        )
    try:
        return TokenPair.model_validate(response.data.value)
    except pydantic.ValidationError as exc:
        raise OAuthError(
            "invalid_token_response",
            error_description="Token response missing 'access_token' field",
            status_code=response.status,
        ) from exc


async def post_token_request(
    form: Mapping[str, Any],
    *,
    token_url: str = TOKEN_URL,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> TokenPair:
    """POST *form* to the token endpoint and return the parsed tokens.

    Uses *http_client* when given (the caller keeps ownership of it);
    otherwise a short-lived :class:`httpx.AsyncClient` is opened for the
    single request. Exactly one request is made.
    """
    content = encode_form_body(form)
    if http_client is not None:
        response = await http_client.post(
            token_url, content=content, headers=TOKEN_REQUEST_HEADERS, timeout=timeout
        )
    else:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                token_url, content=content, headers=TOKEN_REQUEST_HEADERS
            )
    return parse_token_response(to_api_response(response))


async def exchange_authorization_code(
    code: str,
    code_verifier: str,
    redirect_uri: str,
    *,
    token_url: str = TOKEN_URL,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> TokenPair:
    """Exchange an authorization code and its PKCE verifier for tokens.

    Args:
        code: The code delivered to *redirect_uri*.
        code_verifier: The verifier whose challenge went into the
            authorization URL.
        redirect_uri: Must match the one used for authorization.
        token_url: Provider token endpoint.
        http_client: Optional client to send through.
        timeout: Request timeout in seconds.

    Raises:
        OAuthError: If the provider rejects the exchange.
    """
    form = {
        "grant_type": "authorization_code",
        "code": code,
        "code_verifier": code_verifier,
        "redirect_uri": redirect_uri,
    }
    return await post_token_request(
        form, token_url=token_url, http_client=http_client, timeout=timeout
    )
