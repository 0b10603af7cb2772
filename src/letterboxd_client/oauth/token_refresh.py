"""Refresh token grant."""

from __future__ import annotations

from typing import Optional

import httpx

from letterboxd_client.models import TOKEN_URL, TokenPair
from letterboxd_client.oauth.token_exchange import post_token_request


async def refresh_access_token(
    refresh_token: str,
    *,
    token_url: str = TOKEN_URL,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = 30.0,
) -> TokenPair:
    """Obtain a new access token using a refresh token.

    When the provider does not rotate the refresh token, the one passed in
    is carried over into the returned :class:`TokenPair`.

    Raises:
        OAuthError: If the provider rejects the refresh.
    """
    tokens = await post_token_request(
        {"grant_type": "refresh_token", "refresh_token": refresh_token},
        token_url=token_url,
        http_client=http_client,
        timeout=timeout,
    )
    if not tokens.refresh_token:
        tokens = tokens.model_copy(update={"refresh_token": refresh_token})
    return tokens
