"""OAuth2 Authorization Code flow with PKCE.

- :mod:`~letterboxd_client.oauth.pkce` -- verifier, challenge and state.
- :mod:`~letterboxd_client.oauth.authorization` -- authorization URL.
- :mod:`~letterboxd_client.oauth.token_exchange` -- code for tokens.
- :mod:`~letterboxd_client.oauth.token_refresh` -- refresh token grant.

Opening a browser and listening for the redirect are left to the caller.
"""

from letterboxd_client.oauth.authorization import build_authorization_url
from letterboxd_client.oauth.pkce import (
    create_code_challenge,
    create_code_verifier,
    create_pkce_pair,
    create_state,
)
from letterboxd_client.oauth.token_exchange import (
    exchange_authorization_code,
    parse_token_response,
)
from letterboxd_client.oauth.token_refresh import refresh_access_token

__all__ = [
    "build_authorization_url",
    "create_code_challenge",
    "create_code_verifier",
    "create_pkce_pair",
    "create_state",
    "exchange_authorization_code",
    "parse_token_response",
    "refresh_access_token",
]
