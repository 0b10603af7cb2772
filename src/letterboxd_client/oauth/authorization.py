"""OAuth authorization URL construction."""

from __future__ import annotations

from typing import Optional, Sequence, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from letterboxd_client.exceptions import InvalidUsageError
from letterboxd_client.models import AUTHORIZE_URL

CODE_CHALLENGE_METHODS = ("S256", "plain")


def build_authorization_url(
    client_id: str,
    code_challenge: str,
    redirect_uri: str,
    *,
    authorization_endpoint: str = AUTHORIZE_URL,
    scope: Union[str, Sequence[str], None] = None,
    state: Optional[str] = None,
    response_type: str = "code",
    code_challenge_method: str = "S256",
) -> str:
    """Build the provider authorization URL for the PKCE flow.

    Parameters are set in this order: ``response_type``, ``client_id``,
    ``redirect_uri``, ``code_challenge``, ``code_challenge_method``, then
    ``scope`` and ``state`` when given. Query parameters already present on
    *authorization_endpoint* are kept.

    Args:
        client_id: The API client identifier.
        code_challenge: Challenge from
            :func:`~letterboxd_client.oauth.pkce.create_pkce_pair`.
        redirect_uri: Where the provider sends the user back with the code.
        authorization_endpoint: Provider authorize URL.
        scope: A space-delimited string or a sequence of scope names.
        state: Opaque value echoed back on the redirect.
        response_type: OAuth response type, ``"code"`` for this flow.
        code_challenge_method: ``"S256"`` (default) or ``"plain"``.

    Returns:
        The full authorization URL.

    Raises:
        InvalidUsageError: If ``client_id``, ``redirect_uri`` or
            ``code_challenge`` is empty, or the challenge method is unknown.
    """
    if not client_id:
        raise InvalidUsageError("client_id is required to build an authorization URL")
    if not redirect_uri:
        raise InvalidUsageError("redirect_uri is required to build an authorization URL")
    if not code_challenge:
        raise InvalidUsageError("code_challenge is required to build an authorization URL")
    if code_challenge_method not in CODE_CHALLENGE_METHODS:
        raise InvalidUsageError(
            f"Unsupported code_challenge_method '{code_challenge_method}': "
            f"must be one of {', '.join(CODE_CHALLENGE_METHODS)}"
        )

    parts = urlsplit(authorization_endpoint)
    query: dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))
    query["response_type"] = response_type
    query["client_id"] = client_id
    query["redirect_uri"] = redirect_uri
    query["code_challenge"] = code_challenge
    query["code_challenge_method"] = code_challenge_method

    if scope:
        query["scope"] = scope if isinstance(scope, str) else " ".join(scope)
    if state:
        query["state"] = state

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
    )
