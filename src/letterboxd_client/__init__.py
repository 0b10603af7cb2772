"""letterboxd_client -- authorization layer for the Letterboxd HTTP API.

The Letterboxd API accepts two parallel authentication schemes: per-request
HMAC signing with an API key and secret, and OAuth2 bearer tokens obtained
through the Authorization Code flow with PKCE. This package builds fully
authorized requests for either scheme and drives the token endpoint.

Typical usage::

    from letterboxd_client import Credentials, LetterboxdClient

    credentials = Credentials(api_key="key", api_secret="secret")
    async with LetterboxdClient(credentials) as client:
        response = await client.auth.username_check("dave")

Modules:
    models: Pydantic models shared across the package.
    exceptions: Error hierarchy with :class:`~letterboxd_client.exceptions.ErrorKind`.
    auth: Canonical signer and credential resolver.
    oauth: PKCE engine and token endpoint calls.
    client: Async request dispatcher and the endpoint facade.
    config: XDG-aware profiles and credential sources.
    app: Typer CLI entry point (``letterboxd-auth``).
"""

__version__ = "1.0.1"

from letterboxd_client.client.api import LetterboxdClient  # noqa: E402
from letterboxd_client.exceptions import (  # noqa: E402
    ErrorKind,
    LetterboxdError,
    MissingAccessTokenError,
    MissingCredentialsError,
    OAuthError,
    classify_error,
)
from letterboxd_client.models import (  # noqa: E402
    ApiResponse,
    Credentials,
    ParsedJson,
    PkcePair,
    RawText,
    TokenPair,
)

__all__ = [
    "ApiResponse",
    "Credentials",
    "ErrorKind",
    "LetterboxdClient",
    "LetterboxdError",
    "MissingAccessTokenError",
    "MissingCredentialsError",
    "OAuthError",
    "ParsedJson",
    "PkcePair",
    "RawText",
    "TokenPair",
    "classify_error",
    "__version__",
]
