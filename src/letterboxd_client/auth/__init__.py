"""Request authorization for letterboxd_client.

This package turns a caller's :class:`~letterboxd_client.models.Credentials`
into the query parameters and headers for one request, in either signed
or bearer mode.

The main entry points are:

- :func:`sign` -- the canonical HMAC-SHA256 request signer.
- :class:`AuthPlugin` -- abstract base class for an auth mode.
- :class:`AuthManager` -- registry that resolves the auth mode per request
  and dispatches to the matching plugin.
- :func:`create_default_manager` -- an :class:`AuthManager` with the
  built-in ``signed`` and ``bearer`` plugins.
- :func:`resolve` -- one-shot resolution against the default base URL.

Typical usage::

    from letterboxd_client.auth import resolve

    result = resolve(credentials, "GET", "/films", {"perPage": 20})
    # result.params / result.headers are ready to send.
"""

from letterboxd_client.auth.base import AuthPlugin, AuthResult
from letterboxd_client.auth.manager import (
    AuthManager,
    create_default_manager,
    resolve,
    resolve_auth_mode,
)
from letterboxd_client.auth.signing import build_signing_base, build_url, sign

__all__ = [
    "AuthPlugin",
    "AuthResult",
    "AuthManager",
    "build_signing_base",
    "build_url",
    "create_default_manager",
    "resolve",
    "resolve_auth_mode",
    "sign",
]
