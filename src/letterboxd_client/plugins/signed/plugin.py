"""Signed-request auth plugin -- API key plus per-request HMAC signature.

This module provides the :class:`SignedAuthPlugin`, which implements the
``signed`` auth mode. For every request it:

1. Adds ``apikey``, a fresh ``nonce`` (UUID4) and the current Unix
   ``timestamp`` to the caller's query parameters.
2. Builds the full URL from those parameters and signs
   ``METHOD \\0 URL \\0 BODY`` with the API secret.
3. Appends the resulting ``signature`` as the last query parameter.

Nonce and timestamp are generated inside :meth:`SignedAuthPlugin.authenticate`
and live only in that call's :class:`~letterboxd_client.models.SigningContext`,
so concurrent requests never share or reuse them.

See Also:
    :mod:`letterboxd_client.auth.signing` for the base-string format.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Optional

from letterboxd_client.auth.base import AuthPlugin, AuthResult
from letterboxd_client.auth.signing import build_url, sign
from letterboxd_client.exceptions import MissingCredentialsError
from letterboxd_client.models import AuthMode, SignedAuth, SigningContext

RESERVED_PARAMS = ("apikey", "nonce", "timestamp", "signature")


def new_signing_context(
    api_key: str,
    method: str,
    url: str,
    params: dict[str, Any],
    body: Optional[str] = None,
) -> tuple[SigningContext, dict[str, Any]]:
    """Create the request-scoped signing context and the parameters it covers.

    Returns:
        A tuple of ``(context, signed_params)`` where ``signed_params`` is a
        new dict holding the caller's parameters plus ``apikey``, ``nonce``
        and ``timestamp``. Caller values for any of :data:`RESERVED_PARAMS`
        are dropped so the signing parameters always come last.
    """
    nonce = str(uuid.uuid4())
    timestamp = int(time.time())

    signed_params = {k: v for k, v in params.items() if k not in RESERVED_PARAMS}
    signed_params["apikey"] = api_key
    signed_params["nonce"] = nonce
    signed_params["timestamp"] = timestamp

    context = SigningContext(
        method=method.upper(),
        url=build_url(url, signed_params),
        nonce=nonce,
        timestamp=timestamp,
        body=body or "",
    )
    return context, signed_params


class SignedAuthPlugin(AuthPlugin):
    """Authenticate by signing each request with the API key and secret."""

    @property
    def auth_type(self) -> str:
        return "signed"

    def authenticate(
        self,
        mode: AuthMode,
        method: str,
        url: str,
        params: dict[str, Any],
        body: Optional[str] = None,
    ) -> AuthResult:
        """Return the signed parameter set for one request.

        Args:
            mode: Must be a :class:`~letterboxd_client.models.SignedAuth`.
            method: HTTP method.
            url: Base URL plus path, without a query string.
            params: Caller query parameters (left untouched).
            body: Exact body string to be sent, or ``None``.

        Returns:
            An :class:`~letterboxd_client.auth.base.AuthResult` whose
            ``params`` end with ``signature`` and whose ``headers`` are empty.

        Raises:
            MissingCredentialsError: If *mode* is not a signed mode.
        """
        if not isinstance(mode, SignedAuth):
            raise MissingCredentialsError()

        context, signed_params = new_signing_context(
            mode.api_key, method, url, params, body
        )
        signed_params["signature"] = sign(
            mode.api_secret, context.method, context.url, context.body
        )
        return AuthResult(params=signed_params)
