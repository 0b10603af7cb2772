"""Bearer token authentication plugin.

This module provides :class:`BearerAuthPlugin`, which implements the
``bearer`` auth mode. The user access token is sent as an
``Authorization: Bearer <token>`` header and the caller's query
parameters pass through unchanged: no ``apikey``, ``nonce``,
``timestamp`` or ``signature`` is ever added.

This plugin does not perform any token exchange or refresh. For obtaining
tokens see :mod:`letterboxd_client.oauth`.
"""

from __future__ import annotations

from typing import Any, Optional

from letterboxd_client.auth.base import AuthPlugin, AuthResult
from letterboxd_client.exceptions import MissingAccessTokenError
from letterboxd_client.models import AuthMode, BearerAuth


class BearerAuthPlugin(AuthPlugin):
    """Authenticate via Bearer token in the Authorization header."""

    @property
    def auth_type(self) -> str:
        return "bearer"

    def authenticate(
        self,
        mode: AuthMode,
        method: str,
        url: str,
        params: dict[str, Any],
        body: Optional[str] = None,
    ) -> AuthResult:
        if not isinstance(mode, BearerAuth):
            raise MissingAccessTokenError()
        return AuthResult(
            params=dict(params),
            headers={"Authorization": f"Bearer {mode.access_token}"},
        )
