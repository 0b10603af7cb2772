"""Abstract base class for authentication plugins.

This module defines the two foundational types of the auth subsystem:

- :class:`AuthResult` -- the final query parameters and extra headers an
  auth plugin produces for one request.
- :class:`AuthPlugin` -- the abstract base class every authentication mode
  extends.

There is exactly one plugin per :data:`~letterboxd_client.models.AuthMode`
variant: :class:`~letterboxd_client.plugins.signed.SignedAuthPlugin` and
:class:`~letterboxd_client.plugins.bearer.BearerAuthPlugin`. Keeping the
two algorithms in separate classes means signing and header attachment
never share a code path.

See Also:
    :mod:`letterboxd_client.auth.manager` for registration and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from letterboxd_client.models import AuthMode


class AuthResult:
    """Authorization artifacts for a single outgoing request.

    Args:
        params: The *complete* query parameter set to send. In signed mode
            this includes ``apikey``, ``nonce``, ``timestamp`` and, last,
            ``signature``; in bearer mode it is the caller's parameters.
        headers: HTTP headers to add (e.g. ``{"Authorization": "Bearer ..."}``).

    Example::

        result = AuthResult(headers={"Authorization": "Bearer tok123"})
        assert result.params == {}
    """

    def __init__(
        self,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.params = params or {}
        self.headers = headers or {}

    def __repr__(self) -> str:
        return f"AuthResult(params={sorted(self.params)!r}, headers={sorted(self.headers)!r})"


class AuthPlugin(ABC):
    """Abstract base class for authentication plugins.

    Every concrete mode must provide:

    1. An :attr:`auth_type` property matching the ``mode`` tag of the
       :data:`~letterboxd_client.models.AuthMode` variant it handles.
    2. An :meth:`authenticate` implementation returning an
       :class:`AuthResult` for one request.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Return the auth mode tag this plugin handles (``"signed"`` or ``"bearer"``)."""
        ...

    @abstractmethod
    def authenticate(
        self,
        mode: AuthMode,
        method: str,
        url: str,
        params: dict[str, Any],
        body: Optional[str] = None,
    ) -> AuthResult:
        """Authorize one request.

        Args:
            mode: The resolved auth mode for this request.
            method: HTTP method.
            url: Absolute URL *without* a query string (base URL + path).
            params: Caller query parameters. Implementations must not mutate
                this mapping.
            body: The exact body string that will be sent, or ``None``.

        Returns:
            The final parameters and headers for the request.
        """
        ...
