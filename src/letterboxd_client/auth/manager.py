"""Auth manager -- the credential resolver.

The :class:`AuthManager` maps auth mode tags (``"signed"``, ``"bearer"``)
to concrete :class:`~letterboxd_client.auth.base.AuthPlugin` instances.
For each request it resolves the caller's
:class:`~letterboxd_client.models.Credentials` into exactly one
:data:`~letterboxd_client.models.AuthMode` and delegates to the matching
plugin:

* ``access_token`` present -> :class:`~letterboxd_client.models.BearerAuth`;
  signing is bypassed entirely.
* otherwise ``api_key`` and ``api_secret`` -> :class:`~letterboxd_client.models.SignedAuth`.
* neither -> :class:`~letterboxd_client.exceptions.MissingCredentialsError`.

The manager holds no per-request state, so one instance can serve any
number of concurrent requests.

See Also:
    :class:`~letterboxd_client.client.async_client.AsyncClient` -- consumes
    the :class:`~letterboxd_client.auth.base.AuthResult` produced here.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from letterboxd_client.auth.base import AuthPlugin, AuthResult
from letterboxd_client.exceptions import InvalidUsageError, MissingCredentialsError
from letterboxd_client.models import BASE_URL, AuthMode, BearerAuth, Credentials, SignedAuth


def resolve_auth_mode(credentials: Credentials) -> AuthMode:
    """Decide which auth mode applies to the next request.

    Raises:
        MissingCredentialsError: If there is no access token and the API key
            or secret is missing.
    """
    if credentials.access_token:
        return BearerAuth(access_token=credentials.access_token)
    if not credentials.api_key or not credentials.api_secret:
        raise MissingCredentialsError()
    return SignedAuth(api_key=credentials.api_key, api_secret=credentials.api_secret)


class AuthManager:
    """Registry and dispatcher for authentication plugins.

    Example::

        from letterboxd_client.auth import AuthManager
        from letterboxd_client.plugins.bearer import BearerAuthPlugin

        manager = AuthManager()
        manager.register(BearerAuthPlugin())
        result = manager.authenticate(credentials, "GET", "https://x/me")
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register an auth plugin, keyed by its :attr:`~AuthPlugin.auth_type`.

        A plugin already registered for the same mode is replaced.
        """
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        """Retrieve a registered plugin by its auth mode tag.

        Raises:
            InvalidUsageError: If no plugin is registered for *auth_type*.
        """
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise InvalidUsageError(
                f"No auth plugin registered for mode '{auth_type}'. "
                f"Available modes: {available}"
            )
        return plugin

    def authenticate(
        self,
        credentials: Credentials,
        method: str,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[str] = None,
    ) -> AuthResult:
        """Resolve the auth mode for *credentials* and authorize one request.

        Args:
            credentials: The caller-owned credential bundle.
            method: HTTP method.
            url: Absolute URL without a query string.
            params: Caller query parameters; never mutated.
            body: Exact body string to be sent, or ``None``.

        Returns:
            The final query parameters and headers for the request.

        Raises:
            MissingCredentialsError: If neither mode can be satisfied.
        """
        mode = resolve_auth_mode(credentials)
        plugin = self.get_plugin(mode.mode)
        return plugin.authenticate(mode, method, url, dict(params or {}), body)

    def list_types(self) -> list[str]:
        """Return the mode tags of all registered plugins, sorted."""
        return sorted(self._plugins.keys())


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` with the ``signed`` and ``bearer`` plugins."""
    from letterboxd_client.plugins.bearer import BearerAuthPlugin
    from letterboxd_client.plugins.signed import SignedAuthPlugin

    manager = AuthManager()
    manager.register(SignedAuthPlugin())
    manager.register(BearerAuthPlugin())
    return manager


def resolve(
    credentials: Credentials,
    method: str,
    path: str,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[str] = None,
    base_url: str = BASE_URL,
) -> AuthResult:
    """Authorize a request against ``base_url + path`` with the default plugins.

    Convenience wrapper over :meth:`AuthManager.authenticate`.
    """
    return create_default_manager().authenticate(
        credentials, method, f"{base_url}{path}", params, body
    )
