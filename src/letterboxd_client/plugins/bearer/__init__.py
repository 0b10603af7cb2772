"""Bearer token authentication plugin."""

from letterboxd_client.plugins.bearer.plugin import BearerAuthPlugin

__all__ = ["BearerAuthPlugin"]
