"""Signed-request authentication plugin.

Implements the ``signed`` auth mode: ``apikey``, ``nonce``, ``timestamp``
and a trailing HMAC-SHA256 ``signature`` are added to the query string.

Exports:
    :class:`SignedAuthPlugin` -- the plugin class.
    :func:`new_signing_context` -- builds the per-request signing context.
"""

from letterboxd_client.plugins.signed.plugin import SignedAuthPlugin, new_signing_context

__all__ = ["SignedAuthPlugin", "new_signing_context"]
