"""Built-in authentication plugins.

One plugin per auth mode:

- :mod:`letterboxd_client.plugins.signed` -- API key + HMAC request signing.
- :mod:`letterboxd_client.plugins.bearer` -- ``Authorization: Bearer`` header.
"""
