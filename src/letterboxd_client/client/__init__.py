"""HTTP layer for letterboxd_client.

Classes:
    :class:`AsyncClient` -- the request dispatcher, backed by
    :class:`httpx.AsyncClient`.

The endpoint facade lives in :mod:`letterboxd_client.client.api` and is
re-exported from the top-level package as
:class:`~letterboxd_client.LetterboxdClient`.

Example::

    from letterboxd_client.client import AsyncClient

    async with AsyncClient() as client:
        resp = await client.request("GET", "/films", credentials)
"""

from letterboxd_client.client.async_client import AsyncClient
from letterboxd_client.client.response import extract_response_data, to_api_response

__all__ = ["AsyncClient", "extract_response_data", "to_api_response"]
