"""Response normalization and display.

:func:`extract_response_data` and :func:`to_api_response` turn an
:class:`httpx.Response` into the :data:`~letterboxd_client.models.ResponseBody`
union: JSON when the body parses, the raw text otherwise.
:func:`format_api_response` routes an
:class:`~letterboxd_client.models.ApiResponse` to the CLI output system.

See Also:
    :mod:`letterboxd_client.output` -- the output manager that renders data.
"""

from __future__ import annotations

import json

import httpx

from letterboxd_client.models import ApiResponse, ParsedJson, RawText, ResponseBody
from letterboxd_client.output import get_output


def extract_response_data(response: httpx.Response) -> ResponseBody:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), the raw text is kept. An empty body is
    ``RawText("")``.
    """
    if not response.content:
        return RawText(text="")

    try:
        return ParsedJson(value=response.json())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return RawText(text=response.text)


def to_api_response(response: httpx.Response) -> ApiResponse:
    """Wrap an :class:`httpx.Response` without interpreting its status."""
    return ApiResponse(
        status=response.status_code,
        data=extract_response_data(response),
        headers=dict(response.headers),
    )


def format_api_response(response: ApiResponse) -> None:
    """Print an API response using the global output system.

    Writes the status line (e.g. ``HTTP 200``) to stderr, then renders the
    body to stdout.
    """
    output = get_output()
    output.info(f"HTTP {response.status}")

    if isinstance(response.data, ParsedJson):
        output.format_response(response.data.value)
    elif response.data.text:
        content_type = response.headers.get("content-type", "text/plain")
        output.format_response(response.data.text, content_type)
