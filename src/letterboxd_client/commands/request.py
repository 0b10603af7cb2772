"""Request command -- send one authorized request and print the response.

The profile's credentials decide the mode: bearer when an access token
resolves, signed otherwise.

Example::

    letterboxd-auth request GET /films --param perPage=5
    letterboxd-auth request POST /auth/forgotten-password-request \\
        --body '{"emailAddress": "me@example.com"}'
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from letterboxd_client.client.response import format_api_response
from letterboxd_client.commands import (
    exit_on_error,
    get_profile,
    make_client,
    parse_params,
    run_async,
)
from letterboxd_client.config import load_credentials
from letterboxd_client.exceptions import InvalidUsageError, LetterboxdError
from letterboxd_client.exit_codes import EXIT_HTTP_ERROR
from letterboxd_client.models import ApiResponse
from letterboxd_client.output import debug

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _parse_body(body: Optional[str]) -> Optional[dict[str, Any]]:
    if body is None:
        return None
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"--body is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise InvalidUsageError("--body must be a JSON object")
    return parsed


def request_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. GET or POST."),
    path: str = typer.Argument(help="Path below the base URL, e.g. /films."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Query parameter as key=value. Repeatable."
    ),
    body: Optional[str] = typer.Option(None, "--body", help="JSON object body."),
    form: bool = typer.Option(
        False, "--form", help="Send the body form-encoded instead of as JSON."
    ),
) -> None:
    """Send an authorized request and print the response body.

    Exits with code 5 when the response status is 400 or above.
    """
    try:
        profile = get_profile(ctx)
        credentials = load_credentials(profile)
        params = parse_params(param)
        payload = _parse_body(body)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None

    headers = {"Content-Type": FORM_CONTENT_TYPE} if form and payload is not None else None
    if not path.startswith("/"):
        path = f"/{path}"
    debug(f"{method.upper()} {profile.base_url}{path}")

    client = make_client(profile, credentials)

    async def _send() -> ApiResponse:
        async with client:
            return await client.request(
                method, path, params=params, body=payload, headers=headers
            )

    response = run_async(_send())
    format_api_response(response)
    if response.status >= 400:
        raise typer.Exit(code=EXIT_HTTP_ERROR)
