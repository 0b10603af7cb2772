"""Auth commands -- PKCE values, authorization URLs and tokens.

Provides the ``letterboxd-auth auth`` sub-command group. Tokens are
printed to stdout and never saved; put them in ``LETTERBOXD_ACCESS_TOKEN``
(or whatever the profile's ``access_token_source`` names) to use them.

Typical workflow::

    letterboxd-auth auth authorize-url --client-id app --redirect-uri https://cb
    letterboxd-auth auth exchange --code abc --code-verifier <verifier>
    letterboxd-auth auth refresh --refresh-token <token>
"""

from __future__ import annotations

from typing import Optional

import typer

from letterboxd_client.commands import exit_on_error, get_profile, make_client, run_async
from letterboxd_client.config import load_credentials
from letterboxd_client.exceptions import LetterboxdError
from letterboxd_client.models import Credentials, TokenPair
from letterboxd_client.oauth import (
    build_authorization_url,
    create_pkce_pair,
    create_state,
)
from letterboxd_client.oauth.pkce import DEFAULT_VERIFIER_BYTES
from letterboxd_client.output import format_response, success, suggest

auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("pkce")
def auth_pkce(
    byte_length: int = typer.Option(
        DEFAULT_VERIFIER_BYTES,
        "--bytes",
        help="Random bytes in the verifier (32-96).",
    ),
) -> None:
    """Generate a PKCE code verifier and its S256 challenge.

    Example::

        letterboxd-auth --json auth pkce --bytes 32
    """
    try:
        pair = create_pkce_pair(byte_length)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None
    format_response(pair)


@auth_app.command("authorize-url")
def auth_authorize_url(
    ctx: typer.Context,
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="API client id (defaults to the profile's)."
    ),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Redirect URI (defaults to the profile's)."
    ),
    scope: Optional[list[str]] = typer.Option(
        None, "--scope", help="Scope to request. Repeatable."
    ),
    state: Optional[str] = typer.Option(
        None, "--state", help="State value; generated when omitted."
    ),
    code_challenge: Optional[str] = typer.Option(
        None,
        "--code-challenge",
        help="Existing S256 challenge; a new PKCE pair is generated when omitted.",
    ),
) -> None:
    """Build the URL that starts the Authorization Code flow.

    When no ``--code-challenge`` is given, a fresh PKCE pair is generated
    and its verifier is printed alongside the URL. Keep it for
    ``auth exchange``.
    """
    try:
        profile = get_profile(ctx)
        result: dict[str, str] = {}
        if code_challenge is None:
            pair = create_pkce_pair()
            code_challenge = pair.code_challenge
            result["code_verifier"] = pair.code_verifier
        state = state or create_state()
        url = build_authorization_url(
            client_id or profile.client_id or "",
            code_challenge,
            redirect_uri or profile.redirect_uri or "",
            authorization_endpoint=profile.authorization_url,
            scope=scope or profile.scopes or None,
            state=state,
        )
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None

    format_response({"url": url, "state": state, **result})
    if "code_verifier" in result:
        suggest("Keep the code_verifier for: letterboxd-auth auth exchange")


@auth_app.command("exchange")
def auth_exchange(
    ctx: typer.Context,
    code: str = typer.Option(..., "--code", help="Authorization code from the redirect."),
    code_verifier: str = typer.Option(..., "--code-verifier", help="PKCE code verifier."),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="Redirect URI used for authorization."
    ),
) -> None:
    """Exchange an authorization code for access and refresh tokens."""
    try:
        profile = get_profile(ctx)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None
    client = make_client(profile, Credentials())

    async def _exchange() -> TokenPair:
        async with client:
            return await client.auth.exchange_authorization_code(
                code, code_verifier, redirect_uri
            )

    tokens = run_async(_exchange())
    format_response(tokens)
    success("Authorization code exchanged.")


@auth_app.command("refresh")
def auth_refresh(
    ctx: typer.Context,
    refresh_token: str = typer.Option(..., "--refresh-token", help="Refresh token."),
) -> None:
    """Obtain a new access token with a refresh token."""
    try:
        profile = get_profile(ctx)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None
    client = make_client(profile, Credentials())

    async def _refresh() -> TokenPair:
        async with client:
            return await client.auth.refresh_access_token(refresh_token)

    tokens = run_async(_refresh())
    format_response(tokens)
    success("Access token refreshed.")


@auth_app.command("token")
def auth_token(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="Member username."),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Member password."
    ),
) -> None:
    """Sign in with a username and password (signed password grant).

    Uses the profile's API key and secret. An access token in the
    environment is ignored here, since the password grant must be signed.
    """
    try:
        profile = get_profile(ctx)
        credentials = load_credentials(profile)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None
    credentials.clear_access_token()
    client = make_client(profile, credentials)

    async def _token() -> TokenPair:
        async with client:
            return await client.auth.request_auth_token(username, password)

    tokens = run_async(_token())
    format_response(tokens)
    success(f'Signed in as "{username}".')
