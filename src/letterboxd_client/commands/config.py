"""Config commands -- create, inspect and list profiles.

Provides the ``letterboxd-auth config`` sub-command group. Profiles store
endpoints and credential *sources*; the secrets themselves stay in the
environment, in files, or are prompted for.
"""

from __future__ import annotations

from typing import Optional

import typer

from letterboxd_client.commands import exit_on_error, get_profile
from letterboxd_client.config import (
    get_config_dir,
    list_profiles,
    load_credentials,
    load_profile,
    profile_exists,
    save_profile,
)
from letterboxd_client.exceptions import LetterboxdError
from letterboxd_client.models import BASE_URL, Profile
from letterboxd_client.output import (
    format_response,
    get_output,
    info,
    mask_secret,
    success,
    suggest,
)

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("init")
def config_init(
    name: str = typer.Argument(help="Profile name."),
    base_url: str = typer.Option(BASE_URL, "--base-url", help="API base URL."),
    client_id: Optional[str] = typer.Option(None, "--client-id", help="OAuth client id."),
    redirect_uri: Optional[str] = typer.Option(
        None, "--redirect-uri", help="OAuth redirect URI."
    ),
    api_key_source: str = typer.Option(
        "env:LETTERBOXD_API_KEY", "--api-key-source", help="env:VAR, file:/path or prompt."
    ),
    api_secret_source: str = typer.Option(
        "env:LETTERBOXD_API_SECRET",
        "--api-secret-source",
        help="env:VAR, file:/path or prompt.",
    ),
    access_token_source: str = typer.Option(
        "env:LETTERBOXD_ACCESS_TOKEN",
        "--access-token-source",
        help="env:VAR, file:/path or prompt.",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create a profile.

    Example::

        letterboxd-auth config init default --client-id my-app \\
            --redirect-uri https://example.com/callback
    """
    if profile_exists(name) and not force:
        info(f'Profile "{name}" already exists.')
        suggest(f"Overwrite it: letterboxd-auth config init {name} --force")
        raise typer.Exit(code=1)

    profile = Profile(
        name=name,
        base_url=base_url,
        client_id=client_id,
        redirect_uri=redirect_uri,
        api_key_source=api_key_source,
        api_secret_source=api_secret_source,
        access_token_source=access_token_source,
    )
    path = save_profile(profile)
    success(f'Profile "{name}" saved to {path}.')


@config_app.command("show")
def config_show(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(
        None, help="Profile name (defaults to the active profile)."
    ),
) -> None:
    """Show a profile and which credentials currently resolve.

    Secrets are masked.
    """
    try:
        profile = load_profile(name) if name else get_profile(ctx)
        credentials = load_credentials(profile)
    except LetterboxdError as exc:
        raise exit_on_error(exc) from None

    info(f"Config directory: {get_config_dir()}")
    data = profile.model_dump(mode="json")
    data["resolved"] = {
        "api_key": mask_secret(credentials.api_key),
        "api_secret": mask_secret(credentials.api_secret),
        "access_token": mask_secret(credentials.access_token),
        "mode": "bearer" if credentials.access_token else "signed",
    }
    format_response(data)


@config_app.command("list")
def config_list() -> None:
    """List saved profiles."""
    names = list_profiles()
    if not names:
        info("No profiles configured.")
        suggest("Create one: letterboxd-auth config init default")
        return

    rows: list[list[str]] = []
    for profile_name in names:
        try:
            profile = load_profile(profile_name)
        except LetterboxdError:
            rows.append([profile_name, "(invalid)", ""])
            continue
        rows.append([profile_name, profile.base_url, profile.client_id or ""])

    get_output().print_table(["Name", "Base URL", "Client ID"], rows, title="Profiles")
