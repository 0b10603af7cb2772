"""Built-in CLI sub-commands for letterboxd_client.

* :mod:`~letterboxd_client.commands.auth` -- PKCE, authorization URL and
  token endpoint operations.
* :mod:`~letterboxd_client.commands.request` -- send one authorized request.
* :mod:`~letterboxd_client.commands.config` -- create and inspect profiles.

The helpers below are shared by those modules: resolving the active
profile from the Typer context, building a client, and running a
coroutine while translating library errors into exit codes.
"""

from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Optional, TypeVar

import httpx
import typer

from letterboxd_client.client.api import LetterboxdClient
from letterboxd_client.config import resolve_config
from letterboxd_client.exceptions import InvalidUsageError, LetterboxdError
from letterboxd_client.exit_codes import EXIT_CONNECTION_ERROR
from letterboxd_client.models import Credentials, Profile
from letterboxd_client.output import error

T = TypeVar("T")


def get_profile(ctx: typer.Context) -> Profile:
    """Resolve the active profile from the root callback's options."""
    obj = ctx.obj or {}
    return resolve_config(obj.get("profile"), obj.get("base_url"))


def make_client(profile: Profile, credentials: Credentials) -> LetterboxdClient:
    """Build the :class:`~letterboxd_client.LetterboxdClient` a command talks through."""
    return LetterboxdClient(credentials, config=profile)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run *coro* to completion, mapping failures onto CLI exit codes.

    Raises:
        typer.Exit: With the error's ``exit_code`` for library errors, or
            the connection exit code for transport errors.
    """
    try:
        return asyncio.run(coro)
    except LetterboxdError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except httpx.HTTPError as exc:
        error(f"Connection failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR) from None


def exit_on_error(exc: LetterboxdError) -> typer.Exit:
    """Report *exc* and return the matching :class:`typer.Exit` to raise."""
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def parse_params(items: Optional[list[str]]) -> dict[str, str]:
    """Parse repeated ``key=value`` options into a dict.

    Raises:
        InvalidUsageError: If an item has no ``=``.
    """
    params: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Expected key=value, got: {item}")
        params[key] = value
    return params
