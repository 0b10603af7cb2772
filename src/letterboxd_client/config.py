"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for letterboxd_client:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.letterboxd-client/`` on macOS and Windows. See
  :func:`get_config_dir` and :func:`get_profiles_dir`.
* **Profiles** -- One JSON file per API target, each deserialised into a
  :class:`~letterboxd_client.models.Profile`. Managed via
  :func:`load_profile`, :func:`save_profile`, :func:`delete_profile`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the profile file into the effective profile.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files or interactive prompts, and
  :func:`load_credentials` assembles them into a
  :class:`~letterboxd_client.models.Credentials` bundle.

Profiles only ever record *where* a secret comes from. Access and refresh
tokens are never written to disk.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from letterboxd_client.exceptions import ConfigError
from letterboxd_client.models import Credentials, Profile

_APP_NAME = "letterboxd-client"
DEFAULT_PROFILE_NAME = "default"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on platforms that follow XDG base directory conventions (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/letterboxd-client/`` (default
    ``~/.config/letterboxd-client/``). On macOS/Windows:
    ``~/.letterboxd-client/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return the profiles directory (``<config_dir>/profiles/``), creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return all profile names found in the profiles directory, sorted alphabetically."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def load_profile(name: str) -> Profile:
    """Load and validate a profile from disk.

    Raises:
        ConfigError: If the profile file does not exist, contains invalid
            JSON, or fails Pydantic validation.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Profile.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> Path:
    """Persist a profile atomically to the profiles directory.

    Returns:
        The path written, derived from ``profile.name``.
    """
    path = _profile_path(profile.name)
    data = profile.model_dump(mode="json")
    _atomic_write(path, json.dumps(data, indent=2) + "\n")
    return path


def delete_profile(name: str) -> None:
    """Delete a profile's JSON file from disk.

    Raises:
        ConfigError: If the profile does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> Profile:
    """Resolve the effective profile.

    Precedence (high to low):
        1. CLI flags (``cli_profile``, ``cli_base_url``)
        2. Environment variables (``LETTERBOXD_PROFILE``, ``LETTERBOXD_BASE_URL``)
        3. Profile file
        4. Defaults

    A profile named explicitly (flag or environment) must exist. When no
    name is given and no ``default`` profile has been saved, the built-in
    defaults are used.

    Raises:
        ConfigError: If an explicitly named profile is missing or invalid.
    """
    profile_name = cli_profile or os.environ.get("LETTERBOXD_PROFILE") or None

    if profile_name is not None:
        profile = load_profile(profile_name)
    elif profile_exists(DEFAULT_PROFILE_NAME):
        profile = load_profile(DEFAULT_PROFILE_NAME)
    else:
        profile = Profile(name=DEFAULT_PROFILE_NAME)

    env_base_url = os.environ.get("LETTERBOXD_BASE_URL")
    if cli_base_url:
        profile.base_url = cli_base_url
    elif env_base_url:
        profile.base_url = env_base_url

    return profile


# --- Credential source resolution ---


def resolve_credential(source: str, label: str = "credential") -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Args:
        source: The source descriptor.
        label: What is being resolved, shown in the interactive prompt.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass(f"Enter {label}: ")

    raise ConfigError(f"Unknown credential source format: {source}")


def _resolve_optional(source: Optional[str], label: str) -> Optional[str]:
    # An unset environment variable means the credential is simply absent;
    # file and prompt sources were configured deliberately and must resolve.
    if not source:
        return None
    if source.startswith("env:") and source[4:] not in os.environ:
        return None
    return resolve_credential(source, label) or None


def load_credentials(profile: Profile) -> Credentials:
    """Build a caller-owned :class:`Credentials` bundle from *profile*'s sources.

    Missing environment variables leave the matching field empty; whether
    that is an error is decided when a request is authorized.

    Raises:
        ConfigError: If a ``file:`` or ``prompt`` source cannot be read.
    """
    return Credentials(
        api_key=_resolve_optional(profile.api_key_source, "API key"),
        api_secret=_resolve_optional(profile.api_secret_source, "API secret"),
        access_token=_resolve_optional(profile.access_token_source, "access token"),
    )
