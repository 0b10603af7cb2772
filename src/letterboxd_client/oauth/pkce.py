"""PKCE (Proof Key for Code Exchange) code verifier and challenge generation.

The verifier is ``byte_length`` random bytes from :mod:`secrets`,
base64url-encoded without padding. The S256 challenge is the base64url
SHA-256 digest of the verifier's *encoded* ASCII string, which is what the
Letterboxd authorization server checks against.
"""

from __future__ import annotations

import base64
import hashlib
import secrets

from letterboxd_client.exceptions import InvalidUsageError
from letterboxd_client.models import PkcePair

DEFAULT_VERIFIER_BYTES = 64
# 32..96 raw bytes encode to 43..128 characters, the range allowed for a verifier.
MIN_VERIFIER_BYTES = 32
MAX_VERIFIER_BYTES = 96


def encode_base64url(data: bytes) -> str:
    """Base64url-encode *data* and strip ``=`` padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def create_code_verifier(byte_length: int = DEFAULT_VERIFIER_BYTES) -> str:
    """Generate a high-entropy code verifier.

    Args:
        byte_length: Number of random bytes before encoding.

    Raises:
        InvalidUsageError: If *byte_length* would produce a verifier shorter
            than 43 or longer than 128 characters.
    """
    if not MIN_VERIFIER_BYTES <= byte_length <= MAX_VERIFIER_BYTES:
        raise InvalidUsageError(
            f"byte_length must be between {MIN_VERIFIER_BYTES} and "
            f"{MAX_VERIFIER_BYTES}, got {byte_length}"
        )
    return encode_base64url(secrets.token_bytes(byte_length))


def create_code_challenge(code_verifier: str) -> str:
    """Derive the S256 challenge from the encoded verifier string."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return encode_base64url(digest)


def create_pkce_pair(byte_length: int = DEFAULT_VERIFIER_BYTES) -> PkcePair:
    """Generate a verifier and its matching challenge.

    The verifier must be kept by the caller until the authorization code is
    exchanged; the challenge goes into the authorization URL.
    """
    code_verifier = create_code_verifier(byte_length)
    return PkcePair(
        code_verifier=code_verifier,
        code_challenge=create_code_challenge(code_verifier),
    )


def create_state(byte_length: int = 16) -> str:
    """Generate an opaque ``state`` value for the authorization request."""
    return secrets.token_urlsafe(byte_length)
