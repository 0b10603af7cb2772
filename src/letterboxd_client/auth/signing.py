"""Canonical request signer.

A signed Letterboxd request carries ``apikey``, ``nonce``, ``timestamp``
and ``signature`` query parameters. The signature is the lowercase hex
HMAC-SHA256, keyed with the API secret, of the *signing base string*::

    <METHOD> \\0 <full URL with query> \\0 <body or empty string>

The URL must be byte-for-byte the one that goes on the wire, so
:func:`build_url` is used both to produce the string that is signed and
the URL handed to the transport.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import re
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

SEPARATOR = "\u0000"

# Characters httpx leaves unescaped in a URL path.
_PATH_SAFE = "/!$&'()*+,;=:@"
_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")


def build_signing_base(method: str, full_url: str, body: Optional[str] = None) -> str:
    """Join method, URL and body with NUL separators."""
    return SEPARATOR.join([method.upper(), full_url, body or ""])


def sign(secret: str, method: str, full_url: str, body: Optional[str] = None) -> str:
    """Return the lowercase hex HMAC-SHA256 signature for a request.

    Args:
        secret: The API secret shared with the server.
        method: HTTP method; upper-cased before signing.
        full_url: Absolute URL including every query parameter that will be
            sent, except ``signature`` itself.
        body: The exact body string that will be transmitted, or ``None``
            for bodiless requests.

    Returns:
        A 64-character lowercase hex digest.
    """
    base = build_signing_base(method, full_url, body)
    mac = hmac.new(secret.encode("utf-8"), base.encode("utf-8"), hashlib.sha256)
    return mac.hexdigest()


def stringify_param(value: Any) -> str:
    """Render a query parameter value the way the API expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify_param(v) for v in value)
    return str(value)


def quote_path(path: str) -> str:
    """Percent-encode *path* the way httpx does before sending it.

    Existing ``%XX`` escapes are kept as they are; everything else outside
    the unreserved and sub-delimiter characters is UTF-8 percent-encoded.
    """
    chunks: list[str] = []
    pos = 0
    for match in _ESCAPE_RE.finditer(path):
        chunks.append(quote(path[pos : match.start()], safe=_PATH_SAFE))
        chunks.append(match.group(0))
        pos = match.end()
    chunks.append(quote(path[pos:], safe=_PATH_SAFE))
    return "".join(chunks)


def build_url(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Append *params* to *url* as an ``application/x-www-form-urlencoded`` query.

    Parameters are emitted in insertion order. A key already present in
    *url* is replaced in place; ``None`` values are skipped. The path is
    percent-encoded with :func:`quote_path`, so the result is the URL
    httpx puts on the wire.

    Example::

        >>> build_url("https://x/films", {"perPage": 1, "sort": "Name"})
        'https://x/films?perPage=1&sort=Name'
        >>> build_url("https://x/search/a b")
        'https://x/search/a%20b'
    """
    parts = urlsplit(url)
    path = quote_path(parts.path)
    if not params:
        return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))

    query: dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        if value is None:
            continue
        query[key] = stringify_param(value)

    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(query), parts.fragment))


def encode_json_body(body: Any) -> str:
    """Serialise *body* as compact JSON (no whitespace between tokens)."""
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def encode_form_body(body: Mapping[str, Any]) -> str:
    """Serialise *body* as an ``application/x-www-form-urlencoded`` string."""
    return urlencode(
        [(key, stringify_param(value)) for key, value in body.items() if value is not None]
    )
