"""URL helpers shared by the renderer and the sanitizer."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit

# ``//host/...`` and ``\\host\...`` both resolve to another origin.
_PROTOCOL_RELATIVE_RE = re.compile(r"^\s*[/\\]{2}")


def is_protocol_relative(url: str) -> bool:
    """Return ``True`` for scheme-less URLs that name a host (``//host/x``)."""
    return bool(_PROTOCOL_RELATIVE_RE.match(url))


def resolve_url(url: str, base: str) -> str:
    """Resolve *url* against the absolute URL *base*.

    Raises
    ------
    ValueError
        If *base* is not an absolute URL or either value cannot be parsed.
    """
    parsed_base = urlsplit(base)
    if not parsed_base.scheme or not parsed_base.netloc:
        raise ValueError(f"base URL is not absolute: {base!r}")
    # urlsplit raises ValueError for malformed netlocs (e.g. "http://[::1")
    urlsplit(url)
    resolved = urljoin(base, url.strip())
    urlsplit(resolved)
    return resolved
