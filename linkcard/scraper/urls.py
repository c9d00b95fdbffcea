"""URL helpers: request normalisation and relative-to-absolute resolution."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from linkcard.scraper.errors import InvalidUrlError

logger = logging.getLogger(__name__)

_SELF_CONTAINED_PREFIXES = ("data:", "blob:")
_ABSOLUTE_PREFIXES = ("http://", "https://")


def _manual_join(base: str, candidate: str) -> str:
    """Approximate join used when :func:`urljoin` rejects *candidate*.

    Best-effort only: no dot-segment removal, no query/fragment handling.
    """
    parts = urlsplit(base)
    origin = f"{parts.scheme}://{parts.netloc}"
    if candidate.startswith("/"):
        return origin + candidate
    path = parts.path or "/"
    directory = path[: path.rfind("/") + 1]
    return f"{origin}{directory}{candidate}"


def resolve_url(base: str, candidate: str | None) -> str:
    """Resolve *candidate* against *base* into an absolute URL.

    Returns an empty string when *candidate* is empty or cannot be resolved
    at all; never raises.
    """
    if not candidate:
        return ""
    candidate = candidate.strip()
    if not candidate:
        return ""

    if candidate.startswith(_SELF_CONTAINED_PREFIXES):
        return candidate

    try:
        scheme = urlsplit(base).scheme
    except ValueError:
        scheme = ""

    if candidate.startswith("//"):
        return f"{scheme or 'https'}:{candidate}"

    if candidate.startswith(_ABSOLUTE_PREFIXES):
        return candidate

    try:
        return urljoin(base, candidate)
    except ValueError:
        logger.debug("urljoin rejected %r against %r, joining manually", candidate, base)

    try:
        return _manual_join(base, candidate)
    except ValueError:
        return ""


def normalize_request_url(url: str | None) -> str:
    """Return *url* as an absolute URL string, or raise :class:`InvalidUrlError`.

    Scheme-less input (``example.com/page``, ``//example.com``) is assumed
    to be ``https``.  Scheme *support* is not checked here.
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("URL is required")

    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    elif "://" not in url and not _has_scheme(url):
        url = "https://" + url

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        port = parts.port  # raises ValueError for a non-numeric port
    except ValueError as exc:
        raise InvalidUrlError() from exc

    if parts.scheme in ("http", "https"):
        if not hostname or port == 0 or any(ch.isspace() for ch in hostname):
            raise InvalidUrlError()
    return url


def _has_scheme(url: str) -> bool:
    """True for ``mailto:x`` / ``javascript:x`` style values.

    ``example.com:8080/path`` is treated as a host with a port, not a scheme.
    """
    head, sep, rest = url.partition(":")
    if not sep or not head:
        return False
    if not (head[0].isalpha() and all(ch.isalnum() or ch in "+-." for ch in head)):
        return False
    return not rest[:1].isdigit()
