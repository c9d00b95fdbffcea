"""SSRF guard: refuse to fetch URLs pointing at internal infrastructure."""

from __future__ import annotations

import ipaddress
import re
import socket
from urllib.parse import urlsplit

from linkcard.config import settings
from linkcard.scraper.errors import (
    InvalidUrlError,
    PrivateNetworkError,
    UnsupportedSchemeError,
)

_ALLOWED_SCHEMES = {"http", "https"}

_BLOCKED_HOSTNAMES = {
    "localhost",
    "0.0.0.0",
    "::1",
}

# Textual prefixes of loopback and RFC1918 ranges, checked even when the
# host does not parse as an address.
_PRIVATE_PREFIXES = re.compile(r"^(?:127\.|10\.|192\.168\.|172\.(?:1[6-9]|2\d|3[01])\.)")

# Candidates for the legacy IPv4 spellings the resolver accepts:
# ``127.1``, ``2130706433``, ``0x7f000001``, ``0177.0.0.1``.
_NUMERIC_HOST = re.compile(r"^[0-9][0-9a-fx.]*$")


def _parse_ip(hostname: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        pass
    if not _NUMERIC_HOST.match(hostname):
        return None
    try:
        return ipaddress.IPv4Address(socket.inet_aton(hostname))
    except OSError:
        return None


def _is_private_ip(hostname: str) -> bool:
    """Return True when hostname is an IP literal in a non-public range."""
    ip = _parse_ip(hostname)
    if ip is None:
        return False
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_unspecified
    )


def is_blocked_hostname(hostname: str) -> bool:
    """Return True if *hostname* looks internal.

    With ``settings.block_local_hostnames`` on, any hostname containing
    ``local`` is blocked as well, which also catches some public domains.
    """
    hostname = hostname.strip().lower().rstrip(".")
    if not hostname:
        return True
    if hostname in _BLOCKED_HOSTNAMES or hostname.endswith(".localhost"):
        return True
    if _is_private_ip(hostname) or _PRIVATE_PREFIXES.match(hostname):
        return True
    if settings.block_local_hostnames and "local" in hostname:
        return True
    return False


def check_public_url(url: str) -> None:
    """Raise unless *url* is an http(s) URL on a public-looking host."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname or ""
    except ValueError as exc:
        raise InvalidUrlError() from exc

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise UnsupportedSchemeError()

    if is_blocked_hostname(hostname):
        raise PrivateNetworkError()
