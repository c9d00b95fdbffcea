"""HTTP fetcher: one bounded, streamed GET with SSRF, status and content-type checks."""

from __future__ import annotations

import logging
from time import monotonic

import httpx

from linkcard.config import settings
from linkcard.scraper.errors import (
    ExtractionError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    UnsupportedContentTypeError,
)
from linkcard.scraper.models import RawPage
from linkcard.scraper.safety import check_public_url
from linkcard.scraper.urls import normalize_request_url, resolve_url

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = {301, 302, 303, 307, 308}


def _default_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "Accept-Encoding": "gzip, deflate",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


def _check_deadline(deadline: float) -> None:
    if monotonic() > deadline:
        raise FetchTimeoutError()


def _open_following_redirects(
    client: httpx.Client, method: str, url: str, deadline: float
) -> httpx.Response:
    """Send a streamed *method* request, following redirects by hand so every
    hop passes the SSRF guard.

    Only headers have been read when this returns; the caller must close the
    response.
    """
    current = url
    for _ in range(settings.max_redirects + 1):
        _check_deadline(deadline)
        response = client.send(client.build_request(method, current), stream=True)
        location = response.headers.get("location")
        if response.status_code not in _REDIRECT_STATUSES or not location:
            return response
        response.close()
        target = resolve_url(current, location)
        logger.debug("Redirect %s -> %s", current, target)
        check_public_url(target)
        current = target
    raise NetworkError(f"Too many redirects (more than {settings.max_redirects})")


def _read_capped(response: httpx.Response, deadline: float) -> bytes:
    """Read the body up to ``settings.max_body_bytes``, within the deadline."""
    limit = settings.max_body_bytes
    body = bytearray()
    for chunk in response.iter_bytes():
        _check_deadline(deadline)
        body.extend(chunk)
        if len(body) >= limit:
            logger.info("Truncating body of %s at %d bytes", response.url, limit)
            return bytes(body[:limit])
    return bytes(body)


def _decode(response: httpx.Response, body: bytes) -> str:
    try:
        return body.decode(response.encoding or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch_url(url: str) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    The URL is normalised and checked before any network access.  Status and
    content type are checked from the headers alone, so a rejected response
    body is never downloaded.  The whole call, redirects and body included,
    is bounded by ``settings.fetch_timeout``.  A single attempt is made;
    there is no retry.

    Raises:
        ExtractionError: one of the classified failures (invalid URL,
            unsupported scheme, private network, timeout, network error,
            HTTP status, unsupported content type).
    """
    url = normalize_request_url(url)
    check_public_url(url)

    deadline = monotonic() + settings.fetch_timeout
    try:
        with httpx.Client(
            headers=_default_headers(),
            timeout=settings.fetch_timeout,
            follow_redirects=False,
        ) as client:
            response = _open_following_redirects(client, "GET", url, deadline)
            try:
                if not response.is_success:
                    raise HttpStatusError(response.status_code, response.reason_phrase)

                content_type = response.headers.get("content-type", "")
                if "text/html" not in content_type.lower():
                    raise UnsupportedContentTypeError(content_type)

                html = _decode(response, _read_capped(response, deadline))
                final_url = str(response.url)
                status_code = response.status_code
            finally:
                response.close()
    except httpx.TimeoutException as exc:
        logger.info("Timed out fetching %s after %ss", url, settings.fetch_timeout)
        raise FetchTimeoutError() from exc
    except httpx.HTTPError as exc:
        logger.info("Network error fetching %s: %s", url, exc)
        raise NetworkError() from exc

    logger.info("Fetched %s (HTTP %s, %d chars)", final_url, status_code, len(html))
    return RawPage(
        url=url,
        html=html,
        status_code=status_code,
        content_type=content_type,
        final_url=final_url,
    )


def image_is_reachable(url: str) -> bool:
    """Best-effort HEAD check of an image URL, redirects guarded hop by hop.

    Never raises: any failure, including a redirect into a private network,
    counts as unreachable.
    """
    if not url.startswith(("http://", "https://")):
        return False

    deadline = monotonic() + settings.image_verify_timeout
    try:
        check_public_url(url)
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.image_verify_timeout,
            follow_redirects=False,
        ) as client:
            response = _open_following_redirects(client, "HEAD", url, deadline)
            response.close()
    except (ExtractionError, httpx.HTTPError) as exc:
        logger.warning("Image check failed for %s: %s", url, exc)
        return False

    if not response.is_success:
        logger.warning("Image check for %s returned HTTP %s", url, response.status_code)
        return False
    return True
