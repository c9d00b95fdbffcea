"""Error taxonomy for a single extraction call.

Every failure is terminal for the current call.  Each subclass carries a
stable ``reason`` code (suitable for programmatic checks) and a
user-displayable ``message``; ``http_status`` is what the API layer answers
with.
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for every classified extraction failure."""

    reason: str = "extraction-error"
    default_message: str = "Failed to scrape website. Please check the URL and try again."
    http_status: int = 500

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"reason": self.reason, "message": self.message}


class InvalidUrlError(ExtractionError):
    reason = "invalid-url"
    default_message = "Invalid URL format"
    http_status = 400


class UnsupportedSchemeError(ExtractionError):
    reason = "unsupported-scheme"
    default_message = "Only HTTP/HTTPS URLs are allowed"
    http_status = 400


class PrivateNetworkError(ExtractionError):
    reason = "private-network-blocked"
    default_message = "Private URLs are not allowed"
    http_status = 400


class FetchTimeoutError(ExtractionError):
    reason = "timeout"
    default_message = "Request timeout - website took too long to respond"
    http_status = 408


class NetworkError(ExtractionError):
    reason = "network-error"
    default_message = "Failed to fetch website. The site might be down or blocking access."
    http_status = 502


class HttpStatusError(ExtractionError):
    """The site answered, but with a non-2xx status."""

    reason = "http-error"
    http_status = 400

    def __init__(self, status_code: int, reason_phrase: str = "") -> None:
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        super().__init__(f"Website returned {status_code}: {reason_phrase}".rstrip(": "))


class UnsupportedContentTypeError(ExtractionError):
    reason = "unsupported-content-type"
    default_message = "URL does not point to an HTML page"
    http_status = 400

    def __init__(self, content_type: str = "") -> None:
        self.content_type = content_type
        super().__init__()


class ParseError(ExtractionError):
    """Catch-all for documents that cannot be loaded."""

    reason = "parse-error"
    default_message = "Failed to parse the page HTML."
    http_status = 502
