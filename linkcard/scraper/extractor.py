"""Field extraction: title, description, preview image and favicon.

Every field is an ordered list of candidate sources resolved with
:func:`~linkcard.scraper.candidates.pick_first`.  Structured metadata
(Open Graph / Twitter cards) is trusted first; raw DOM scanning is the
fallback when a page carries no metadata.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, List

from bs4 import Tag

from linkcard.config import settings
from linkcard.scraper.candidates import CandidateSource, first_value
from linkcard.scraper.document import Document, collapse_whitespace
from linkcard.scraper.urls import resolve_url


# ---------------------------------------------------------------------------
# Candidate tables
# ---------------------------------------------------------------------------

_META_IMAGE_SOURCES = [
    ('meta[property="og:image:secure_url"]', "content"),
    ('meta[property="og:image:url"]', "content"),
    ('meta[property="og:image"]', "content"),
    ('meta[name="twitter:image:src"]', "content"),
    ('meta[name="twitter:image"]', "content"),
    ('meta[itemprop="image"]', "content"),
    ('link[rel="image_src"]', "href"),
]

_CONTENT_IMAGE_SELECTORS = [
    "article img",
    "main img",
    ".content img",
    ".post img",
    ".entry-content img",
    '[role="main"] img',
    ".article-body img",
    ".post-content img",
]

# Filename fragments that almost always mean site chrome, not content.
_NON_CONTENT_PATTERNS = ("logo", "icon", "avatar", "profile", "button", "badge")

_FAVICON_SELECTORS = [
    'link[rel="icon"]',
    'link[rel="shortcut icon"]',
    'link[rel="apple-touch-icon"]',
    'link[rel="apple-touch-icon-precomposed"]',
]

_DEFAULT_FAVICON = "/favicon.ico"

_LEADING_INT = re.compile(r"\s*(\d+)")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _dimension(value: str | None) -> int:
    """Parse a declared width/height leniently: ``"300px"`` -> 300, junk -> 0."""
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def _img_src(img: Tag, *attrs: str) -> str:
    for name in attrs:
        value = img.get(name)
        if value and value.strip():
            return value.strip()
    return ""


def _is_content_image(src: str) -> bool:
    lowered = src.lower()
    if any(pattern in lowered for pattern in _NON_CONTENT_PATTERNS):
        return False
    return not lowered.split("?", 1)[0].endswith(".svg")


def _first_container_image(doc: Document) -> str:
    for selector in _CONTENT_IMAGE_SELECTORS:
        img = doc.select_one(selector)
        if img is None:
            continue
        src = _img_src(img, "src", "data-src")
        if src:
            return src
    return ""


def _first_substantial_image(doc: Document) -> str:
    """Scan every ``<img>``: a large declared size wins, else a non-chrome URL."""
    threshold = settings.min_image_dimension
    for img in doc.select("img"):
        src = _img_src(img, "src", "data-src", "data-lazy-src")
        if not src:
            continue
        width = _dimension(img.get("width"))
        height = _dimension(img.get("height"))
        if width > threshold or height > threshold:
            return src
        if _is_content_image(src):
            return src
    return ""


def _image_sources(doc: Document) -> Iterator[CandidateSource]:
    """Image sources in priority order, each already resolved to an absolute URL."""
    for selector, attribute in _META_IMAGE_SOURCES:
        yield selector, lambda s=selector, a=attribute: resolve_url(doc.url, doc.attr(s, a))
    yield "content-container", lambda: resolve_url(doc.url, _first_container_image(doc))
    yield "page-image", lambda: resolve_url(doc.url, _first_substantial_image(doc))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_title(doc: Document) -> str:
    """Return the best title for *doc*, or an empty string."""
    sources: List[CandidateSource] = [
        ("og:title", lambda: doc.meta("og:title")),
        ("twitter:title", lambda: doc.meta("twitter:title", "name")),
        ("og:site_name", lambda: doc.meta("og:site_name")),
        ("meta title", lambda: doc.meta("title", "name")),
        ("h1", lambda: doc.text("h1")),
        ("title", lambda: doc.text("title")),
    ]
    return collapse_whitespace(first_value(sources))


def extract_description(doc: Document) -> str:
    """Return the best description for *doc*, or an empty string."""
    sources: List[CandidateSource] = [
        ("og:description", lambda: doc.meta("og:description")),
        ("twitter:description", lambda: doc.meta("twitter:description", "name")),
        ("meta description", lambda: doc.meta("description", "name")),
        ("og:summary", lambda: doc.meta("og:summary")),
        ("article p", lambda: doc.text("article p:first-of-type")),
        ("main p", lambda: doc.text("main p:first-of-type")),
    ]
    return collapse_whitespace(first_value(sources))


def extract_image(
    doc: Document, verify: Callable[[str], bool] | None = None
) -> str | None:
    """Return an absolute preview image URL for *doc*, or ``None``.

    With *verify*, a candidate it rejects (e.g. an unreachable URL) is
    skipped in favour of the next source.
    """
    return first_value(_image_sources(doc), verify) or None


def extract_favicon(doc: Document) -> str | None:
    """Return an absolute favicon URL, falling back to ``/favicon.ico``."""
    sources: List[CandidateSource] = [
        (selector, lambda s=selector: doc.attr(s, "href"))
        for selector in _FAVICON_SELECTORS
    ]
    sources.append(("default", lambda: _DEFAULT_FAVICON))
    return resolve_url(doc.url, first_value(sources)) or None
