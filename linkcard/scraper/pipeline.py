"""Extraction pipeline: fetch -> parse -> extract/detect -> assemble."""

from __future__ import annotations

import logging
from typing import Iterable

from linkcard.config import settings
from linkcard.scraper.document import Document, parse_document
from linkcard.scraper.errors import ExtractionError, ParseError
from linkcard.scraper.extractor import (
    extract_description,
    extract_favicon,
    extract_image,
    extract_title,
)
from linkcard.scraper.fetcher import fetch_url, image_is_reachable
from linkcard.scraper.models import ExtractionResult, RawPage
from linkcard.scraper.technologies import detect_technologies

logger = logging.getLogger(__name__)


def assemble_result(
    *,
    source_url: str,
    title: str,
    description: str,
    image_url: str | None,
    favicon: str | None,
    technologies: Iterable[str],
) -> ExtractionResult:
    """Merge extractor outputs, truncating text fields to their bounds."""
    return ExtractionResult(
        title=title[: settings.max_title_length],
        description=description[: settings.max_description_length],
        image_url=image_url or None,
        favicon=favicon or None,
        technologies=tuple(dict.fromkeys(technologies)),
        source_url=source_url,
    )


def summarize_page(raw: RawPage) -> ExtractionResult:
    """Build an :class:`ExtractionResult` from an already-fetched page."""
    doc: Document = parse_document(raw.html, raw.final_url)

    verify = image_is_reachable if settings.verify_image else None
    image_url = extract_image(doc, verify)

    return assemble_result(
        source_url=raw.url,
        title=extract_title(doc),
        description=extract_description(doc),
        image_url=image_url,
        favicon=extract_favicon(doc),
        technologies=detect_technologies(doc),
    )


def extract_metadata(url: str) -> ExtractionResult:
    """Fetch *url* and return its project-card summary.

    Raises:
        ExtractionError: for every classified failure; nothing is retried.
    """
    raw = fetch_url(url)
    return summarize_page(raw)


def extract(url: str) -> ExtractionResult | ExtractionError:
    """Like :func:`extract_metadata`, but returns the error instead of raising."""
    try:
        return extract_metadata(url)
    except ExtractionError as exc:
        logger.info("Extraction of %r failed: %s (%s)", url, exc.reason, exc.message)
        return exc
    except Exception as exc:
        logger.exception("Unexpected failure extracting %r", url)
        error = ParseError(f"Failed to scrape website: {exc}")
        error.__cause__ = exc
        return error
