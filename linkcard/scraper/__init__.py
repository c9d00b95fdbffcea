"""Scraper package — fetch a page and summarise it as a project card."""

from linkcard.scraper.errors import ExtractionError
from linkcard.scraper.fetcher import fetch_url
from linkcard.scraper.models import ExtractionResult, RawPage
from linkcard.scraper.pipeline import extract, extract_metadata
from linkcard.scraper.urls import resolve_url

__all__ = [
    "extract",
    "extract_metadata",
    "fetch_url",
    "resolve_url",
    "ExtractionError",
    "ExtractionResult",
    "RawPage",
]
