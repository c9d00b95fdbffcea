"""Scrape endpoint — turn a pasted link into project-card fields.

Routes
------
POST /scrape    Body: {"url": "https://..."}    → extract_metadata
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from linkcard.scraper import ExtractionError, extract_metadata

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    # Plain str: scheme-less input is normalised by the engine, not rejected here.
    url: str


class ScrapeResponse(BaseModel):
    title: str
    description: str
    image_url: str | None
    favicon: str | None
    technologies: list[str]
    source_url: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=ScrapeResponse)
def scrape_endpoint(body: ScrapeRequest) -> dict[str, Any]:
    """Fetch the page at ``url`` and return its title, description, image,
    favicon and detected technologies.

    Keys are snake_case: ``image_url`` is the card record's ``imageUrl`` and
    ``source_url`` its ``sourceUrl``.  ``source_url`` echoes the requested
    (normalised) URL, not the post-redirect one; older clients that read a
    bare ``url`` key should read ``source_url`` instead.

    Every classified failure is answered with its own status code and a
    ``{"reason", "message"}`` detail.
    """
    try:
        result = extract_metadata(body.url)
    except ExtractionError as exc:
        raise HTTPException(status_code=exc.http_status, detail=exc.to_dict()) from exc
    return result.to_dict()
