"""Data models for the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch.

    ``url`` is the requested URL; ``final_url`` is where redirects ended up
    and is the base for resolving relative resources.
    """

    url: str
    html: str
    status_code: int
    content_type: str = ""
    final_url: str = ""

    def __post_init__(self) -> None:
        if not self.final_url:
            self.final_url = self.url


@dataclass(frozen=True)
class ExtractionResult:
    """The project-card summary returned to the caller."""

    title: str
    description: str
    image_url: str | None
    favicon: str | None
    source_url: str
    technologies: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "favicon": self.favicon,
            "technologies": list(self.technologies),
            "source_url": self.source_url,
        }
