"""Signature-based technology detection.

All signatures live in the tables below; adding a technology means adding a
row, not a branch.  Checks are independent, so one page can match many
signatures, and shared naming conventions (``#app``, ``#root``) produce
the occasional false positive.
"""

from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Tuple

from linkcard.scraper.document import Document

logger = logging.getLogger(__name__)


class MarkupSignature(NamedTuple):
    label: str
    selectors: Tuple[str, ...] = ()
    html_markers: Tuple[str, ...] = ()


# Substring of the lower-cased ``<meta name="generator">`` content -> label.
GENERATOR_SIGNATURES: Dict[str, str] = {
    "wordpress": "WordPress",
    "drupal": "Drupal",
    "joomla": "Joomla",
    "squarespace": "Squarespace",
    "wix": "Wix",
    "shopify": "Shopify",
    "ghost": "Ghost",
    "hugo": "Hugo",
    "gatsby": "Gatsby",
    "jekyll": "Jekyll",
}

# DOM conventions and raw-HTML markers (case-sensitive) per framework.
MARKUP_SIGNATURES: List[MarkupSignature] = [
    MarkupSignature(
        "Next.js",
        selectors=('script[src*="/_next/"]',),
        html_markers=("__NEXT_DATA__",),
    ),
    MarkupSignature(
        "React",
        selectors=("#root", "#__next", "[data-reactroot]"),
        html_markers=("react", "React"),
    ),
    MarkupSignature(
        "Vue.js",
        selectors=("#app", "[v-cloak]"),
        html_markers=("Vue",),
    ),
    MarkupSignature(
        "Angular",
        selectors=("[ng-app]", "[ng-controller]", "[ng-model]"),
        html_markers=("angular", "Angular"),
    ),
    MarkupSignature(
        "Svelte",
        html_markers=("__svelte", "svelte"),
    ),
]

# Substring of a stylesheet href or inline <style> text -> label.
STYLESHEET_SIGNATURES: Dict[str, str] = {
    "bootstrap": "Bootstrap",
    "tailwind": "Tailwind CSS",
    "bulma": "Bulma",
    "materialize": "Materialize",
    "foundation": "Foundation",
}

UTILITY_CLASS_SELECTOR = '[class*="flex"], [class*="grid"], [class*="px-"], [class*="py-"]'
UTILITY_CLASS_THRESHOLD = 5
UTILITY_CLASS_LABEL = "Tailwind CSS"


# ---------------------------------------------------------------------------
# Individual scanners
# ---------------------------------------------------------------------------

def _from_generator(doc: Document) -> List[str]:
    generator = doc.meta("generator", "name").lower()
    if not generator:
        return []
    return [label for needle, label in GENERATOR_SIGNATURES.items() if needle in generator]


def _from_markup(doc: Document) -> List[str]:
    found = []
    for sig in MARKUP_SIGNATURES:
        if any(marker in doc.html for marker in sig.html_markers) or any(
            doc.select_one(selector) is not None for selector in sig.selectors
        ):
            found.append(sig.label)
    return found


def _from_stylesheets(doc: Document) -> List[str]:
    sources = [
        link.get("href") or ""
        for link in doc.select('link[rel="stylesheet"]')
    ]
    sources.extend(style.get_text() for style in doc.select("style"))

    found = []
    for text in sources:
        lowered = text.lower()
        found.extend(
            label for needle, label in STYLESHEET_SIGNATURES.items() if needle in lowered
        )
    return found


def _from_utility_classes(doc: Document) -> List[str]:
    if len(doc.select(UTILITY_CLASS_SELECTOR)) > UTILITY_CLASS_THRESHOLD:
        return [UTILITY_CLASS_LABEL]
    return []


_SCANNERS = (_from_generator, _from_markup, _from_stylesheets, _from_utility_classes)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def detect_technologies(doc: Document) -> List[str]:
    """Return the deduplicated technology labels recognised in *doc*.

    Order follows scanner and table order, so it is stable for a document
    but carries no meaning.
    """
    labels: Dict[str, None] = {}
    for scanner in _SCANNERS:
        for label in scanner(doc):
            labels.setdefault(label, None)
    if labels:
        logger.debug("Detected technologies: %s", ", ".join(labels))
    return list(labels)
