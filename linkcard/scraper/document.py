"""Document parser: a thin query layer over BeautifulSoup."""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup, Tag

from linkcard.scraper.errors import ParseError

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class Document:
    """A parsed HTML page plus the raw markup it came from."""

    def __init__(self, html: str, url: str) -> None:
        self.html = html
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Tag | None:
        return self.soup.select_one(selector)

    def attr(self, selector: str, name: str) -> str:
        """Return attribute *name* of the first match for *selector*, or ``""``."""
        tag = self.select_one(selector)
        if tag is None:
            return ""
        value = tag.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        return value or ""

    def meta(self, key: str, attribute: str = "property") -> str:
        """Return the ``content`` of ``<meta {attribute}="{key}">``."""
        return self.attr(f'meta[{attribute}="{key}"]', "content")

    def text(self, selector: str) -> str:
        """Whitespace-collapsed text of the first match for *selector*."""
        tag = self.select_one(selector)
        if tag is None:
            return ""
        return collapse_whitespace(tag.get_text())


def parse_document(html: str, url: str) -> Document:
    """Load *html* into a :class:`Document`.

    Raises:
        ParseError: if the markup cannot be loaded at all.
    """
    try:
        return Document(html, url)
    except Exception as exc:
        raise ParseError() from exc
