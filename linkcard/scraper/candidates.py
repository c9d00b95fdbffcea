"""Pick-first resolution over an ordered list of lazily computed candidates.

Each field extractor describes its sources as ``(source_name, thunk)``
pairs.  Thunks run in order and evaluation stops at the first one whose
trimmed value is non-empty, so expensive DOM scans only happen when the
cheaper metadata sources came up empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

CandidateSource = Tuple[str, Callable[[], Optional[str]]]


@dataclass(frozen=True)
class Candidate:
    source: str
    value: str


def pick_first(
    candidates: Iterable[CandidateSource],
    accept: Callable[[str], bool] | None = None,
) -> Candidate | None:
    """Return the first candidate with a non-empty trimmed value, or ``None``.

    When *accept* is given, a non-empty value it rejects is skipped and the
    search moves on to the next source.
    """
    for source, thunk in candidates:
        value = thunk()
        if not value or not value.strip():
            continue
        value = value.strip()
        if accept is not None and not accept(value):
            logger.debug("Rejected %r from %s", value[:80], source)
            continue
        logger.debug("Picked %r from %s", value[:80], source)
        return Candidate(source=source, value=value)
    return None


def first_value(
    candidates: Iterable[CandidateSource],
    accept: Callable[[str], bool] | None = None,
) -> str:
    """Like :func:`pick_first` but returns just the value (``""`` if none)."""
    found = pick_first(candidates, accept)
    return found.value if found else ""
