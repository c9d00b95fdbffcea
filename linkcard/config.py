"""Runtime knobs for fetching and extraction.

Each field reads its default from an environment variable, so deployments
tune timeouts, size caps and the SSRF policy without code changes.  A `.env`
next to the package is honoured but never overrides variables already set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Optional .env beside the package; real environment variables win.
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "15.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("USER_AGENT", _DEFAULT_USER_AGENT)
    )
    max_body_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_BODY_BYTES", "5000000"))
    )

    # ------------------------------------------------------------------
    # SSRF guard
    # ------------------------------------------------------------------
    block_local_hostnames: bool = field(
        default_factory=lambda: _env_flag("BLOCK_LOCAL_HOSTNAMES", "true")
    )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    max_title_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_TITLE_LENGTH", "200"))
    )
    max_description_length: int = field(
        default_factory=lambda: int(os.environ.get("MAX_DESCRIPTION_LENGTH", "500"))
    )
    min_image_dimension: int = field(
        default_factory=lambda: int(os.environ.get("MIN_IMAGE_DIMENSION", "200"))
    )

    # ------------------------------------------------------------------
    # Preview image HEAD check; unreachable candidates are skipped
    # ------------------------------------------------------------------
    verify_image: bool = field(
        default_factory=lambda: _env_flag("VERIFY_IMAGE", "false")
    )
    image_verify_timeout: float = field(
        default_factory=lambda: float(os.environ.get("IMAGE_VERIFY_TIMEOUT", "5.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING").upper()
    )


# Shared instance; tests monkeypatch its attributes:
#   monkeypatch.setattr("linkcard.scraper.fetcher.settings.fetch_timeout", 1.0)
settings = Settings()
