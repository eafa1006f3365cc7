"""Centralised settings for embed-scout.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Browser session
    # ------------------------------------------------------------------
    navigation_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("NAVIGATION_TIMEOUT_MS", "25000"))
    )
    selector_timeout_ms: int = field(
        default_factory=lambda: int(os.environ.get("SELECTOR_TIMEOUT_MS", "5000"))
    )
    settle_delay_ms: int = field(
        default_factory=lambda: int(os.environ.get("SETTLE_DELAY_MS", "700"))
    )
    headless: bool = field(
        default_factory=lambda: _env_bool("BROWSER_HEADLESS", "true")
    )
    # Sandboxing has to be switched off inside most containers / CI runners.
    browser_args: list[str] = field(
        default_factory=lambda: _env_list(
            "BROWSER_ARGS", "--no-sandbox,--disable-setuid-sandbox"
        )
    )
    blocked_resource_types: list[str] = field(
        default_factory=lambda: _env_list(
            "BLOCKED_RESOURCE_TYPES", "image,font,stylesheet"
        )
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "SCRAPER_USER_AGENT",
            "Mozilla/5.0 (compatible; EmbedScout/0.1; +https://github.com/embed-scout)",
        )
    )

    # ------------------------------------------------------------------
    # Extraction heuristics
    # ------------------------------------------------------------------
    json_scan_limit: int = field(
        default_factory=lambda: int(os.environ.get("JSON_SCAN_LIMIT", "2000000"))
    )
    server_label_max_length: int = field(
        default_factory=lambda: int(os.environ.get("SERVER_LABEL_MAX_LENGTH", "30"))
    )

    # ------------------------------------------------------------------
    # URL resolution
    # ------------------------------------------------------------------
    resolve_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RESOLVE_TIMEOUT", "10.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "10"))
    )
    resolve_workers: int = field(
        default_factory=lambda: int(os.environ.get("RESOLVE_WORKERS", "1"))
    )

    # ------------------------------------------------------------------
    # Static crawler
    # ------------------------------------------------------------------
    crawl_site_url: str = field(
        default_factory=lambda: os.environ.get("CRAWL_SITE_URL", "https://tv.animerco.org")
    )
    crawl_limit: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_LIMIT", "20"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "20.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )


# Module-level singleton — import this everywhere:
#   from embedscout.config import settings
settings = Settings()
