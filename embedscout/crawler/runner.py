"""Site search → content pages → embed links.

The static path only reads raw HTML, so it misses players injected by
script.  ``dynamic=True`` sends every page through the browser extractor
instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from embedscout.config import settings
from embedscout.crawler.fetcher import fetch_html
from embedscout.crawler.markup import (
    StaticEmbed,
    extract_search_links,
    scan_markup,
    search_url,
)
from embedscout.errors import ScrapeError
from embedscout.extractor.models import ScrapeRequest, ScrapeResult

logger = logging.getLogger(__name__)


@dataclass
class PageEmbeds:
    """Embeds found on one content page."""

    page: str
    embeds: List[StaticEmbed] = field(default_factory=list)
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "embeds": [e.to_dict() for e in self.embeds],
            "error": self.error,
        }


def _from_dynamic(result: ScrapeResult) -> List[StaticEmbed]:
    return [StaticEmbed(e.source_method.value, e.final_url) for e in result.embeds]


def crawl(
    query: str,
    *,
    site: Optional[str] = None,
    limit: Optional[int] = None,
    dynamic: bool = False,
    extract: Optional[Callable[[ScrapeRequest], ScrapeResult]] = None,
) -> List[PageEmbeds]:
    """Search *site* for *query* and collect embeds from each hit.

    Args:
        query: Title to search for.
        site: Site root (default ``settings.crawl_site_url``).
        limit: Maximum number of content pages (default ``settings.crawl_limit``).
        dynamic: Render each page in a browser instead of scanning raw HTML.
        extract: Dynamic extractor override (default :func:`extract_embeds`).

    A failure on one page is recorded on that page's entry and does not stop
    the crawl.
    """
    site = (site or settings.crawl_site_url).rstrip("/")
    limit = settings.crawl_limit if limit is None else limit

    listing = fetch_html(search_url(site, query))
    pages = extract_search_links(listing, site, limit)
    logger.info("Search for %r on %s found %d page(s)", query, site, len(pages))

    if dynamic and extract is None:
        from embedscout.extractor.pipeline import extract_embeds  # noqa: PLC0415

        extract = extract_embeds

    results: List[PageEmbeds] = []
    for page in pages:
        if dynamic:
            try:
                found = _from_dynamic(extract(ScrapeRequest.create(page)))
            except ScrapeError as exc:
                logger.warning("Dynamic extraction of %s failed: %s", page, exc)
                results.append(PageEmbeds(page=page, error=str(exc)))
                continue
        else:
            found = scan_markup(fetch_html(page), page)
        results.append(PageEmbeds(page=page, embeds=found))
    return results
