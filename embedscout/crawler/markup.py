"""Regex / DOM scanning of raw (unrendered) HTML."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List
from urllib.parse import quote, urlsplit

from bs4 import BeautifulSoup

from embedscout.extractor.classifier import looks_like_provider
from embedscout.extractor.resolver import absolutize

# Content pages worth visiting from a search result listing.
_CONTENT_PATH_RE = re.compile(r"/(seasons|episodes|movies)/")
_HREF_RE = re.compile(r"""href=["']([^"']+)["']""", re.IGNORECASE)
_ABSOLUTE_URL_RE = re.compile(r"""https?://[^\s'"<>]+""", re.IGNORECASE)


@dataclass(frozen=True)
class StaticEmbed:
    """An embed URL found in raw markup.  ``kind`` is ``iframe`` or ``regex``."""

    kind: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.kind, "url": self.url}


def search_url(site: str, query: str) -> str:
    """Return the site-search URL for *query* (WordPress ``?s=`` style)."""
    return f"{site.rstrip('/')}/?s={quote(query, safe='')}"


def extract_search_links(html: str, site: str, limit: int) -> List[str]:
    """Return up to *limit* content-page links from a search results page.

    A link qualifies when it points at *site* (or is relative) and its path
    contains ``/seasons/``, ``/episodes/`` or ``/movies/``.
    """
    if not html or limit <= 0:
        return []
    host = urlsplit(site).netloc.lower()
    links: List[str] = []
    seen: set[str] = set()
    for href in _HREF_RE.findall(html):
        href = href.strip()
        if not _CONTENT_PATH_RE.search(href):
            continue
        absolute = absolutize(href, site.rstrip("/") + "/")
        if absolute is None or urlsplit(absolute).netloc.lower() != host:
            continue
        if absolute in seen:
            continue
        seen.add(absolute)
        links.append(absolute)
        if len(links) >= limit:
            break
    return links


def scan_markup(html: str, base_url: str) -> List[StaticEmbed]:
    """Find embed URLs in *html* without running any script.

    ``<iframe src>`` values come first, then every absolute URL in the
    markup (inline scripts included) that the provider classifier accepts.
    Results are deduplicated by URL, first occurrence wins.
    """
    if not html:
        return []

    found: List[StaticEmbed] = []
    soup = BeautifulSoup(html, "html.parser")
    for iframe in soup.find_all("iframe"):
        src = (iframe.get("src") or "").strip()
        absolute = absolutize(src, base_url) if src else None
        if absolute:
            found.append(StaticEmbed("iframe", absolute))

    for url in _ABSOLUTE_URL_RE.findall(html):
        if looks_like_provider(url):
            found.append(StaticEmbed("regex", url))

    seen: set[str] = set()
    unique: List[StaticEmbed] = []
    for embed in found:
        if embed.url in seen:
            continue
        seen.add(embed.url)
        unique.append(embed)
    return unique
