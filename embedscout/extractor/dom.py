"""Post-settle DOM queries: embed frames and provider "server" buttons.

Both queries run inside the page via ``page.evaluate`` and hand back plain
JSON.  Everything that comes back is third-party markup, so it is only ever
length-bounded, classified and turned into URLs here, never executed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List

from embedscout.config import settings
from embedscout.extractor.classifier import SERVER_NAME_PATTERN, names_provider
from embedscout.extractor.models import Candidate, ServerLabel, SourceMethod

logger = logging.getLogger(__name__)

# Hard caps on strings lifted out of the page.
_MAX_URL_LENGTH = 8192
_MAX_TEXT_LENGTH = 200

IFRAME_SCRIPT = """() => Array.from(document.querySelectorAll('iframe')).map(f => ({
    src: f.getAttribute('src') || f.getAttribute('data-src') || f.src || '',
    title: f.getAttribute('title') || '',
    id: f.id || '',
}))"""

SERVER_SCRIPT = """({pattern, maxLength}) => {
    const re = new RegExp(pattern, 'i');
    const out = [];
    document.querySelectorAll('a, button, li, span').forEach(el => {
        const text = (el.textContent || '').trim();
        const href = (el.getAttribute && el.getAttribute('href')) || '';
        if (text.length && text.length < maxLength && re.test(text)) {
            out.push({kind: 'text', label: text, href: href});
        }
        if (el.dataset && el.dataset.server) {
            out.push({kind: 'data', label: el.dataset.server, href: href});
        }
    });
    return out;
}"""


@dataclass
class DomFindings:
    """What the rendered DOM yielded."""

    frames: List[Candidate] = field(default_factory=list)
    servers: List[ServerLabel] = field(default_factory=list)


def _text(value: Any, limit: int = _MAX_TEXT_LENGTH) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()[:limit]


def _url(value: Any) -> str:
    """Return *value* stripped, or ``""`` when it is not a usable URL string.

    Over-long URLs are dropped whole; a truncated URL points somewhere else.
    """
    if not isinstance(value, str):
        return ""
    url = value.strip()
    return "" if len(url) > _MAX_URL_LENGTH else url


def parse_frames(raw: Any) -> List[Candidate]:
    """Turn the iframe query result into DOM candidates, in document order."""
    frames: List[Candidate] = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        src = _url(item.get("src"))
        if not src:
            continue
        title = _text(item.get("title")) or _text(item.get("id"))
        frames.append(Candidate(SourceMethod.DOM_IFRAME, src, title))
    return frames


def parse_servers(raw: Any, max_length: int | None = None) -> List[ServerLabel]:
    """Turn the server-button query result into :class:`ServerLabel` items.

    Text labels are re-checked against the length bound and the provider
    pattern; ``data-server`` labels are kept whatever their text says.
    """
    limit = settings.server_label_max_length if max_length is None else max_length
    servers: List[ServerLabel] = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        label = _text(item.get("label"))
        if not label:
            continue
        if item.get("kind") != "data" and (len(label) >= limit or not names_provider(label)):
            continue
        servers.append(ServerLabel(label=label, href=_url(item.get("href"))))
    return servers


def extract_dom(page: Any) -> DomFindings:
    """Run both DOM queries against a settled *page*."""
    frames = parse_frames(page.evaluate(IFRAME_SCRIPT))
    servers = parse_servers(
        page.evaluate(
            SERVER_SCRIPT,
            {"pattern": SERVER_NAME_PATTERN, "maxLength": settings.server_label_max_length},
        )
    )
    logger.debug("DOM yielded %d frame(s), %d server label(s)", len(frames), len(servers))
    return DomFindings(frames=frames, servers=servers)
