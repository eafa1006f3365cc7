"""Passive network observation during page navigation.

A :class:`NetworkObserver` is attached to a Playwright page before
navigation starts and detached once the page has settled.  It never alters
traffic; it only records URLs the classifier accepts, in first-seen order.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List

from embedscout.config import settings
from embedscout.extractor.classifier import looks_like_provider
from embedscout.extractor.models import Candidate, SourceMethod

logger = logging.getLogger(__name__)

# Anything URL-shaped inside a JSON document.
_URL_IN_TEXT_RE = re.compile(r"https?://[^\s\"'}]+")


def urls_in_text(text: str) -> List[str]:
    """Return URL-shaped substrings of *text*, JSON-escaped slashes undone."""
    if not text:
        return []
    return _URL_IN_TEXT_RE.findall(text.replace("\\/", "/"))


class NetworkObserver:
    """Accumulates provider-looking URLs seen on the wire.

    The dict is the dedup set; insertion order is discovery order.
    """

    def __init__(self) -> None:
        self._seen: dict[str, None] = {}
        self._page: Any = None
        self._detached = False

    # ------------------------------------------------------------------
    # Subscription lifetime
    # ------------------------------------------------------------------

    def attach(self, page: Any) -> None:
        """Register the request/response listeners on *page*."""
        page.on("request", self.on_request)
        page.on("response", self.on_response)
        self._page = page

    def detach(self) -> None:
        """Unregister listeners; later events are ignored."""
        page, self._page = self._page, None
        self._detached = True
        if page is None:
            return
        for event, handler in (("request", self.on_request), ("response", self.on_response)):
            try:
                page.remove_listener(event, handler)
            except Exception as exc:  # page already gone
                logger.debug("remove_listener(%s) failed: %s", event, exc)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def add(self, url: str | None) -> None:
        if self._detached:
            return
        if url and looks_like_provider(url):
            self._seen.setdefault(url, None)

    def on_request(self, request: Any) -> None:
        try:
            self.add(request.url)
        except Exception as exc:
            logger.debug("Ignoring unreadable request: %s", exc)

    def on_response(self, response: Any) -> None:
        if self._detached:
            return
        # One malformed response must never abort the session.
        try:
            self.add(response.url)
            content_type = (response.headers or {}).get("content-type", "")
            if "json" not in content_type.lower():
                return
            body = response.text()
            for url in urls_in_text(body[: settings.json_scan_limit]):
                self.add(url)
        except Exception as exc:
            logger.debug("Skipping response body: %s", exc)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def urls(self) -> List[str]:
        return list(self._seen)

    @property
    def candidates(self) -> List[Candidate]:
        return [Candidate(SourceMethod.NETWORK, url) for url in self._seen]

    def __len__(self) -> int:
        return len(self._seen)
