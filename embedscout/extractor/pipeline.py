"""End-to-end dynamic extraction for one page."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from embedscout.extractor.assembler import Resolver, assemble
from embedscout.extractor.models import ScrapeRequest, ScrapeResult
from embedscout.extractor.observer import NetworkObserver
from embedscout.extractor.resolver import resolve_final
from embedscout.extractor.session import BrowserSession

logger = logging.getLogger(__name__)


def extract_embeds(
    request: ScrapeRequest,
    *,
    playwright_factory: Optional[Callable[[], Any]] = None,
    resolver: Resolver = resolve_final,
) -> ScrapeResult:
    """Render ``request.target_url`` and return every embed candidate found.

    The browser is closed before redirect resolution starts; resolution
    shares the request's ``timeout_ms`` budget with navigation.

    Raises:
        NavigationError: If the page cannot be loaded.
        ExtractionError: If the browser fails for any other reason.
    """
    started = time.monotonic()
    deadline = started + request.timeout_ms / 1000
    observer = NetworkObserver()

    with BrowserSession(request, playwright_factory=playwright_factory) as session:
        session.arm_interception(observer)
        session.navigate()
        session.settle()
        findings = session.extract_dom()

    logger.info(
        "%s: %d frame(s), %d network candidate(s), %d server label(s)",
        request.target_url, len(findings.frames), len(observer), len(findings.servers),
    )
    result = assemble(
        request.target_url,
        findings.frames,
        observer.candidates,
        findings.servers,
        resolver=resolver,
        deadline=deadline,
    )
    logger.info(
        "%s: %d embed(s) in %.1fs",
        request.target_url, len(result.embeds), time.monotonic() - started,
    )
    return result
