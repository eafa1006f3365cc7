"""Browser automation session: one Chromium process and one page per request.

Lifecycle::

    CREATED -> LAUNCHED -> PAGE_OPEN -> INTERCEPTION_ARMED -> NAVIGATING
            -> SETTLED -> CLOSED

``FAILED`` can be entered from any state before ``CLOSED`` and always ends in
``CLOSED``.  Use the session as a context manager; leaving the ``with`` block
tears the browser down whether or not an exception is propagating.

Playwright's sync API is used, as elsewhere in the project.  Request and
response events are dispatched on the same thread while ``goto`` and the
waits are in progress, so no locking is needed around the observer.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from playwright.sync_api import Error as PlaywrightError

from embedscout.config import settings
from embedscout.errors import ExtractionError, NavigationError
from embedscout.extractor.dom import DomFindings, extract_dom
from embedscout.extractor.models import ScrapeRequest
from embedscout.extractor.observer import NetworkObserver

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    CREATED = "created"
    LAUNCHED = "launched"
    PAGE_OPEN = "page_open"
    INTERCEPTION_ARMED = "interception_armed"
    NAVIGATING = "navigating"
    SETTLED = "settled"
    FAILED = "failed"
    CLOSED = "closed"


_SEQUENCE = [
    SessionState.CREATED,
    SessionState.LAUNCHED,
    SessionState.PAGE_OPEN,
    SessionState.INTERCEPTION_ARMED,
    SessionState.NAVIGATING,
    SessionState.SETTLED,
]


def _default_factory() -> Any:
    """Return a not-yet-started Playwright context manager.

    Imported lazily so the module can be imported (and unit-tested) without
    touching the browser driver.
    """
    from playwright.sync_api import sync_playwright  # noqa: PLC0415

    return sync_playwright()


class BrowserSession:
    """Owns the browser, context and page for a single :class:`ScrapeRequest`.

    Args:
        request: The validated request being served.
        playwright_factory: Zero-argument callable returning an object with a
            ``start()`` method that yields a Playwright instance.  Defaults to
            ``sync_playwright``; tests inject an in-memory fake.
    """

    def __init__(
        self,
        request: ScrapeRequest,
        *,
        playwright_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.request = request
        self.state = SessionState.CREATED
        self.history: List[SessionState] = [SessionState.CREATED]
        self.page: Any = None
        self._factory = playwright_factory or _default_factory
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None
        self._observer: Optional[NetworkObserver] = None

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "BrowserSession":
        try:
            self.launch()
            self.open_page()
        except BaseException:
            self.close(failed=True)
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close(failed=exc_type is not None)
        return False

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _advance(self, state: SessionState) -> None:
        if self.state not in _SEQUENCE or _SEQUENCE.index(state) != _SEQUENCE.index(self.state) + 1:
            raise RuntimeError(f"illegal session transition {self.state.value} -> {state.value}")
        self._set(state)

    def _set(self, state: SessionState) -> None:
        logger.debug("session %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def launch(self) -> None:
        """Start Playwright and a headless Chromium with sandboxing off."""
        try:
            self._playwright = self._factory().start()
            self._browser = self._playwright.chromium.launch(
                headless=settings.headless,
                args=list(settings.browser_args),
            )
        except Exception as exc:  # driver missing, spawn failure, Playwright Error
            raise ExtractionError(f"browser launch failed: {exc}") from exc
        self._advance(SessionState.LAUNCHED)

    def open_page(self) -> None:
        """Open a fresh context and page; nothing is shared across requests."""
        try:
            self._context = self._browser.new_context(user_agent=settings.user_agent)
            self.page = self._context.new_page()
        except Exception as exc:
            raise ExtractionError(f"could not open page: {exc}") from exc
        self._advance(SessionState.PAGE_OPEN)

    def arm_interception(self, observer: NetworkObserver) -> None:
        """Block heavy static assets and start observing traffic."""
        try:
            self.page.route("**/*", self._route)
        except Exception as exc:
            raise ExtractionError(f"could not enable interception: {exc}") from exc
        observer.attach(self.page)
        self._observer = observer
        self._advance(SessionState.INTERCEPTION_ARMED)

    def _route(self, route: Any) -> None:
        try:
            if route.request.resource_type in settings.blocked_resource_types:
                route.abort()
            else:
                route.continue_()
        except PlaywrightError as exc:
            # Page torn down while the request was in flight.
            logger.debug("route handling failed: %s", exc)

    def navigate(self) -> None:
        """Load the target until the network goes idle.

        Raises:
            NavigationError: If ``goto`` fails or times out.
        """
        self._advance(SessionState.NAVIGATING)
        url = self.request.target_url
        logger.info("Navigating to %s (timeout %d ms)", url, self.request.timeout_ms)
        try:
            self.page.goto(url, wait_until="networkidle", timeout=self.request.timeout_ms)
        except PlaywrightError as exc:
            raise NavigationError(f"navigation to {url} failed: {exc}") from exc

        selector = self.request.wait_selector
        if selector:
            try:
                self.page.wait_for_selector(selector, timeout=settings.selector_timeout_ms)
            except PlaywrightError as exc:
                logger.warning("Selector %r not found on %s: %s", selector, url, exc)

    def settle(self) -> None:
        """Give late script-inserted players a moment to appear."""
        try:
            self.page.wait_for_timeout(settings.settle_delay_ms)
        except PlaywrightError as exc:
            raise ExtractionError(f"page failed while settling: {exc}") from exc
        self._advance(SessionState.SETTLED)

    def extract_dom(self) -> DomFindings:
        """Query the rendered DOM; only valid once the page has settled."""
        if self.state is not SessionState.SETTLED:
            raise RuntimeError(f"cannot extract DOM in state {self.state.value}")
        try:
            return extract_dom(self.page)
        except PlaywrightError as exc:
            raise ExtractionError(f"DOM extraction failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self, failed: bool = False) -> None:
        """Release page, context, browser and driver.  Idempotent."""
        if self.state is SessionState.CLOSED:
            return
        if failed:
            self._set(SessionState.FAILED)

        if self._observer is not None:
            self._observer.detach()
            self._observer = None

        for name, resource, method in (
            ("context", self._context, "close"),
            ("browser", self._browser, "close"),
            ("playwright", self._playwright, "stop"),
        ):
            if resource is None:
                continue
            try:
                getattr(resource, method)()
            except Exception as exc:
                logger.warning("Failed to %s %s: %s", method, name, exc)

        self.page = self._context = self._browser = self._playwright = None
        self._set(SessionState.CLOSED)
