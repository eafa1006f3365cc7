"""Shared fixtures: an in-memory stand-in for Playwright's sync API.

``FakePage.goto`` replays a scripted list of network events through the
route handler and the ``request`` / ``response`` listeners, the same way a
real page would deliver them while navigating.  ``evaluate`` answers the two
DOM queries from canned data.  No browser is launched anywhere in the suite.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from embedscout.extractor.dom import IFRAME_SCRIPT, SERVER_SCRIPT


class FakeRequest:
    def __init__(self, url: str, resource_type: str = "xhr") -> None:
        self.url = url
        self.resource_type = resource_type


class FakeResponse:
    def __init__(self, url: str, headers: dict | None = None, body: str | Exception = "") -> None:
        self.url = url
        self.headers = headers or {}
        self._body = body

    def text(self) -> str:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeRoute:
    def __init__(self, request: FakeRequest, log: list) -> None:
        self.request = request
        self._log = log

    def abort(self) -> None:
        self._log.append(("abort", self.request.url))

    def continue_(self) -> None:
        self._log.append(("continue", self.request.url))


class FakePage:
    """Scriptable page.

    Args:
        events: ``("request", FakeRequest)`` / ``("response", FakeResponse)``
            pairs emitted during ``goto``.
        frames: Canned result of the iframe query.
        servers: Canned result of the server-label query.
        goto_error: Raised from ``goto`` after the events have been emitted.
        selector_found: When ``False`` ``wait_for_selector`` times out.
    """

    def __init__(
        self,
        events: list | None = None,
        frames: list | None = None,
        servers: list | None = None,
        goto_error: Exception | None = None,
        selector_found: bool = True,
    ) -> None:
        self.events = events or []
        self.frames = frames or []
        self.servers = servers or []
        self.goto_error = goto_error
        self.selector_found = selector_found
        self.listeners: dict[str, list[Callable]] = {}
        self.route_handler: Callable | None = None
        self.route_log: list = []
        self.calls: list = []

    # Event emitter -------------------------------------------------------
    def on(self, event: str, handler: Callable) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self.listeners.get(event, []).remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(payload)

    # Page API ------------------------------------------------------------
    def route(self, pattern: str, handler: Callable) -> None:
        self.calls.append(("route", pattern))
        self.route_handler = handler

    def goto(self, url: str, wait_until: str = "load", timeout: int = 30000) -> None:
        self.calls.append(("goto", url, wait_until, timeout))
        for kind, payload in self.events:
            if kind == "request" and self.route_handler is not None:
                self.route_handler(FakeRoute(payload, self.route_log))
            self.emit(kind, payload)
        if self.goto_error is not None:
            raise self.goto_error

    def wait_for_selector(self, selector: str, timeout: int = 30000) -> None:
        self.calls.append(("wait_for_selector", selector, timeout))
        if not self.selector_found:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")

    def wait_for_timeout(self, ms: int) -> None:
        self.calls.append(("wait_for_timeout", ms))

    def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == IFRAME_SCRIPT:
            return self.frames
        if script == SERVER_SCRIPT:
            self.calls.append(("servers", arg))
            return self.servers
        raise AssertionError("unexpected script")


class FakeContext:
    def __init__(self, page: FakePage, log: list) -> None:
        self._page = page
        self._log = log

    def new_page(self) -> FakePage:
        self._log.append("new_page")
        return self._page

    def close(self) -> None:
        self._log.append("context.close")


class FakeBrowser:
    def __init__(self, page: FakePage, log: list) -> None:
        self._page = page
        self._log = log

    def new_context(self, **kwargs: Any) -> FakeContext:
        self._log.append("new_context")
        return FakeContext(self._page, self._log)

    def close(self) -> None:
        self._log.append("browser.close")


class FakeChromium:
    def __init__(self, page: FakePage, log: list, launch_error: Exception | None) -> None:
        self._page = page
        self._log = log
        self._launch_error = launch_error

    def launch(self, **kwargs: Any) -> FakeBrowser:
        self._log.append(("launch", kwargs))
        if self._launch_error is not None:
            raise self._launch_error
        return FakeBrowser(self._page, self._log)


class FakePlaywright:
    def __init__(self, page: FakePage, log: list, launch_error: Exception | None) -> None:
        self.chromium = FakeChromium(page, log, launch_error)
        self._log = log

    def stop(self) -> None:
        self._log.append("playwright.stop")


class FakeDriver:
    """What ``sync_playwright()`` returns: call ``start()`` to get a Playwright."""

    def __init__(self, page: FakePage, launch_error: Exception | None = None) -> None:
        self.page = page
        self.log: list = []
        self._launch_error = launch_error

    def start(self) -> FakePlaywright:
        self.log.append("start")
        return FakePlaywright(self.page, self.log, self._launch_error)

    def __call__(self) -> "FakeDriver":
        return self


@pytest.fixture()
def make_page():
    """Return the :class:`FakePage` class."""
    return FakePage


@pytest.fixture()
def make_driver():
    """Return a builder ``(page, launch_error=None) -> FakeDriver``.

    The driver is itself the ``playwright_factory``.
    """
    return FakeDriver


@pytest.fixture()
def fake_request():
    return FakeRequest


@pytest.fixture()
def fake_response():
    return FakeResponse


@pytest.fixture()
def playwright_errors():
    return PlaywrightError, PlaywrightTimeoutError


@pytest.fixture(autouse=True)
def _fast_settings(monkeypatch):
    """Keep timings tiny and resolution sequential in every test."""
    monkeypatch.setattr("embedscout.config.settings.settle_delay_ms", 1)
    monkeypatch.setattr("embedscout.config.settings.selector_timeout_ms", 10)
    monkeypatch.setattr("embedscout.config.settings.resolve_workers", 1)
