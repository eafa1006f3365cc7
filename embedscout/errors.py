"""Exceptions reported to callers of the extractor.

Only :class:`InputError` and :class:`ExtractionError` (including its
:class:`NavigationError` subclass) ever leave the core.  Missing selectors,
unreadable response bodies and unresolvable redirects are absorbed and
degrade the result instead.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for every error the extractor reports."""


class InputError(ScrapeError):
    """The request itself is malformed; no browser was started."""


class ExtractionError(ScrapeError):
    """The browser session failed before the page settled."""


class NavigationError(ExtractionError):
    """The target page could not be loaded (DNS, refused, timeout, ...)."""
