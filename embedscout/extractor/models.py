"""Data models for the dynamic extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional
from urllib.parse import urlsplit

from embedscout.config import settings
from embedscout.errors import InputError


class SourceMethod(str, Enum):
    """Where a candidate URL was discovered."""

    DOM_IFRAME = "iframe"
    NETWORK = "network"


@dataclass(frozen=True)
class ScrapeRequest:
    """One call into the extractor.  Build it with :meth:`create`."""

    target_url: str
    wait_selector: Optional[str] = None
    timeout_ms: int = 25000

    @classmethod
    def create(
        cls,
        target_url: str | None,
        wait_selector: str | None = None,
        timeout_ms: int | None = None,
    ) -> "ScrapeRequest":
        """Validate the raw fields and return an immutable request.

        Raises:
            InputError: If *target_url* is missing or not an absolute
                ``http(s)`` URL, or *timeout_ms* is not a positive integer.
        """
        url = (target_url or "").strip()
        if not url:
            raise InputError("missing url")
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InputError(f"not an absolute http(s) URL: {url!r}")

        if timeout_ms is None:
            timeout_ms = settings.navigation_timeout_ms
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            raise InputError(f"timeout_ms must be a positive integer, got {timeout_ms!r}")

        selector = (wait_selector or "").strip() or None
        return cls(target_url=url, wait_selector=selector, timeout_ms=timeout_ms)


@dataclass(frozen=True)
class Candidate:
    """An unresolved URL found in the DOM or on the wire."""

    source_method: SourceMethod
    raw_url: str
    title: str = ""


@dataclass(frozen=True)
class ServerLabel:
    """A UI element that names a streaming provider (advisory only)."""

    label: str
    href: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "href": self.href}


@dataclass(frozen=True)
class ResolvedEmbed:
    """A candidate after normalisation and redirect resolution."""

    source_method: SourceMethod
    source_url: str
    final_url: str
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.source_method.value,
            "sourceUrl": self.source_url,
            "finalUrl": self.final_url,
            "title": self.title,
        }


@dataclass
class ScrapeResult:
    """The structured answer for one :class:`ScrapeRequest`."""

    requested_url: str
    servers: List[ServerLabel] = field(default_factory=list)
    embeds: List[ResolvedEmbed] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire shape ``{requestedUrl, servers, embeds}``."""
        return {
            "requestedUrl": self.requested_url,
            "servers": [s.to_dict() for s in self.servers],
            "embeds": [e.to_dict() for e in self.embeds],
        }
