"""URL normalisation and redirect resolution.

``resolve_final`` probes with ``HEAD`` first and falls back to a streamed
``GET`` because a fair number of file hosts reject ``HEAD`` outright.  It
never raises: when both probes fail the candidate comes back unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin, urlsplit

import httpx

from embedscout.config import settings

logger = logging.getLogger(__name__)

_NETWORK_SCHEMES = ("http", "https")

# Malformed hosts (empty or >63 char labels) fail IDNA encoding with
# UnicodeError before any request is sent.
_PROBE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeError, ValueError)


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def absolutize(raw_url: str, base_url: str) -> Optional[str]:
    """Return *raw_url* as an absolute ``http(s)`` URL, or ``None``.

    Protocol-relative URLs (``//host/path``) take the scheme of *base_url*;
    relative URLs are resolved against *base_url*.  Anything that does not
    end up as a network URL (``javascript:``, ``about:blank``, ``data:``)
    yields ``None`` so the caller can skip it.
    """
    candidate = (raw_url or "").strip()
    if not candidate:
        return None

    if candidate.startswith("//"):
        scheme = urlsplit(base_url).scheme or "https"
        if scheme not in _NETWORK_SCHEMES:
            scheme = "https"
        candidate = f"{scheme}:{candidate}"
    elif not candidate.lower().startswith(("http://", "https://")):
        try:
            candidate = urljoin(base_url, candidate)
        except ValueError:
            return None

    try:
        parts = urlsplit(candidate)
    except ValueError:
        return None
    if parts.scheme.lower() not in _NETWORK_SCHEMES or not parts.netloc:
        return None
    return candidate


# ---------------------------------------------------------------------------
# Redirect resolution
# ---------------------------------------------------------------------------

def _head(client: httpx.Client, url: str) -> str:
    response = client.head(url)
    # 405 / 501 and friends: the host does not want HEAD, let GET try.
    response.raise_for_status()
    return str(response.url)


def _get(client: httpx.Client, url: str) -> str:
    # Stream so a direct media link does not download its whole body.
    with client.stream("GET", url) as response:
        return str(response.url)


def resolve_final(
    candidate_url: str,
    timeout: float | None = None,
    *,
    max_redirects: int | None = None,
) -> str:
    """Follow redirects from *candidate_url* and return the final URL.

    Args:
        candidate_url: Absolute URL to probe.
        timeout: Per-probe timeout in seconds (default
            ``settings.resolve_timeout``).
        max_redirects: Redirect hop limit (default ``settings.max_redirects``).

    Returns:
        The post-redirect URL, or *candidate_url* unchanged if neither probe
        succeeds.
    """
    if not candidate_url:
        return candidate_url

    try:
        client = httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.resolve_timeout if timeout is None else timeout,
            follow_redirects=True,
            max_redirects=settings.max_redirects if max_redirects is None else max_redirects,
        )
    except _PROBE_ERRORS as exc:
        logger.warning("Could not build HTTP client for %s: %s", candidate_url, exc)
        return candidate_url

    with client:
        for probe in (_head, _get):
            try:
                return probe(client, candidate_url)
            except _PROBE_ERRORS as exc:
                logger.debug(
                    "%s probe failed for %s: %s",
                    probe.__name__.lstrip("_").upper(), candidate_url, exc,
                )

    logger.info("Could not resolve %s; keeping it verbatim", candidate_url)
    return candidate_url
