"""Plain HTTP fetches for the static crawler."""

from __future__ import annotations

import logging

import httpx

from embedscout.config import settings

logger = logging.getLogger(__name__)

_MAX_REDIRECTS = 5


def fetch_html(url: str) -> str:
    """Fetch *url* and return its body, or ``""`` on any failure.

    Only a ``200`` counts as success; the crawler treats everything else as
    a page with nothing on it.
    """
    try:
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
            max_redirects=_MAX_REDIRECTS,
        ) as client:
            response = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Fetch of %s failed: %s", url, exc)
        return ""

    if response.status_code != 200:
        logger.warning("Fetch of %s returned HTTP %d", url, response.status_code)
        return ""
    return response.text
