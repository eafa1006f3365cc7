"""Provider / embed URL classification.

The token list is static configuration: substrings that tend to show up in
video-player, file-host and CDN URLs, plus stream-manifest extensions.  It is
permissive: a false positive costs one redirect probe, a false
negative loses an embed.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

PROVIDER_TOKENS: tuple[str, ...] = (
    "player", "embed", "mp4upload", "vap", "yourupload", "mp4", "videas",
    "vk.com", "ok.ru", "mega", "megacdn", "mega.nz", "megavideo", "stream",
    "cloud", "vidmoly", "mail.ru", "sibnet", "openload", "dropapk",
    "vidstream", "gdrive", "gvideo", "gogoplay", "fastly", "cdn", "video",
    "hqq", "zuvioeb", "ok", "vk", "m3u8", ".m3u8", ".mpd",
)

# Provider names as they appear on "server" buttons in player pages.
SERVER_NAME_PATTERN = (
    r"vk|ok|videa|mp4upload|yourupload|megaupload|mega|stream|vidmoly"
    r"|videas|sibnet|upload"
)
_SERVER_NAME_RE = re.compile(SERVER_NAME_PATTERN, re.IGNORECASE)


def looks_like_provider(url: Optional[str], tokens: Iterable[str] = PROVIDER_TOKENS) -> bool:
    """Return ``True`` if *url* contains any provider token (case-insensitive)."""
    if not url:
        return False
    low = url.lower()
    return any(tok.lower() in low for tok in tokens)


def names_provider(text: Optional[str]) -> bool:
    """Return ``True`` if *text* mentions a known provider name."""
    if not text:
        return False
    return _SERVER_NAME_RE.search(text) is not None
