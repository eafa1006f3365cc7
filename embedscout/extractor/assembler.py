"""Merge DOM and network candidates into a resolved :class:`ScrapeResult`."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from embedscout.config import settings
from embedscout.extractor.models import (
    Candidate,
    ResolvedEmbed,
    ScrapeResult,
    ServerLabel,
)
from embedscout.extractor.resolver import absolutize, resolve_final

logger = logging.getLogger(__name__)

Resolver = Callable[[str, float], str]

# Below this many seconds of budget a probe is not worth starting.
_MIN_PROBE_SECONDS = 0.05


def merge_candidates(*groups: Iterable[Candidate]) -> List[Candidate]:
    """Concatenate *groups* in order, keeping the first of each ``raw_url``.

    Empty URLs and inline ``data:`` URLs are dropped.
    """
    seen: set[str] = set()
    merged: List[Candidate] = []
    for group in groups:
        for candidate in group:
            raw = candidate.raw_url
            if not raw or raw.lower().startswith("data:") or raw in seen:
                continue
            seen.add(raw)
            merged.append(candidate)
    return merged


def _normalise(candidates: Sequence[Candidate], base_url: str) -> List[Tuple[Candidate, str]]:
    pairs: List[Tuple[Candidate, str]] = []
    seen: set[str] = set()
    for candidate in candidates:
        absolute = absolutize(candidate.raw_url, base_url)
        if absolute is None:
            logger.debug("Skipping non-network candidate %r", candidate.raw_url)
            continue
        # Two raw spellings of one address ("/v/1" vs "https://host/v/1").
        if absolute in seen:
            continue
        seen.add(absolute)
        pairs.append((candidate, absolute))
    return pairs


def assemble(
    requested_url: str,
    dom_candidates: Iterable[Candidate],
    network_candidates: Iterable[Candidate],
    servers: Iterable[ServerLabel] = (),
    *,
    resolver: Resolver = resolve_final,
    timeout: Optional[float] = None,
    workers: Optional[int] = None,
    deadline: Optional[float] = None,
) -> ScrapeResult:
    """Build the final result for *requested_url*.

    Args:
        requested_url: The page that was rendered; relative candidates are
            resolved against it.
        dom_candidates: Frame sources, in document order.
        network_candidates: Observed URLs, in first-seen order.
        servers: Advisory provider labels, passed through untouched.
        resolver: ``(url, timeout) -> final_url``; must not raise, but a
            raising resolver only costs that one candidate its redirect hop.
        timeout: Per-candidate probe timeout in seconds
            (default ``settings.resolve_timeout``).
        workers: Resolution pool size; ``1`` resolves sequentially
            (default ``settings.resolve_workers``).
        deadline: ``time.monotonic()`` value after which no more probes
            are started; remaining candidates keep their absolute form.
    """
    per_candidate = settings.resolve_timeout if timeout is None else timeout
    pool_size = max(1, settings.resolve_workers if workers is None else workers)

    merged = merge_candidates(dom_candidates, network_candidates)
    pairs = _normalise(merged, requested_url)

    def resolve_one(pair: Tuple[Candidate, str]) -> ResolvedEmbed:
        candidate, absolute = pair
        final = absolute
        budget = per_candidate
        if deadline is not None:
            budget = min(budget, deadline - time.monotonic())
        if budget < _MIN_PROBE_SECONDS:
            logger.info("Request budget spent; not resolving %s", absolute)
        else:
            try:
                final = resolver(absolute, budget) or absolute
            except Exception as exc:
                logger.warning("Resolution of %s failed: %s", absolute, exc)
        return ResolvedEmbed(
            source_method=candidate.source_method,
            source_url=absolute,
            final_url=final,
            title=candidate.title,
        )

    if pool_size > 1 and len(pairs) > 1:
        with ThreadPoolExecutor(max_workers=min(pool_size, len(pairs))) as pool:
            embeds = list(pool.map(resolve_one, pairs))
    else:
        embeds = [resolve_one(pair) for pair in pairs]

    return ScrapeResult(requested_url=requested_url, servers=list(servers), embeds=embeds)
