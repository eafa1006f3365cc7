"""Dynamic extractor — render a page and recover its embed links."""

from embedscout.extractor.classifier import looks_like_provider
from embedscout.extractor.models import (
    Candidate,
    ResolvedEmbed,
    ScrapeRequest,
    ScrapeResult,
    ServerLabel,
    SourceMethod,
)
from embedscout.extractor.pipeline import extract_embeds
from embedscout.extractor.resolver import absolutize, resolve_final

__all__ = [
    "extract_embeds",
    "looks_like_provider",
    "resolve_final",
    "absolutize",
    "ScrapeRequest",
    "ScrapeResult",
    "Candidate",
    "ResolvedEmbed",
    "ServerLabel",
    "SourceMethod",
]
