"""Process-wide logging setup shared by the CLI and the HTTP app."""

from __future__ import annotations

import logging

from embedscout.config import settings

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a root handler at *level* (default ``settings.log_level``).

    Safe to call more than once; ``basicConfig`` is a no-op when the root
    logger already has handlers.
    """
    name = (level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=_FORMAT)
    logging.getLogger("embedscout").setLevel(getattr(logging, name, logging.INFO))
