"""Dynamic extraction endpoint.

Routes
------
POST /scrape    Body: {"targetUrl": "https://...", "waitSelector": "...", "timeoutMs": 25000}
"""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from fastapi import APIRouter, HTTPException
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from embedscout.errors import ExtractionError, InputError
from embedscout.extractor import ScrapeRequest, extract_embeds

router = APIRouter()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeBody(BaseModel):
    """Request body.  The original service's ``url`` / ``waitForSelector`` /
    ``timeout`` keys are still accepted."""

    target_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("targetUrl", "target_url", "url")
    )
    wait_selector: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("waitSelector", "wait_selector", "waitForSelector"),
    )
    timeout_ms: Optional[int] = Field(
        None, validation_alias=AliasChoices("timeoutMs", "timeout_ms", "timeout")
    )


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ServerOut(_CamelModel):
    label: str
    href: str = ""


class EmbedOut(_CamelModel):
    method: Literal["iframe", "network"]
    source_url: str
    final_url: str
    title: str = ""


class ScrapeResponse(_CamelModel):
    requested_url: str
    servers: List[ServerOut]
    embeds: List[EmbedOut]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=ScrapeResponse)
def scrape_endpoint(body: ScrapeBody) -> dict[str, Any]:
    """Render the target page and return every embed candidate found.

    ``400`` for a missing or malformed request, ``502`` when the page could
    not be loaded.  A failure never carries a partial ``embeds`` list.
    """
    try:
        request = ScrapeRequest.create(body.target_url, body.wait_selector, body.timeout_ms)
    except InputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        result = extract_embeds(request)
    except ExtractionError as exc:
        raise HTTPException(status_code=502, detail=f"Extraction failed: {exc}") from exc
    except Exception as exc:
        logger.exception("Unexpected failure scraping %s", request.target_url)
        raise HTTPException(status_code=502, detail=f"Extraction failed: {exc}") from exc
    return result.to_dict()
