"""Static crawl endpoint.

Routes
------
POST /crawl    Body: {"query": "...", "site": "https://...", "limit": 20, "dynamic": false}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from embedscout.crawler import crawl

router = APIRouter()


class CrawlBody(BaseModel):
    query: str = Field(..., min_length=1)
    site: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1, le=200)
    dynamic: bool = False


@router.post("")
def crawl_endpoint(body: CrawlBody) -> dict[str, Any]:
    """Search the site for *query* and list embeds per content page."""
    pages = crawl(body.query, site=body.site, limit=body.limit, dynamic=body.dynamic)
    return {"query": body.query, "pages": [p.to_dict() for p in pages]}
