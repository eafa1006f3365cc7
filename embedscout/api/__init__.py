"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from embedscout.api import app

    uvicorn embedscout.api:app --reload
"""

from embedscout.api.app import app

__all__ = ["app"]
