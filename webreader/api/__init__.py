"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from webreader.api import app

    uvicorn webreader.api:app --reload
"""

from webreader.api.app import app

__all__ = ["app"]
