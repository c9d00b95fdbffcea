"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from linkcard.api import app

    uvicorn linkcard.api:app --reload
"""

from linkcard.api.app import app

__all__ = ["app"]
