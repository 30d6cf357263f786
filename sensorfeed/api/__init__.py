"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sensorfeed.api import app

    uvicorn sensorfeed.api:app
"""

from sensorfeed.api.app import app

__all__ = ["app"]
