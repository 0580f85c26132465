"""
Database session access for the API.

Re-exports from the unified core.db module so routers and tests share one
get_db dependency:
    from backend.app.database import get_db

Database initialization happens explicitly in the application startup hook,
NOT at import time.
"""

from core.db import db, get_db

__all__ = ["db", "get_db"]
