"""Typed async database access for wren's SQL stores.

SQL in, dataclasses out. Not an ORM.

Basic usage::

    from wren.data import Database

    db = Database("sqlite:///cms.db")
    count = await db.fetch_val("SELECT COUNT(*) FROM wren_page")
"""

from wren.data.database import Database
from wren.data.errors import DataError, QueryError

__all__ = [
    "DataError",
    "Database",
    "QueryError",
]
