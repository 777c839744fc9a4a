"""Typed async database access.

SQLite via stdlib ``sqlite3`` + ``anyio``. SQL in, dataclasses out.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file
    sqlite:///:memory:             # In-memory SQLite

Concurrency:
    - One SQLite connection, serialized by an ``anyio.Lock``
    - ``transaction()`` pins the connection to the current task (ContextVar)
      so statements inside the block reuse it without re-locking
"""

from __future__ import annotations

import sys
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import anyio

from wren.data._mapping import map_row, map_rows
from wren.data.errors import DataError, QueryError

if TYPE_CHECKING:
    from wren.config import CmsConfig

# Per-task connection tracking. Set inside transaction(); query methods
# check this to reuse the transaction's connection instead of re-locking.
_current_conn: ContextVar[Any] = ContextVar("wren_db_conn")


def _in_transaction() -> bool:
    """Check if the current task is inside a managed transaction."""
    try:
        _current_conn.get()
        return True
    except LookupError:
        return False


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Typed async database access.

    Usage::

        db = Database("sqlite:///cms.db")

        @dataclass(frozen=True, slots=True)
        class PageRow:
            id: int
            url: str | None

        rows = await db.fetch(PageRow, "SELECT id, url FROM wren_page")
        row = await db.fetch_one(PageRow, "SELECT id, url FROM wren_page WHERE id = ?", 42)

        # Execute (INSERT/UPDATE/DELETE)
        await db.execute("UPDATE wren_page SET url = ? WHERE id = ?", "/about", 42)

        # Transaction (atomic multi-statement)
        async with db.transaction():
            page_id = await db.insert("INSERT INTO wren_page (url) VALUES (?)", "/a")
            await db.execute("INSERT INTO wren_block (page_id) VALUES (?)", page_id)
    """

    __slots__ = ("_async_lock", "_config", "_conn", "_connect_lock", "_initialized", "_path")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        self._path = _parse_sqlite_path(url)
        # Locks are created lazily: they cannot exist before an event loop does
        self._async_lock: anyio.Lock | None = None
        self._connect_lock: anyio.Lock | None = None
        self._conn: Any = None
        self._initialized = False

    @classmethod
    def from_config(cls, config: CmsConfig) -> Database:
        """Build a database from ``database_url`` and ``echo`` in *config*."""
        return cls(config.database_url, echo=config.echo)

    # -- Connection management --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[Any]:
        """Acquire the connection, release when done.

        Inside a ``transaction()`` block, reuses the transaction's
        connection (the lock is already held). Otherwise serializes
        access through the async lock.
        """
        if not self._initialized:
            await self.connect()

        try:
            conn = _current_conn.get()
        except LookupError:
            pass
        else:
            yield conn
            return

        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute multiple statements atomically.

        Auto-commits on clean exit, rolls back on exception. Nesting is
        transparent — an inner ``transaction()`` joins the outer one.
        """
        if not self._initialized:
            await self.connect()

        if _in_transaction():
            yield
            return

        if self._async_lock is None:
            self._async_lock = anyio.Lock()
        async with self._async_lock:
            conn = self._conn
            token = _current_conn.set(conn)
            try:
                conn.autocommit = False
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                conn.autocommit = True
                _current_conn.reset(token)

    # -- Echo / query logging --

    def _log_query(self, sql: str, params: Sequence[Any], elapsed: float) -> None:
        """Log a query to stderr when echo is enabled."""
        if not self._config.echo:
            return
        ms = elapsed * 1000
        param_str = f"  params={params!r}" if params else ""
        print(f"[wren.data] {ms:6.1f}ms  {sql}{param_str}", file=sys.stderr)

    # -- Public query API --

    async def fetch[T](self, cls: type[T], sql: str, /, *params: Any) -> list[T]:
        """Execute a query and return all rows as typed dataclasses."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
                columns = [desc[0] for desc in cursor.description]
                return map_rows(cls, [dict(zip(columns, row, strict=True)) for row in rows])
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def fetch_one[T](self, cls: type[T], sql: str, /, *params: Any) -> T | None:
        """Execute a query and return the first row, or ``None``."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
                if row is None:
                    return None
                columns = [desc[0] for desc in cursor.description]
                return map_row(cls, dict(zip(columns, row, strict=True)))
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Execute a query and return the first column of the first row.

        Useful for COUNT, MAX, and the like::

            count = await db.fetch_val("SELECT COUNT(*) FROM wren_page")
        """
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                row = await cursor.fetchone()
                return None if row is None else row[0]
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement (INSERT/UPDATE/DELETE) and return rows affected."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                return cursor.rowcount
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def insert(self, sql: str, /, *params: Any) -> int:
        """Execute an INSERT and return the new row id."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                cursor = await conn.execute(sql, params)
                return cursor.lastrowid
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute_script(self, sql: str, /) -> None:
        """Execute multiple SQL statements at once (schema setup)."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                await conn.executescript(sql)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection.

        Called automatically on first query. Call explicitly if you want
        to fail fast at startup.
        """
        if self._initialized:
            return
        if self._connect_lock is None:
            self._connect_lock = anyio.Lock()
        async with self._connect_lock:
            if self._initialized:
                return
            from wren.data._sqlite import connect as sqlite_connect

            conn = await sqlite_connect(self._path)
            await conn.execute("PRAGMA foreign_keys=ON")
            self._conn = conn
            self._initialized = True

    async def disconnect(self) -> None:
        """Close the connection."""
        if not self._initialized:
            return
        if self._connect_lock is None:
            self._connect_lock = anyio.Lock()
        async with self._connect_lock:
            if not self._initialized:
                return
            await self._conn.close()
            self._conn = None
            self._initialized = False

    # -- Context manager --

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a sqlite:// URL."""
    # sqlite:///path/to/db  ->  path/to/db
    # sqlite:///:memory:    ->  :memory:
    prefix = "sqlite:///"
    if url.startswith(prefix):
        return url[len(prefix) :]
    prefix_short = "sqlite://"
    if url.startswith(prefix_short):
        return url[len(prefix_short) :]
    msg = f"Unsupported database URL scheme: {url!r}. Supported: sqlite:///path"
    raise DataError(msg)
