"""
db/executor.py
--------------
The query execution entry point shared by the plain pool and the annotating
pool.

Every executor exposes ``query(text[, values][, callback])``:
    - ``query(text)`` / ``query(text, values)`` return an ``asyncio.Task``.
    - ``query(text, callback)`` / ``query(text, values, callback)`` return
      None and later call ``callback(None, result)`` or ``callback(error)``.

``query`` must be called while an event loop is running.
"""

import asyncio
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional

from psycopg2 import extras

from db.connection import close_pool, pooled_connection
from models.query import QueryConfig, QueryResult
from utils.logger import get_logger

logger = get_logger(__name__)

QueryCallback = Callable[..., None]


def split_callback(values: Any, callback: Optional[QueryCallback]):
    """Treat a callable second argument as the callback: ``query(text, cb)``."""
    if callback is None and callable(values):
        return None, values
    return values, callback


def settle(coro: Awaitable[Any], callback: Optional[QueryCallback]) -> Optional[asyncio.Task]:
    """
    Schedule ``coro`` and hand its outcome over in the requested style.

    Returns:
        The task when no callback is given, otherwise None.
    """
    task = asyncio.ensure_future(coro)
    if callback is None:
        return task

    def _deliver(done: asyncio.Task) -> None:
        if done.cancelled():
            callback(asyncio.CancelledError())
        elif done.exception() is not None:
            callback(done.exception())
        else:
            callback(None, done.result())

    task.add_done_callback(_deliver)
    return None


class QueryExecutor:
    """Base class for objects exposing the ``query`` entry point."""

    def query(self, text: Any, values: Any = None, callback: Optional[QueryCallback] = None):
        values, callback = split_callback(values, callback)
        # raises RuntimeError before the coroutine is created
        asyncio.get_running_loop()
        return settle(self.execute(text, values), callback)

    async def execute(self, text: Any, values: Any = None) -> QueryResult:
        """Awaitable running one query. Subclasses implement this."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the executor."""


class PgQueryPool(QueryExecutor):
    """
    Runs queries on the psycopg2 pool from ``db.connection``.

    The blocking driver call runs in a worker thread so the event loop stays free.
    """

    async def execute(self, text: Any, values: Any = None) -> QueryResult:
        sql, params = _unpack(text, values)
        return await asyncio.to_thread(self._execute_blocking, sql, params)

    def _execute_blocking(self, sql: str, params: Any) -> QueryResult:
        with pooled_connection() as conn:
            try:
                with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                    cur.execute(sql, params)
                    rows = [dict(row) for row in cur.fetchall()] if cur.description is not None else []
                    rowcount = cur.rowcount
                conn.commit()
                logger.debug(f"Query returned {rowcount} row(s): {sql}")
                return QueryResult(rows=rows, rowcount=rowcount)
            except Exception as e:
                conn.rollback()
                logger.error(f"Query failed: {e}")
                raise

    def close(self) -> None:
        close_pool()


def _unpack(text: Any, values: Any) -> tuple[str, Any]:
    """Split a query payload into SQL text and parameters."""
    if isinstance(text, QueryConfig):
        return text.text, values if values is not None else text.values
    if isinstance(text, Mapping):
        return text["text"], values if values is not None else text.get("values")
    return text, values
