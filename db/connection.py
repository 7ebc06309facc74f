"""
db/connection.py
----------------
Process-wide psycopg2 pool used by PgQueryPool.
A ThreadedConnectionPool, because queries run in asyncio worker threads.
"""

from contextlib import contextmanager
from typing import Iterator

import psycopg2
from psycopg2 import pool
from config import DATABASE_URL, DB_POOL_MAX_CONN, DB_POOL_MIN_CONN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None


def init_pool(
    min_conn: int = DB_POOL_MIN_CONN,
    max_conn: int = DB_POOL_MAX_CONN,
    dsn: str = DATABASE_URL,
) -> None:
    """
    Open the shared pool. A second call while it is open does nothing.

    Raises:
        psycopg2.OperationalError: If the server cannot be reached.
    """
    global _pool
    if _pool is not None:
        logger.debug("Connection pool already open; init_pool() ignored.")
        return
    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn)
    except psycopg2.OperationalError as e:
        logger.error(f"Could not open connection pool ({min_conn}-{max_conn}): {e}")
        raise
    logger.info(f"Connection pool open ({min_conn}-{max_conn} connections).")


def get_connection():
    """
    Borrow a connection.

    Raises:
        RuntimeError: If init_pool() has not been called.
    """
    if _pool is None:
        raise RuntimeError("Connection pool is closed. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Give a borrowed connection back; a no-op once the pool is closed."""
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def pooled_connection() -> Iterator:
    """Borrow a connection for the duration of a ``with`` block."""
    conn = get_connection()
    try:
        yield conn
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close every pooled connection and forget the pool."""
    global _pool
    if _pool is None:
        return
    _pool.closeall()
    _pool = None
    logger.info("Connection pool closed.")
