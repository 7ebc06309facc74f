"""
main.py
-------
Example entry point: issues one annotated query.

Responsibilities:
    - Initialize the database connection pool.
    - Wrap it so queries carry a ``/* file=... */`` comment.
    - Run ``SELECT NOW();`` and log the result.

Run with:
    python main.py
"""

import asyncio

from db.connection import init_pool
from db.executor import PgQueryPool
from db.interceptor import annotate_pool
from utils.logger import get_logger

logger = get_logger(__name__)


async def run() -> None:
    """Issue a single query; the server sees it tagged with this file and line."""
    pool = annotate_pool(PgQueryPool())
    try:
        result = await pool.query("SELECT NOW();")
        logger.info(f"Server time: {result.first()}")
    finally:
        pool.close()


def main() -> None:
    """Initialize the pool and run the example query."""
    logger.info("Initializing database...")
    init_pool()
    asyncio.run(run())


if __name__ == "__main__":
    main()
