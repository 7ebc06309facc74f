"""
models/query.py
---------------
Query payload and result models shared by the pool and the annotator.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class QueryConfig:
    """
    A structured query.

    Only ``text`` is ever rewritten by annotation; ``values`` and ``name``
    pass through untouched.

    Attributes:
        text: SQL text.
        values: Query parameters (psycopg2 ``%s`` / ``%(name)s`` style).
        name: Optional label for the statement, used in logs only.
    """
    text: str
    values: Optional[Any] = None
    name: Optional[str] = None


@dataclass
class QueryResult:
    """
    Outcome of an executed query.

    Attributes:
        rows: Result rows as dicts (empty for statements without a result set).
        rowcount: Rows produced or affected, as reported by the driver.
    """
    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = -1

    def first(self) -> Optional[dict[str, Any]]:
        """Returns the first row, or None if there are no rows."""
        return self.rows[0] if self.rows else None
