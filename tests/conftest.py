"""Shared fixtures and helpers for the query annotation tests."""

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from db.executor import QueryExecutor
from models.query import QueryResult


class RecordingPool(QueryExecutor):
    """Executor that records what it is asked to run instead of running it."""

    def __init__(self, result: Optional[QueryResult] = None, error: Optional[Exception] = None):
        self.calls: list[tuple[Any, Any]] = []
        self.result = result if result is not None else QueryResult(rows=[{"now": "2026-10-18"}], rowcount=1)
        self.error = error
        self.closed = False

    async def execute(self, text: Any, values: Any = None) -> QueryResult:
        self.calls.append((text, values))
        if self.error is not None:
            raise self.error
        return self.result

    def close(self) -> None:
        self.closed = True

    @property
    def last_text(self) -> Any:
        return self.calls[-1][0]


@pytest.fixture
def recording_pool() -> RecordingPool:
    return RecordingPool()


def write_source_map(
    compiled_path: Path,
    mappings: str,
    sources: tuple[str, ...] = ("app.ts",),
    names: tuple[str, ...] = (),
) -> Path:
    """Write ``<compiled_path>.map`` next to a compiled file."""
    data = {
        "version": 3,
        "file": compiled_path.name,
        "sources": list(sources),
        "names": list(names),
        "mappings": mappings,
    }
    map_path = Path(f"{compiled_path}.map")
    map_path.write_text(json.dumps(data), encoding="utf-8")
    return map_path


def load_source(path: Path, source: str) -> dict:
    """
    Write ``source`` to ``path`` and execute it.

    Functions defined in the returned namespace report ``path`` as their
    file name on the stack, which is how compiled and third-party callers
    are simulated.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    namespace: dict = {}
    exec(compile(source, str(path), "exec"), namespace)
    return namespace
