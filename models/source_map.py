"""
models/source_map.py
--------------------
Domain models for source map lookups: cache entries and original positions.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from services.source_map_parser import SourceMapConsumer


@dataclass(frozen=True)
class OriginalPosition:
    """
    A position in the authored source, as recorded by a source map.

    Attributes:
        source: Original source path, as named by the map.
        line: 1-based line number.
        column: Column number, as stored in the map.
        name: Original identifier at that position, if the map names one.
    """
    source: str
    line: int
    column: int
    name: Optional[str] = None


@dataclass(frozen=True)
class SourceMapEntry:
    """
    Cached result of looking for a compiled file's source map.

    Either ``present`` with a parsed ``consumer``, or absent.
    """
    present: bool
    consumer: Optional["SourceMapConsumer"] = None

    @classmethod
    def absent(cls) -> "SourceMapEntry":
        return cls(present=False)

    @classmethod
    def loaded(cls, consumer: "SourceMapConsumer") -> "SourceMapEntry":
        return cls(present=True, consumer=consumer)
