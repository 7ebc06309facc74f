"""
services/source_map_parser.py
-----------------------------
Adapter over the ``sourcemap`` package.

Wraps a parsed ``sourcemap`` index behind ``original_position_for`` so the
rest of the pipeline deals in 1-based generated lines and OriginalPosition
objects, and never sees the library's own exceptions.
"""

from typing import Optional

import sourcemap

from models.source_map import OriginalPosition


class SourceMapError(ValueError):
    """Raised when a source map cannot be parsed."""


class SourceMapConsumer:
    """Answers "where did this compiled position come from?" for one map."""

    def __init__(self, index):
        self.index = index

    @classmethod
    def from_json(cls, raw: str) -> "SourceMapConsumer":
        """
        Parse the JSON text of a ``.map`` file.

        Raises:
            SourceMapError: If the library rejects the map for any reason.
        """
        try:
            return cls(sourcemap.loads(raw))
        except Exception as e:
            raise SourceMapError(f"Unusable source map: {e!r}") from e

    def original_position_for(self, line: int, column: int) -> Optional[OriginalPosition]:
        """
        Find the original position for a generated position.

        Args:
            line: 1-based generated line.
            column: 0-based generated column.

        Returns:
            The original position of the closest token at or before
            ``column`` on ``line``, or None if the map has none.
        """
        if line < 1 or column < 0:
            return None
        try:
            token = self.index.lookup(line - 1, column)
        except IndexError:
            return None
        if not token.src:
            return None
        return OriginalPosition(
            source=token.src,
            line=token.src_line + 1,
            column=token.src_col,
            name=token.name,
        )


def parse_source_map(raw: str) -> SourceMapConsumer:
    """Shorthand for ``SourceMapConsumer.from_json``."""
    return SourceMapConsumer.from_json(raw)
