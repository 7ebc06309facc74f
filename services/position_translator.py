"""
services/position_translator.py
-------------------------------
Turns a captured StackFrame into the ``<source>:<line>:<column>`` string
embedded in query comments, going through the compiled file's source map
when one exists.
"""

import os
from typing import Optional

from models.frame import StackFrame
from services.source_map_cache import SourceMapCache
from utils.logger import get_logger

logger = get_logger(__name__)


def compiled_position(frame: StackFrame) -> str:
    """
    Format a frame as its compiled position.

    Only the file's base name is used, so absolute paths never reach query logs.
    """
    return f"{os.path.basename(frame.file_name)}:{frame.line}:{frame.column}"


class PositionTranslator:
    """Resolves frames to original-source positions using a SourceMapCache."""

    def __init__(self, cache: Optional[SourceMapCache] = None):
        self.cache = cache if cache is not None else SourceMapCache()

    async def resolve(self, frame: Optional[StackFrame]) -> Optional[str]:
        """
        Resolve a frame to a position string.

        Args:
            frame: The caller frame, or None if none was found.

        Returns:
            ``<original source>:<line>:<column>`` on a source map hit,
            ``<compiled base name>:<line>:<column>`` otherwise, or None if
            ``frame`` is None or incomplete.
        """
        if frame is None or not frame.is_complete():
            return None

        try:
            entry = await self.cache.lookup(frame.file_name)
            if not entry.present:
                return compiled_position(frame)
            # frame columns are 1-based, map columns 0-based
            original = entry.consumer.original_position_for(frame.line, frame.column - 1)
        except Exception as e:
            logger.warning(f"Source map translation failed for {frame}: {e}")
            return compiled_position(frame)

        if original is None or not original.source:
            return compiled_position(frame)
        return f"{original.source}:{original.line}:{original.column}"
