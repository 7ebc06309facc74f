"""
services/source_map_cache.py
----------------------------
Per-file cache of parsed source maps.

For a compiled file at ``P`` the map is expected at ``P + ".map"``. The
first lookup for a path reads and parses the map in a worker thread; every
later lookup for the same path is served from memory. A missing, unreadable,
malformed or slow map is recorded as absent and never reported as an error.
"""

import asyncio
import os
from typing import Optional

from config import SOURCE_MAP_LOAD_TIMEOUT_SECONDS
from models.source_map import SourceMapEntry
from services.source_map_parser import SourceMapConsumer
from utils.logger import get_logger

logger = get_logger(__name__)

MAP_SUFFIX = ".map"


class SourceMapCache:
    """
    Memoizes ``SourceMapEntry`` per compiled file path for the cache's lifetime.

    Concurrent first lookups of the same path may both load the map; the
    entry is only stored once fully built, so readers never see a partial one.
    """

    def __init__(self, load_timeout: Optional[float] = SOURCE_MAP_LOAD_TIMEOUT_SECONDS):
        """
        Args:
            load_timeout: Seconds to wait for one map to load. ``None`` or
                ``0`` waits indefinitely.
        """
        self.load_timeout = load_timeout or None
        self._entries: dict[str, SourceMapEntry] = {}

    async def lookup(self, compiled_path: str) -> SourceMapEntry:
        """
        Get the source map entry for a compiled file.

        Args:
            compiled_path: Path of the running file, as found on the stack.

        Returns:
            A present entry with a consumer, or an absent entry.
        """
        entry = self._entries.get(compiled_path)
        if entry is not None:
            return entry

        entry = await self._load(compiled_path)
        self._entries[compiled_path] = entry
        return entry

    async def _load(self, compiled_path: str) -> SourceMapEntry:
        map_path = compiled_path + MAP_SUFFIX
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(_read_entry, map_path),
                timeout=self.load_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Timed out after {self.load_timeout}s loading source map {map_path}; "
                f"falling back to compiled positions."
            )
            return SourceMapEntry.absent()

    def clear(self) -> None:
        """Forget every cached entry."""
        self._entries.clear()

    def __contains__(self, compiled_path: str) -> bool:
        return compiled_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _read_entry(map_path: str) -> SourceMapEntry:
    """Blocking part of a load: existence check, read and parse."""
    if not os.path.isfile(map_path):
        logger.debug(f"No source map at {map_path}")
        return SourceMapEntry.absent()
    try:
        with open(map_path, encoding="utf-8") as f:
            consumer = SourceMapConsumer.from_json(f.read())
    except Exception as e:
        # any read or parse failure, RecursionError included, means no map
        logger.warning(f"Ignoring unusable source map {map_path}: {e!r}")
        return SourceMapEntry.absent()
    logger.debug(f"Loaded source map {map_path}")
    return SourceMapEntry.loaded(consumer)
