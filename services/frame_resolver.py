"""
services/frame_resolver.py
--------------------------
Finds the application code location that issued a query.

Two sources, in order:
    1. An origin bound explicitly with ``query_origin(...)``.
    2. The interpreter stack, innermost first, skipping frames from the
       instrumentation files and from installed third-party packages.
"""

import contextvars
import inspect
import os
from contextlib import contextmanager
from functools import lru_cache
from itertools import islice
from pathlib import PurePath
from typing import Iterable, Iterator, Optional

from config import THIRD_PARTY_MARKERS
from models.frame import StackFrame
from utils.logger import get_logger

logger = get_logger(__name__)

_query_origin: contextvars.ContextVar[Optional[StackFrame]] = contextvars.ContextVar(
    "query_origin", default=None
)


@contextmanager
def query_origin(file_name: str, line: int, column: int = 1) -> Iterator[StackFrame]:
    """
    Attribute every query issued inside the block to an explicit location.

    Usage:
        with query_origin("reports/monthly.py", 42):
            await pool.query("SELECT ...")

    The binding is task-local and is restored on exit, even on error.
    """
    origin = StackFrame(file_name=file_name, line=line, column=column)
    token = _query_origin.set(origin)
    try:
        yield origin
    finally:
        _query_origin.reset(token)


def current_query_origin() -> Optional[StackFrame]:
    """Returns the origin bound by the innermost ``query_origin`` block, if any."""
    return _query_origin.get()


@lru_cache(maxsize=1024)
def _normalize(path: str) -> str:
    return os.path.normcase(os.path.abspath(path))


class FrameResolver:
    """
    Captures the caller frame for a query invocation.

    Args:
        instrumentation_files: Extra files whose frames are never the caller
            (the interception layer). This module is always included.
        third_party_markers: Path components identifying installed
            dependency code.
    """

    def __init__(
        self,
        instrumentation_files: Iterable[str] = (),
        third_party_markers: Iterable[str] = THIRD_PARTY_MARKERS,
    ):
        self.instrumentation_files = frozenset(
            _normalize(path) for path in (__file__, *instrumentation_files)
        )
        self.third_party_markers = frozenset(third_party_markers)

    def is_candidate(self, file_name: Optional[str]) -> bool:
        """True if a frame from ``file_name`` may be reported as the caller."""
        if not file_name:
            return False
        if _normalize(file_name) in self.instrumentation_files:
            return False
        return not any(part in self.third_party_markers for part in PurePath(file_name).parts)

    def capture_caller_frame(self) -> Optional[StackFrame]:
        """
        Find the first qualifying frame, innermost first.

        Returns:
            The caller's StackFrame, or None if every frame is excluded.
        """
        origin = _query_origin.get()
        if origin is not None:
            return origin

        frame = inspect.currentframe()
        try:
            while frame is not None:
                file_name = frame.f_code.co_filename
                if self.is_candidate(file_name):
                    return StackFrame(
                        file_name=file_name,
                        line=frame.f_lineno,
                        column=_column_of(frame),
                    )
                frame = frame.f_back
        finally:
            # frames hold their locals alive
            del frame
        logger.debug("No caller frame outside instrumentation and third-party code")
        return None


def _column_of(frame) -> int:
    """1-based column of the instruction the frame is executing."""
    if frame.f_lasti < 0:
        return 1
    # co_positions yields one entry per 2-byte code unit
    positions = next(islice(frame.f_code.co_positions(), frame.f_lasti // 2, None), None)
    if positions is None or positions[2] is None:
        return 1
    return positions[2] + 1
