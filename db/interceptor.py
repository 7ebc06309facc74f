"""
db/interceptor.py
-----------------
Wraps a query executor so every query carries a comment naming the
source line that issued it:

    SELECT NOW() /* file=reports.ts:5:10 */;

The wrapper is composed around an existing executor rather than patched
into it, and owns the source map cache for its own lifetime.
"""

from typing import Any, Awaitable, Optional

from config import QUERY_COMMENTS_ENABLED
from db import executor
from db.executor import QueryExecutor
from models.frame import StackFrame
from models.query import QueryResult
from services.frame_resolver import FrameResolver
from services.position_translator import PositionTranslator
from services.query_annotator import annotate
from services.source_map_cache import SourceMapCache
from utils.logger import get_logger

logger = get_logger(__name__)

# Frames from these files are never reported as the query's caller.
INSTRUMENTATION_FILES = (__file__, executor.__file__)


class AnnotatingPool(QueryExecutor):
    """
    Executor that annotates queries before handing them to ``inner``.

    Accepts the same call shapes as ``inner.query`` and reports results and
    errors exactly as ``inner`` does; only the query text differs.

    Args:
        inner: The executor that actually runs queries.
        cache: Source map cache to use; a private one is created if omitted.
        frame_resolver: Caller frame resolver; defaults to one that skips
            the interception layer and third-party packages.
    """

    def __init__(
        self,
        inner: QueryExecutor,
        cache: Optional[SourceMapCache] = None,
        frame_resolver: Optional[FrameResolver] = None,
    ):
        self.inner = inner
        self.cache = cache if cache is not None else SourceMapCache()
        self.translator = PositionTranslator(self.cache)
        self.frames = frame_resolver or FrameResolver(instrumentation_files=INSTRUMENTATION_FILES)

    def execute(self, text: Any, values: Any = None) -> Awaitable[QueryResult]:
        """
        Capture the caller and return the coroutine that annotates and
        forwards the query. The stack is read here, before any suspension.
        """
        frame = self._capture()
        return self._forward(frame, text, values)

    def _capture(self) -> Optional[StackFrame]:
        try:
            return self.frames.capture_caller_frame()
        except Exception as e:
            logger.warning(f"Could not capture caller frame: {e}")
            return None

    async def _forward(self, frame: Optional[StackFrame], text: Any, values: Any) -> QueryResult:
        try:
            position = await self.translator.resolve(frame)
            text = annotate(text, position)
        except Exception as e:
            logger.warning(f"Sending query without source comment: {e}")
        return await self.inner.query(text, values)

    def close(self) -> None:
        """Drop cached source maps and close the wrapped executor."""
        self.cache.clear()
        self.inner.close()


def annotate_pool(
    pool: QueryExecutor,
    enabled: bool = QUERY_COMMENTS_ENABLED,
    **kwargs,
) -> QueryExecutor:
    """
    Wrap ``pool`` in an AnnotatingPool.

    Returns ``pool`` unchanged when annotation is disabled or it is
    already wrapped. Extra keyword arguments go to AnnotatingPool.
    """
    if not enabled:
        logger.info("Query source comments disabled.")
        return pool
    if isinstance(pool, AnnotatingPool):
        return pool
    logger.info(f"Annotating queries on {type(pool).__name__} with caller positions.")
    return AnnotatingPool(pool, **kwargs)
