"""
services/query_annotator.py
---------------------------
Appends a ``/* file=<position> */`` comment to a query.

    "SELECT NOW();"  ->  "SELECT NOW() /* file=app.py:7:3 */;"
    "SELECT 1"       ->  "SELECT 1 /* file=app.py:7:3 */"

Structured queries (an object with a ``text`` attribute, or a mapping with
a ``"text"`` key) are always closed with a terminator and are rewritten in
place. Anything else is returned as-is.
"""

from collections.abc import MutableMapping
from typing import Any, Optional

from utils.logger import get_logger

logger = get_logger(__name__)

TERMINATOR = ";"
UNKNOWN_POSITION = "unknown"

_COMMENT_BREAKERS = ("/*", "*/", "\r", "\n")


def _sanitize(position: str) -> str:
    for token in _COMMENT_BREAKERS:
        position = position.replace(token, "")
    return position


def build_comment(position: Optional[str]) -> str:
    """Returns ``/* file=<position> */``, or ``/* file=unknown */`` without one."""
    value = _sanitize(position) if position else ""
    return f"/* file={value or UNKNOWN_POSITION} */"


def _append_comment(text: str, comment: str, terminate: bool = False) -> str:
    body = text.rstrip()
    terminated = body.endswith(TERMINATOR)
    if terminated:
        # collapse "x;;" and "x ;" down to "x"
        body = body.rstrip(TERMINATOR + " \t\r\n")
    annotated = f"{body} {comment}"
    if terminated or terminate:
        annotated += TERMINATOR
    return annotated


def annotate(query: Any, position: Optional[str]) -> Any:
    """
    Add the position comment to a query.

    Args:
        query: A SQL string, a structured query, or anything else.
        position: Resolved position string, or None if unknown.

    Returns:
        A new string for string queries; the same (mutated) object for
        structured queries; ``query`` itself for unrecognised payloads or
        text that already carries the exact comment.
    """
    comment = build_comment(position)

    if isinstance(query, str):
        if comment in query:
            return query
        return _append_comment(query, comment)

    if isinstance(query, MutableMapping):
        text = query.get("text")
        if isinstance(text, str) and text and comment not in text:
            query["text"] = _append_comment(text, comment, terminate=True)
        return query

    text = getattr(query, "text", None)
    if isinstance(text, str) and text and comment not in text:
        try:
            query.text = _append_comment(text, comment, terminate=True)
        except AttributeError:
            logger.debug(f"Query object {type(query).__name__} is read-only; left unannotated")
    return query
