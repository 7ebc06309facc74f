"""
models/frame.py
---------------
Domain model for a single call-site captured from the running stack.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StackFrame:
    """
    The code location that issued a query.

    Attributes:
        file_name: Path of the running (possibly compiled) file.
        line: 1-based line number.
        column: 1-based column number.
    """
    file_name: Optional[str]
    line: Optional[int]
    column: Optional[int]

    def is_complete(self) -> bool:
        """Returns True if every field is usable for position lookup."""
        return bool(self.file_name) and bool(self.line) and bool(self.column)

    def __str__(self) -> str:
        return f"{self.file_name}:{self.line}:{self.column}"
