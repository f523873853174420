"""Source text representation and span tracking for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """A range within a source text."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


class SourceText:
    """An expression text with line access for diagnostics."""

    def __init__(self, content: str, filename: str = "<stdin>") -> None:
        self.filename = filename
        self.content = content
        self.lines = content.splitlines()

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

    def location(self, offset: int) -> tuple[int, int]:
        """Map a 0-based character offset to a 1-based (line, column)."""
        offset = max(0, min(offset, len(self.content)))
        before = self.content[:offset]
        line = before.count("\n") + 1
        col = offset - (before.rfind("\n") + 1) + 1
        return line, col

    def span_at(self, offset: int) -> Span:
        """A single-character span at the given offset."""
        line, col = self.location(offset)
        return Span(self.filename, line, col, line, col)
