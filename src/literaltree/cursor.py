"""Seekable reader over an in-memory expression text.

The parser backtracks by taking a :meth:`Cursor.bookmark` before trying an
alternative production and handing it back to :meth:`Cursor.rewind_to`
when that alternative fails.
"""

from __future__ import annotations

from collections.abc import Container

from literaltree.errors import EndOfInputError


class Cursor:
    """A movable read position over a string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def position(self) -> int:
        return self.pos

    def has_more(self) -> bool:
        return self.pos < len(self.text)

    def remaining(self) -> str:
        return self.text[self.pos:]

    def at(self, prefix: str) -> bool:
        """Whether the unread input starts with ``prefix``."""
        return self.text.startswith(prefix, self.pos)

    def peek(self) -> str:
        if self.pos >= len(self.text):
            raise EndOfInputError()
        return self.text[self.pos]

    def read(self, n: int | None = None) -> str:
        """Read one character, or the next ``n`` characters as a string."""
        if n is None:
            ch = self.peek()
            self.pos += 1
            return ch
        if self.pos + n > len(self.text):
            raise EndOfInputError()
        chunk = self.text[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def scan_while(self, chars: Container[str]) -> str:
        """Consume characters that are in ``chars``; may return ``""``."""
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in chars:
            self.pos += 1
        return self.text[start:self.pos]

    def scan_until(self, chars: Container[str]) -> str:
        """Consume characters up to (not including) one in ``chars``."""
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in chars:
            self.pos += 1
        return self.text[start:self.pos]

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def bookmark(self) -> int:
        return self.pos

    def rewind_to(self, mark: int) -> None:
        self.pos = mark

    def rewind(self, n: int) -> None:
        self.pos = max(0, self.pos - n)
