"""Pygments lexer and terminal highlighting for literal expressions."""

from __future__ import annotations

from pygments import highlight as _highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, words
from pygments.token import (
    Error,
    Keyword,
    Number,
    Punctuation,
    String,
    Text,
)


class LiteralLexer(RegexLexer):
    """Pygments lexer for literal expressions."""

    name = "Literal"
    aliases = ["literal", "pyliteral"]
    filenames = ["*.lit"]
    mimetypes = ["text/x-literal"]

    tokens = {
        "root": [
            # Whitespace
            (r"\s+", Text),
            # Strings, either quote, with escape support
            (r"'", String.Single, "sqstring"),
            (r'"', String.Double, "dqstring"),
            # Keyword constants
            (words(("True", "False", "None"), prefix=r"\b", suffix=r"\b"), Keyword.Constant),
            # Numbers (imaginary and float before int)
            (r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?j", Number),
            (r"-?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?", Number.Float),
            (r"-?\d+[eE][+-]?\d+", Number.Float),
            (r"-?\d+", Number.Integer),
            (r"[+-]", Number),
            # Punctuation
            (r"[(),\[\]{}:]", Punctuation),
            # Anything else is not part of the literal grammar
            (r".", Error),
        ],
        "sqstring": [
            (r"\\.", String.Escape),
            (r"[^'\\]+", String.Single),
            (r"'", String.Single, "#pop"),
        ],
        "dqstring": [
            (r"\\.", String.Escape),
            (r'[^"\\]+', String.Double),
            (r'"', String.Double, "#pop"),
        ],
    }


def highlight(text: str) -> str:
    """Return ``text`` with ANSI terminal colors."""
    return _highlight(text, LiteralLexer(), TerminalFormatter())
