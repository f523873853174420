"""Parse/fold exceptions and Rust-style colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from literaltree.source import SourceText, Span


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


class ParseError(Exception):
    """The expression text does not match the literal grammar.

    ``position`` stays ``None`` while the error travels through nested
    productions; the top-level parse fills it in exactly once.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.message = message
        self.reason = message
        self.position = position
        super().__init__(message)

    def annotate(self, position: int) -> ParseError:
        """Return a copy of this error carrying the cursor offset."""
        err = type(self)(f"{self.message} (at position {position})", position)
        err.reason = self.reason
        return err

    def _notes(self) -> list[str]:
        return []

    def to_diagnostic(self, source: SourceText) -> Diagnostic:
        labels = []
        if self.position is not None:
            labels.append(DiagnosticLabel(span=source.span_at(self.position), message=""))
        return Diagnostic(
            severity=Severity.ERROR,
            code="E100" if isinstance(self, EndOfInputError) else "E200",
            message=self.reason,
            labels=labels,
            notes=self._notes(),
        )


class EndOfInputError(ParseError):
    """The cursor was asked for input past the end of the text."""

    def __init__(self, message: str = "unexpected end of input",
                 position: int | None = None) -> None:
        super().__init__(message, position)

    def _notes(self) -> list[str]:
        return ["the expression ended before every literal was closed"]


class NestingDepthError(ParseError):
    """The expression nests deeper than the parser's ``max_depth``.

    Backtracking never retries past this error: every alternative would
    hit the same limit.
    """

    def _notes(self) -> list[str]:
        return ["raise parser.max_depth in literaltree.toml, or set it to 0 for no limit"]


class DecodeError(Exception):
    """Raw bytes handed to the parser are not valid UTF-8."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"cannot decode input: {reason}")


class FoldError(Exception):
    """A tree has no native equivalent (e.g. an unhashable set element)."""


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, source: SourceText, *, color: bool = True) -> None:
        self.source = source
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E200]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self.source.line_at(span.start_line)
            lines.append(
                f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
            )

            caret_len = max(1, span.end_col - span.start_col + 1)
            padding = " " * (span.start_col - 1)
            lines.append(
                f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                f"{padding}{self._c(color)}{'^' * caret_len}{self._c(_RESET)}"
            )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)
