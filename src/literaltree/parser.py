"""Parser for literal expressions.

Recursive descent, one method per grammar production.  Where two
productions share a prefix (``{`` for sets and dicts, ``(`` for tuples and
complex numbers, a leading digit for complex/float/int) the parser takes a
cursor bookmark, tries the preferred production and rewinds to try the next
one when it fails.

Grammar::

    expr          = ws? (compound | single) ws? .
    compound      = tuple | dict | set | list .
    single        = int | float | complex | string | bool | none .
    tuple         = '(' ')' | '(' expr ',' ')' | '(' expr_list ')' .
    list          = '[' ']' | '[' expr_list ']' .
    set           = '{' expr_list '}' .
    dict          = '{' '}' | '{' keyvalue_list '}' .
    expr_list     = expr (',' expr)* .
    keyvalue_list = keyvalue (',' keyvalue)* .
    keyvalue      = expr ':' expr .
    complex       = '(' (float|int) imaginary ')' | imaginary .
    imaginary     = ('+'|'-')? (float|int) 'j' .
    int           = '-'? digit+ .
    float         = '-'? digit* '.'? digit* (('e'|'E') ('+'|'-')? digit+)? .
    string        = ("'" | '"') char* same-quote .
    bool          = 'True' | 'False' .
    none          = 'None' .
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from decimal import Decimal

from literaltree.ast_nodes import (
    NONE,
    ComplexNumberNode,
    DictNode,
    KeyValueNode,
    ListNode,
    Node,
    ScalarKind,
    ScalarNode,
    SetNode,
    Tree,
    TupleNode,
)
from literaltree.cursor import Cursor
from literaltree.errors import DecodeError, NestingDepthError, ParseError

logger = logging.getLogger(__name__)

_DIGITS = frozenset("0123456789")
_INT_CHARS = _DIGITS | {"-"}
_FLOAT_CHARS = _DIGITS | frozenset("-+.eE")
_SIGNS = frozenset("+-")

_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
# Real and imaginary parts of a complex number: float or int, either sign.
_SIGNED_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_ESCAPES = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def decode(data: bytes | bytearray | memoryview) -> str:
    """Decode UTF-8 input, raising DecodeError on invalid byte sequences."""
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(str(e)) from e


class Parser:
    """Parses one literal expression into a Tree.

    A Parser instance owns its cursor and is used for a single parse.
    """

    def __init__(
        self,
        expression: str | bytes | bytearray | memoryview,
        *,
        max_depth: int | None = None,
    ) -> None:
        if not isinstance(expression, str):
            expression = decode(expression)
        self.cursor = Cursor(expression)
        self.max_depth = max_depth
        self._depth = 0
        self._memo: dict[int, tuple[Node | ParseError, int]] = {}

    # ── Top-level parsing ────────────────────────────────────────

    def parse(self) -> Tree:
        """Parse the whole input as exactly one expression.

        Empty or whitespace-only input is an error rather than a tree with
        no root; every Tree this returns has a root node.
        """
        cur = self.cursor
        try:
            cur.skip_whitespace()
            if not cur.has_more():
                raise ParseError("empty expression")
            root = self._parse_expr()
            if cur.has_more():
                raise ParseError("garbage at end of expression")
        except ParseError as e:
            raise e.annotate(cur.position) from e
        return Tree(root)

    # ── Backtracking ─────────────────────────────────────────────

    def _try_alternatives(self, *alternatives: Callable[[], Node]) -> Node:
        """Return the first alternative that parses, rewinding between tries.

        The error of the last alternative propagates.
        """
        cur = self.cursor
        mark = cur.bookmark()
        for alternative in alternatives[:-1]:
            try:
                return alternative()
            except NestingDepthError:
                raise
            except ParseError as e:
                logger.debug(
                    "%s failed at %d (%s), rewinding to %d",
                    alternative.__name__, cur.position, e.message, mark,
                )
                cur.rewind_to(mark)
        return alternatives[-1]()

    # ── Expressions ──────────────────────────────────────────────

    def _parse_expr(self) -> Node:
        cur = self.cursor
        cur.skip_whitespace()
        if cur.peek() in "{[(":
            node = self._parse_compound()
        else:
            node = self._parse_single()
        cur.skip_whitespace()
        return node

    def _parse_compound(self) -> Node:
        cur = self.cursor
        self._depth += 1
        try:
            if self.max_depth is not None and self._depth > self.max_depth:
                raise NestingDepthError(
                    f"maximum nesting depth exceeded ({self.max_depth})"
                )
            start = cur.position
            # set/dict backtracking re-enters the same offsets; replay the
            # first outcome so each compound is parsed once
            if start in self._memo:
                outcome, end = self._memo[start]
                cur.rewind_to(end)
                if isinstance(outcome, ParseError):
                    raise outcome
                return outcome
            try:
                node = self._parse_compound_at()
            except NestingDepthError:
                raise
            except ParseError as e:
                self._memo[start] = (e, cur.position)
                raise
            self._memo[start] = (node, cur.position)
            return node
        finally:
            self._depth -= 1

    def _parse_compound_at(self) -> Node:
        ch = self.cursor.peek()
        if ch == "[":
            return self._parse_list()
        if ch == "{":
            return self._try_alternatives(self._parse_set, self._parse_dict)
        # a '(' opens either a tuple or a complex number
        return self._try_alternatives(self._parse_complex, self._parse_tuple)

    def _parse_expr_list(self, trailing_close: str | None = None) -> list[Node]:
        """Parse ``expr (',' expr)*``.

        With ``trailing_close`` set, a comma directly followed by that
        closing character ends the list and is left for the caller.
        """
        cur = self.cursor
        elements = [self._parse_expr()]
        while cur.has_more() and cur.peek() == ",":
            mark = cur.bookmark()
            cur.read()
            cur.skip_whitespace()
            if trailing_close is not None and cur.has_more() and cur.peek() == trailing_close:
                cur.rewind_to(mark)
                break
            elements.append(self._parse_expr())
        return elements

    def _expect_close(self, close: str, *, allow_trailing_comma: bool = False) -> None:
        cur = self.cursor
        if not cur.has_more():
            raise ParseError(f"missing '{close}'")
        ch = cur.read()
        if ch == "," and allow_trailing_comma:
            cur.skip_whitespace()
            if not cur.has_more():
                raise ParseError(f"missing '{close}'")
            ch = cur.read()
        if ch != close:
            raise ParseError(f"expected '{close}'")

    # ── Compound literals ────────────────────────────────────────

    def _parse_tuple(self) -> TupleNode:
        cur = self.cursor
        cur.read()  # (
        cur.skip_whitespace()
        if cur.peek() == ")":
            cur.read()
            return TupleNode()

        first = self._parse_expr()
        if not cur.has_more():
            raise ParseError("missing ')'")
        if cur.peek() != ",":
            raise ParseError("expected ',' in tuple")
        cur.read()
        cur.skip_whitespace()
        if cur.has_more() and cur.peek() == ")":
            cur.read()
            return TupleNode((first,))

        elements = [first, *self._parse_expr_list(trailing_close=")")]
        self._expect_close(")", allow_trailing_comma=True)
        return TupleNode(elements)

    def _parse_list(self) -> ListNode:
        cur = self.cursor
        cur.read()  # [
        cur.skip_whitespace()
        if cur.peek() == "]":
            cur.read()
            return ListNode()
        elements = self._parse_expr_list()
        self._expect_close("]")
        return ListNode(elements)

    def _parse_set(self) -> SetNode:
        self.cursor.read()  # {
        elements = self._parse_expr_list()
        self._expect_close("}")
        return SetNode(elements)

    def _parse_dict(self) -> DictNode:
        cur = self.cursor
        cur.read()  # {
        cur.skip_whitespace()
        if cur.peek() == "}":
            cur.read()
            return DictNode()
        pairs = [self._parse_key_value()]
        while cur.has_more() and cur.peek() == ",":
            cur.read()
            pairs.append(self._parse_key_value())
        self._expect_close("}")
        return DictNode(pairs)

    def _parse_key_value(self) -> KeyValueNode:
        cur = self.cursor
        key = self._parse_expr()
        if not cur.has_more() or cur.peek() != ":":
            raise ParseError("expected ':'")
        cur.read()
        return KeyValueNode(key, self._parse_expr())

    # ── Single literals ──────────────────────────────────────────

    def _parse_single(self) -> Node:
        ch = self.cursor.peek()
        if ch == "N":
            return self._parse_none()
        if ch in ("T", "F"):
            return self._parse_bool()
        if ch in ("'", '"'):
            return self._parse_string()
        return self._try_alternatives(self._parse_complex, self._parse_float, self._parse_int)

    def _parse_int(self) -> ScalarNode:
        text = self.cursor.scan_while(_INT_CHARS)
        if not text:
            raise ParseError("invalid int character")
        if not _INT_RE.fullmatch(text):
            raise ParseError("invalid integer format")
        try:
            return ScalarNode.of(int(text))
        except ValueError:
            # past the interpreter's int string conversion limit
            return ScalarNode(Decimal(text), ScalarKind.DECIMAL)

    def _parse_float(self) -> ScalarNode:
        text = self.cursor.scan_while(_FLOAT_CHARS)
        if not text:
            raise ParseError("invalid float character")
        # a plain digit run is an int, not a float with no fraction
        if not any(c in text for c in ".eE"):
            raise ParseError("number is not a valid float")
        if not _FLOAT_RE.fullmatch(text):
            raise ParseError("invalid float format")
        return ScalarNode(float(text), ScalarKind.FLOAT)

    def _parse_complex(self) -> ComplexNumberNode:
        cur = self.cursor
        if cur.peek() != "(":
            return ComplexNumberNode(0.0, self._parse_imaginary())
        cur.read()  # (
        real = self._number(self._scan_number())
        imaginary = self._parse_imaginary()
        if not cur.has_more() or cur.read() != ")":
            raise ParseError("expected ')' to end a complex number")
        return ComplexNumberNode(real, imaginary)

    def _parse_imaginary(self) -> float:
        cur = self.cursor
        value = self._number(self._scan_number())
        if not cur.has_more() or cur.read() != "j":
            raise ParseError("expected 'j' after imaginary part")
        return value

    def _scan_number(self) -> str:
        """Consume a signed decimal number, exponent included."""
        cur = self.cursor
        parts = []
        if cur.has_more() and cur.peek() in _SIGNS:
            parts.append(cur.read())
        parts.append(cur.scan_while(_DIGITS | {"."}))
        if cur.has_more() and cur.peek() in "eE":
            parts.append(cur.read())
            if cur.has_more() and cur.peek() in _SIGNS:
                parts.append(cur.read())
            parts.append(cur.scan_while(_DIGITS))
        return "".join(parts)

    @staticmethod
    def _number(text: str) -> float:
        if not _SIGNED_NUMBER_RE.fullmatch(text):
            raise ParseError("invalid float format")
        return float(text)

    def _parse_string(self) -> ScalarNode:
        cur = self.cursor
        quote = cur.read()
        stops = {quote, "\\"}
        parts: list[str] = []
        while True:
            parts.append(cur.scan_until(stops))
            if not cur.has_more():
                break
            if cur.read() == quote:
                return ScalarNode("".join(parts), ScalarKind.STR)
            if not cur.has_more():
                break
            escaped = cur.read()
            # unknown escapes stand for the escaped character itself
            parts.append(_ESCAPES.get(escaped, escaped))
        raise ParseError("unclosed string")

    def _parse_bool(self) -> ScalarNode:
        cur = self.cursor
        for word, value in (("True", True), ("False", False)):
            if cur.at(word):
                cur.read(len(word))
                return ScalarNode(value, ScalarKind.BOOL)
        raise ParseError("expected bool, True or False")

    def _parse_none(self) -> Node:
        cur = self.cursor
        if cur.at("None"):
            cur.read(4)
            return NONE
        raise ParseError("expected None")


def parse(
    expression: str | bytes | bytearray | memoryview,
    *,
    max_depth: int | None = None,
) -> Tree:
    """Parse a literal expression (text, or UTF-8 bytes) into a Tree."""
    return Parser(expression, max_depth=max_depth).parse()
