"""AST-walking printer producing canonical literal text.

The output is accepted by the parser again and, for every node type,
re-parses to a structurally equal tree.  Sets and dicts print in their
stored element order.
"""

from __future__ import annotations

import math

from literaltree.ast_nodes import (
    ComplexNumberNode,
    KeyValueNode,
    Node,
    NoneNode,
    ScalarKind,
    ScalarNode,
    SequenceNode,
    Tree,
    TupleNode,
)

_STRING_ESCAPES = str.maketrans({
    "\\": "\\\\",
    "'": "\\'",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
})


def quote_string(text: str) -> str:
    """Single-quote ``text`` with literal-style escapes."""
    return "'" + text.translate(_STRING_ESCAPES) + "'"


def format_float(value: float) -> str:
    # repr is locale independent and the shortest round-tripping form;
    # overflowed values print as an exponent that overflows again
    if math.isinf(value):
        return "-1e30000" if value < 0 else "1e30000"
    return repr(value)


class LiteralFormatter:
    """Format a node tree back to canonical literal text."""

    def format(self, node: Node | Tree) -> str:
        if isinstance(node, Tree):
            node = node.root
        if isinstance(node, ScalarNode):
            return self._format_scalar(node)
        if isinstance(node, NoneNode):
            return "None"
        if isinstance(node, ComplexNumberNode):
            return self._format_complex(node)
        if isinstance(node, KeyValueNode):
            return f"{self.format(node.key)}: {self.format(node.value)}"
        if isinstance(node, TupleNode):
            return self._format_tuple(node)
        if isinstance(node, SequenceNode):
            return self._format_sequence(node)
        raise TypeError(f"cannot format {type(node).__name__}")

    def _format_scalar(self, node: ScalarNode) -> str:
        if node.kind is ScalarKind.STR:
            return quote_string(node.value)  # type: ignore[arg-type]
        if node.kind is ScalarKind.FLOAT:
            return format_float(node.value)  # type: ignore[arg-type]
        return str(node.value)

    def _format_complex(self, node: ComplexNumberNode) -> str:
        real = format_float(node.real)
        imag = format_float(node.imaginary)
        if imag.startswith("-"):
            return f"({real}{imag}j)"
        return f"({real}+{imag}j)"

    def _format_tuple(self, node: TupleNode) -> str:
        if len(node.elements) == 1:
            return f"({self.format(node.elements[0])},)"
        return self._format_sequence(node)

    def _format_sequence(self, node: SequenceNode) -> str:
        inner = ",".join(self.format(elt) for elt in node.elements)
        return f"{node.open_char}{inner}{node.close_char}"


_FORMATTER = LiteralFormatter()


def render(node: Node | Tree) -> str:
    """Canonical literal text for a node or tree."""
    return _FORMATTER.format(node)
