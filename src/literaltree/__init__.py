"""Parse Python literal expressions into a tree and fold them into values."""

from __future__ import annotations

from literaltree.ast_nodes import (
    NONE,
    ComplexNumberNode,
    DictNode,
    KeyValueNode,
    ListNode,
    Node,
    NoneNode,
    ScalarKind,
    ScalarNode,
    SequenceNode,
    SetNode,
    Tree,
    TupleNode,
)
from literaltree.errors import (
    DecodeError,
    EndOfInputError,
    FoldError,
    NestingDepthError,
    ParseError,
)
from literaltree.formatter import render
from literaltree.objectify import fold
from literaltree.parser import Parser, parse

__version__ = "0.1.0"

__all__ = [
    "NONE",
    "ComplexNumberNode",
    "DecodeError",
    "DictNode",
    "EndOfInputError",
    "FoldError",
    "KeyValueNode",
    "ListNode",
    "NestingDepthError",
    "Node",
    "NoneNode",
    "ParseError",
    "Parser",
    "ScalarKind",
    "ScalarNode",
    "SequenceNode",
    "SetNode",
    "Tree",
    "TupleNode",
    "fold",
    "literal_eval",
    "parse",
    "render",
]


def literal_eval(expression: str | bytes, *, max_depth: int | None = None) -> object:
    """Parse and fold in one step."""
    return fold(parse(expression, max_depth=max_depth))
