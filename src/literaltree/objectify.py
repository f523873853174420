"""Fold a parsed tree into native Python values.

The traversal is post-order and iterative: a work stack schedules nodes,
and every visited node pushes exactly one value onto a pending-results
stack.  A container pops one value per child it owns, in child order, and
pushes the assembled container in their place.  Deeply nested trees
therefore never hit the interpreter's recursion limit.
"""

from __future__ import annotations

from literaltree.ast_nodes import (
    ComplexNumberNode,
    DictNode,
    KeyValueNode,
    ListNode,
    Node,
    NoneNode,
    ScalarNode,
    SequenceNode,
    SetNode,
    Tree,
    TupleNode,
)
from literaltree.errors import FoldError


def _children(node: Node) -> tuple[Node, ...]:
    if isinstance(node, SequenceNode):
        return node.elements
    if isinstance(node, KeyValueNode):
        return (node.key, node.value)
    return ()


class ObjectifyVisitor:
    """Turns an AST into list/tuple/dict/set/scalar values."""

    def __init__(self) -> None:
        self._results: list[object] = []

    def fold(self, tree: Tree | Node) -> object:
        root = tree.root if isinstance(tree, Tree) else tree
        base = len(self._results)
        work: list[tuple[Node, bool]] = [(root, False)]
        try:
            while work:
                node, expanded = work.pop()
                children = _children(node)
                if children and not expanded:
                    work.append((node, True))
                    work.extend((child, False) for child in reversed(children))
                    continue
                self._visit(node, len(children))
            assert len(self._results) == base + 1, "every node must push one result"
            return self._results.pop()
        finally:
            # a failed fold leaves partial values behind
            del self._results[base:]

    def _pop(self, count: int) -> list[object]:
        if count == 0:
            return []
        values = self._results[-count:]
        del self._results[-count:]
        return values

    def _visit(self, node: Node, arity: int) -> None:
        push = self._results.append
        if isinstance(node, ScalarNode):
            push(node.value)
        elif isinstance(node, NoneNode):
            push(None)
        elif isinstance(node, ComplexNumberNode):
            push(complex(node.real, node.imaginary))
        elif isinstance(node, KeyValueNode):
            key, value = self._pop(2)
            push((key, value))
        elif isinstance(node, TupleNode):
            push(tuple(self._pop(arity)))
        elif isinstance(node, ListNode):
            push(self._pop(arity))
        elif isinstance(node, SetNode):
            push(self._make_set(self._pop(arity)))
        elif isinstance(node, DictNode):
            push(self._make_dict(self._pop(arity)))
        else:
            raise TypeError(f"cannot fold {type(node).__name__}")

    @staticmethod
    def _make_set(values: list[object]) -> set:
        result = set()
        for value in values:
            try:
                result.add(value)
            except TypeError as e:
                raise FoldError(f"unhashable set element: {value!r}") from e
        return result

    @staticmethod
    def _make_dict(pairs: list[object]) -> dict:
        result: dict = {}
        for key, value in pairs:  # type: ignore[misc]
            try:
                # later duplicates overwrite, as in the parser
                result[key] = value
            except TypeError as e:
                raise FoldError(f"unhashable dict key: {key!r}") from e
        return result


def fold(tree: Tree | Node) -> object:
    """Convert a tree (or any node) into its native Python value."""
    return ObjectifyVisitor().fold(tree)
