"""AST node definitions for literal expressions.

Nodes compare by value, not identity, and are hashable so that set
elements and dict keys can be deduplicated while parsing.  The only
exception is ``NONE``, the single shared ``NoneNode`` instance.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Union

ScalarValue = Union[int, float, Decimal, bool, str]

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ScalarKind(Enum):
    INT = "int"          # signed 32-bit range
    LONG = "long"        # signed 64-bit range
    FLOAT = "float"
    DECIMAL = "decimal"  # arbitrary precision
    BOOL = "bool"
    STR = "str"


def integer_kind(value: int) -> ScalarKind:
    """Narrowest integer kind that can hold ``value``."""
    if INT32_MIN <= value <= INT32_MAX:
        return ScalarKind.INT
    if INT64_MIN <= value <= INT64_MAX:
        return ScalarKind.LONG
    return ScalarKind.DECIMAL


class Node:
    """Base of every AST node; ``str(node)`` is its canonical literal text."""

    __slots__ = ()

    def __str__(self) -> str:
        from literaltree.formatter import render

        return render(self)


# ── Scalars ──────────────────────────────────────────────────────


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class ScalarNode(Node):
    value: ScalarValue
    kind: ScalarKind

    @classmethod
    def of(cls, value: ScalarValue) -> ScalarNode:
        """Wrap a Python value, inferring its kind."""
        if isinstance(value, bool):
            return cls(value, ScalarKind.BOOL)
        if isinstance(value, int):
            kind = integer_kind(value)
            return cls(Decimal(value) if kind is ScalarKind.DECIMAL else value, kind)
        if isinstance(value, float):
            return cls(value, ScalarKind.FLOAT)
        if isinstance(value, Decimal):
            return cls(value, ScalarKind.DECIMAL)
        if isinstance(value, str):
            return cls(value, ScalarKind.STR)
        raise TypeError(f"not a scalar literal value: {value!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarNode):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ScalarNode) or other.kind is not self.kind:
            return NotImplemented
        return self.value < other.value  # type: ignore[operator]


class NoneNode(Node):
    """The ``None`` literal. Only one instance ever exists: ``NONE``."""

    __slots__ = ()
    _instance: ClassVar[NoneNode | None] = None

    def __new__(cls) -> NoneNode:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NONE"

    def __reduce__(self) -> tuple:
        return (NoneNode, ())


NONE = NoneNode()


@dataclass(frozen=True)
class ComplexNumberNode(Node):
    real: float
    imaginary: float


@dataclass(frozen=True)
class KeyValueNode(Node):
    key: Node
    value: Node


# ── Sequences ────────────────────────────────────────────────────


@dataclass(frozen=True)
class SequenceNode(Node):
    """Ordered child nodes between an open/close delimiter pair."""

    elements: tuple[Node, ...] = ()

    open_char: ClassVar[str] = "?"
    close_char: ClassVar[str] = "?"

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.elements)

    def __getitem__(self, index: int) -> Node:
        return self.elements[index]


@dataclass(frozen=True)
class TupleNode(SequenceNode):
    open_char: ClassVar[str] = "("
    close_char: ClassVar[str] = ")"


@dataclass(frozen=True)
class ListNode(SequenceNode):
    open_char: ClassVar[str] = "["
    close_char: ClassVar[str] = "]"


@dataclass(frozen=True, eq=False)
class SetNode(SequenceNode):
    """A value set: duplicates are dropped on construction."""

    open_char: ClassVar[str] = "{"
    close_char: ClassVar[str] = "}"

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(dict.fromkeys(self.elements)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SetNode):
            return NotImplemented
        return frozenset(self.elements) == frozenset(other.elements)

    def __hash__(self) -> int:
        return hash(frozenset(self.elements))


@dataclass(frozen=True, eq=False)
class DictNode(SequenceNode):
    """Key/value pairs with unique keys; a later duplicate key wins."""

    elements: tuple[KeyValueNode, ...] = ()

    open_char: ClassVar[str] = "{"
    close_char: ClassVar[str] = "}"

    def __post_init__(self) -> None:
        merged: dict[Node, Node] = {}
        for kv in self.elements:
            if not isinstance(kv, KeyValueNode):
                raise TypeError(f"dict elements must be KeyValueNode, got {type(kv).__name__}")
            merged[kv.key] = kv.value
        object.__setattr__(
            self, "elements", tuple(KeyValueNode(k, v) for k, v in merged.items()),
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Node, Node]]) -> DictNode:
        return cls(tuple(KeyValueNode(k, v) for k, v in pairs))

    def items(self) -> Iterator[tuple[Node, Node]]:
        return ((kv.key, kv.value) for kv in self.elements)

    def get(self, key: Node, default: Node | None = None) -> Node | None:
        for kv in self.elements:
            if kv.key == key:
                return kv.value
        return default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DictNode):
            return NotImplemented
        return dict(self.items()) == dict(other.items())

    def __hash__(self) -> int:
        return hash(frozenset(self.elements))


# ── Parse result ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Tree:
    """The whole parse result: one root node."""

    root: Node

    def __str__(self) -> str:
        return str(self.root)
