"""Tests for canonical literal rendering."""

from __future__ import annotations

from decimal import Decimal

import pytest

from literaltree.ast_nodes import (
    NONE,
    ComplexNumberNode,
    DictNode,
    KeyValueNode,
    ListNode,
    ScalarKind,
    ScalarNode,
    SetNode,
    Tree,
    TupleNode,
)
from literaltree.formatter import LiteralFormatter, quote_string, render
from literaltree.parser import parse


def s(value):
    return ScalarNode.of(value)


class TestScalars:
    def test_integers(self):
        assert render(s(123)) == "123"
        assert render(s(-5)) == "-5"
        assert render(s(2 ** 40)) == str(2 ** 40)

    def test_decimal(self):
        assert render(ScalarNode(Decimal("123456789012345678901234567890"), ScalarKind.DECIMAL)) == (
            "123456789012345678901234567890"
        )

    def test_floats_keep_fraction(self):
        assert render(s(123.0)) == "123.0"
        assert render(s(1.5)) == "1.5"
        assert render(s(1e20)) == "1e+20"

    def test_overflowed_floats(self):
        assert render(parse("1e400")) == "1e30000"
        assert render(parse("-1e400")) == "-1e30000"

    def test_booleans(self):
        assert render(s(True)) == "True"
        assert render(s(False)) == "False"

    def test_none(self):
        assert render(NONE) == "None"
        assert str(NONE) == "None"


class TestStrings:
    def test_plain(self):
        assert render(s("hello")) == "'hello'"

    def test_quote_and_newline(self):
        assert render(s("it's\n")) == r"'it\'s\n'"

    def test_all_escapes(self):
        assert quote_string("\\\a\b\f\n\r\t\v") == r"'\\\a\b\f\n\r\t\v'"

    def test_double_quote_not_escaped(self):
        assert render(s('say "hi"')) == "'say \"hi\"'"

    def test_non_ascii_kept(self):
        assert render(s("héllo ☃")) == "'héllo ☃'"


class TestComplex:
    def test_positive_imaginary(self):
        assert render(ComplexNumberNode(1.0, 2.0)) == "(1.0+2.0j)"

    def test_negative_imaginary(self):
        assert render(ComplexNumberNode(1.0, -2.0)) == "(1.0-2.0j)"

    def test_negative_zero_imaginary(self):
        assert render(ComplexNumberNode(0.0, -0.0)) == "(0.0-0.0j)"

    def test_overflowed_parts(self):
        assert render(ComplexNumberNode(float("inf"), float("-inf"))) == "(1e30000-1e30000j)"


class TestSequences:
    def test_empty_tuple(self):
        assert render(TupleNode()) == "()"

    def test_one_element_tuple_has_trailing_comma(self):
        assert render(TupleNode([s(1)])) == "(1,)"

    def test_multi_element_tuple(self):
        assert render(TupleNode([s(1), s(2)])) == "(1,2)"

    def test_list(self):
        assert render(ListNode([s(1), s("a")])) == "[1,'a']"
        assert render(ListNode()) == "[]"

    def test_single_element_list(self):
        assert render(ListNode([s(1)])) == "[1]"

    def test_set(self):
        assert render(SetNode([s(1)])) == "{1}"

    def test_dict(self):
        node = DictNode([KeyValueNode(s("a"), s(1)), KeyValueNode(s("b"), s(2))])
        assert render(node) == "{'a': 1,'b': 2}"
        assert render(DictNode()) == "{}"

    def test_key_value(self):
        assert render(KeyValueNode(s("k"), NONE)) == "'k': None"

    def test_nested(self):
        node = ListNode([TupleNode([s(1)]), DictNode([KeyValueNode(s(1), ListNode())])])
        assert render(node) == "[(1,),{1: []}]"

    def test_str_delegates_to_render(self):
        node = ListNode([s(1)])
        assert str(node) == render(node)

    def test_tree(self):
        assert LiteralFormatter().format(Tree(s(1))) == "1"

    def test_unknown_node(self):
        with pytest.raises(TypeError):
            render(object())  # type: ignore[arg-type]


@pytest.mark.parametrize("source", [
    "123",
    "-5",
    "123.0",
    "1e5",
    "-2.5e-3",
    "9999999999",
    "123456789012345678901234567890",
    "'it\\'s\\n'",
    '"double \\"quoted\\""',
    "True",
    "None",
    "(1+2j)",
    "(-1.5-2j)",
    "3j",
    "()",
    "(1,)",
    "(1, 2, 3)",
    "[]",
    "[1, [2, [3]]]",
    "{1, 2, 3}",
    "{}",
    "{'a': 1, 'b': [1, 2], (1, 2): {'x'}}",
    "[{'k': (None, True, 'v')}, (1.5,), {(1, 2)}]",
    "1e400",
    "-1e400",
    "(1e400+1j)",
])
def test_render_reparses_to_equal_tree(source):
    tree = parse(source)
    assert parse(render(tree)) == tree
