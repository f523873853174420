"""Tests for the literal expression parser."""

from __future__ import annotations

import time
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
from literaltree.errors import DecodeError, NestingDepthError, ParseError
from literaltree.formatter import render
from literaltree.parser import Parser, parse


def root(source):
    """Helper: parse source and return the root node."""
    tree = parse(source)
    assert isinstance(tree, Tree)
    return tree.root


def s(value):
    return ScalarNode.of(value)


class TestNumbers:
    def test_int(self):
        node = root("123")
        assert node == ScalarNode(123, ScalarKind.INT)

    def test_negative_int(self):
        assert root("-5") == ScalarNode(-5, ScalarKind.INT)

    def test_long(self):
        node = root("2147483648")
        assert node.kind is ScalarKind.LONG
        assert node.value == 2147483648

    def test_decimal_for_huge_int(self):
        node = root("123456789012345678901234567890")
        assert node.kind is ScalarKind.DECIMAL
        assert node.value == Decimal("123456789012345678901234567890")

    def test_float(self):
        assert root("123.0") == ScalarNode(123.0, ScalarKind.FLOAT)

    def test_float_exponent(self):
        node = root("1e5")
        assert node.kind is ScalarKind.FLOAT
        assert node.value == 100000.0

    def test_float_forms(self):
        assert root("-2.5e-3").value == -0.0025
        assert root(".5").value == 0.5
        assert root("5.").value == 5.0
        assert root("1E+2").value == 100.0

    def test_digit_run_is_not_float(self):
        assert root("7").kind is ScalarKind.INT

    def test_python_only_spellings_rejected(self):
        for source in ("1_000", "nan", "inf", "+5", "0x10", "--1"):
            with pytest.raises(ParseError):
                parse(source)


class TestComplex:
    def test_parenthesized(self):
        assert root("(1+2j)") == ComplexNumberNode(1.0, 2.0)

    def test_negative_parts(self):
        assert root("(-1.5-2.5j)") == ComplexNumberNode(-1.5, -2.5)

    def test_exponents(self):
        assert root("(1e-5+2E3j)") == ComplexNumberNode(1e-5, 2000.0)

    def test_bare_imaginary(self):
        assert root("3j") == ComplexNumberNode(0.0, 3.0)
        assert root("-1.5j") == ComplexNumberNode(0.0, -1.5)

    def test_complex_inside_tuple(self):
        assert root("((1+2j), 3)") == TupleNode([ComplexNumberNode(1.0, 2.0), s(3)])

    def test_missing_close(self):
        with pytest.raises(ParseError):
            parse("(1+2j")


class TestStrings:
    def test_single_quoted(self):
        assert root("'hello'") == s("hello")

    def test_double_quoted(self):
        assert root('"a\'b"') == s("a'b")

    def test_escapes(self):
        assert root(r"'it\'s\n'") == s("it's\n")

    def test_all_escapes(self):
        assert root(r"'\\\'\"\a\b\f\n\r\t\v'") == s("\\'\"\a\b\f\n\r\t\v")

    def test_unknown_escape_is_literal_char(self):
        assert root(r"'\q'") == s("q")

    def test_empty(self):
        assert root("''") == s("")

    def test_other_quote_inside(self):
        assert root("'say \"hi\"'") == s('say "hi"')

    def test_unicode(self):
        assert root("'héllo ☃'") == s("héllo ☃")

    def test_unclosed(self):
        with pytest.raises(ParseError, match="unclosed string"):
            parse("'abc")

    def test_unclosed_after_escape(self):
        with pytest.raises(ParseError, match="unclosed string"):
            parse("'abc\\")


class TestKeywords:
    def test_true_false(self):
        assert root("True") == ScalarNode(True, ScalarKind.BOOL)
        assert root("False") == ScalarNode(False, ScalarKind.BOOL)

    def test_none_is_singleton(self):
        assert root("None") is NONE

    def test_bad_keyword(self):
        with pytest.raises(ParseError, match="expected bool"):
            parse("Tru")
        with pytest.raises(ParseError, match="expected None"):
            parse("Nope")

    def test_keywords_are_case_sensitive(self):
        with pytest.raises(ParseError):
            parse("true")

    def test_trailing_garbage(self):
        with pytest.raises(ParseError, match="garbage at end of expression"):
            parse("True1")


class TestTuples:
    def test_empty(self):
        node = root("()")
        assert node == TupleNode()
        assert len(node) == 0

    def test_empty_with_space(self):
        assert root("( )") == TupleNode()

    def test_one_element(self):
        assert root("(1,)") == TupleNode([s(1)])

    def test_one_element_with_space(self):
        assert root("(1, )") == TupleNode([s(1)])

    def test_two_elements(self):
        node = root("(1,2)")
        assert isinstance(node, TupleNode)
        assert node == TupleNode([s(1), s(2)])

    def test_trailing_comma(self):
        assert root("(1,2,)") == TupleNode([s(1), s(2)])
        assert root("(1, 2, )") == TupleNode([s(1), s(2)])

    def test_parenthesized_scalar_rejected(self):
        with pytest.raises(ParseError):
            parse("(1)")

    def test_missing_close(self):
        with pytest.raises(ParseError):
            parse("(1,2")

    def test_double_trailing_comma(self):
        with pytest.raises(ParseError):
            parse("(1,2,,)")


class TestLists:
    def test_empty(self):
        assert root("[]") == ListNode()
        assert root("[ ]") == ListNode()

    def test_elements(self):
        assert root("[1, 'a', None]") == ListNode([s(1), s("a"), NONE])

    def test_nested(self):
        assert root("[[1], [[]]]") == ListNode([ListNode([s(1)]), ListNode([ListNode()])])

    def test_missing_close(self):
        with pytest.raises(ParseError, match="missing ']'"):
            parse("[1, 2")

    def test_wrong_close(self):
        with pytest.raises(ParseError, match="expected ']'"):
            parse("[1, 2)")


class TestSetsAndDicts:
    def test_set(self):
        node = root("{1,2}")
        assert isinstance(node, SetNode)
        assert node == SetNode([s(1), s(2)])

    def test_set_dedup(self):
        node = root("{1, 1, 2}")
        assert isinstance(node, SetNode)
        assert len(node) == 2
        assert set(node.elements) == {s(1), s(2)}

    def test_set_dedup_nested(self):
        node = root("{(1, 2), (1, 2), (2, 1)}")
        assert len(node) == 2

    def test_dict(self):
        node = root("{'a':1}")
        assert isinstance(node, DictNode)
        assert node == DictNode([KeyValueNode(s("a"), s(1))])

    def test_empty_braces_is_dict(self):
        assert root("{}") == DictNode()
        assert root("{ }") == DictNode()

    def test_dict_last_value_wins(self):
        node = root("{1: 'a', 1: 'b'}")
        assert isinstance(node, DictNode)
        assert len(node) == 1
        assert node.get(s(1)) == s("b")

    def test_dict_whitespace(self):
        node = root("{ 'a' : 1 , 'b' : 2 }")
        assert node == DictNode.from_pairs([(s("a"), s(1)), (s("b"), s(2))])

    def test_dict_with_compound_values(self):
        node = root("{'a': {'b': [1, {2}]}, (1, 2): None}")
        inner = node.get(s("a"))
        assert isinstance(inner, DictNode)
        assert inner.get(s("b")) == ListNode([s(1), SetNode([s(2)])])
        assert node.get(TupleNode([s(1), s(2)])) is NONE

    def test_dict_missing_colon(self):
        with pytest.raises(ParseError):
            parse("{'a': 1, 'b'}")

    def test_missing_close(self):
        with pytest.raises(ParseError):
            parse("{1, 2")


class TestTopLevel:
    def test_surrounding_whitespace(self):
        assert root("  \n[ 1 , 2 ]\t ") == ListNode([s(1), s(2)])

    def test_empty_input(self):
        with pytest.raises(ParseError, match="empty expression"):
            parse("")
        with pytest.raises(ParseError, match="empty expression"):
            parse("   ")

    def test_error_position_annotation(self):
        with pytest.raises(ParseError) as excinfo:
            parse("[1, 2")
        err = excinfo.value
        assert err.position == 5
        assert str(err) == "missing ']' (at position 5)"
        assert err.reason == "missing ']'"

    def test_garbage_position(self):
        with pytest.raises(ParseError) as excinfo:
            parse("[1] x")
        assert excinfo.value.position == 4

    def test_bytes_input(self):
        assert parse(b"[1, '\xc3\xa9']").root == ListNode([s(1), s("é")])

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError) as excinfo:
            parse(b"'\xff'")
        assert not isinstance(excinfo.value, ParseError)

    def test_parser_class(self):
        assert Parser("[1]").parse() == Tree(ListNode([s(1)]))

    def test_mixed_nesting(self):
        node = root("[{'k': (None, True, 'v')}, (1.5,), {(1, 2)}]")
        assert node == ListNode([
            DictNode.from_pairs([(s("k"), TupleNode([NONE, s(True), s("v")]))]),
            TupleNode([s(1.5)]),
            SetNode([TupleNode([s(1), s(2)])]),
        ])


class TestNestingLimit:
    def test_within_limit(self):
        assert parse("[[[1]]]", max_depth=3).root == ListNode([ListNode([ListNode([s(1)])])])

    def test_exceeded(self):
        with pytest.raises(NestingDepthError):
            parse("[[[1]]]", max_depth=2)

    def test_limit_is_not_retried_by_backtracking(self):
        source = "{" * 60 + "1" + "}" * 60
        with pytest.raises(NestingDepthError, match="maximum nesting depth"):
            parse(source, max_depth=30)

    def test_unlimited_by_default(self):
        source = "(" * 100 + "1," + ")," * 99 + ")"
        node = root(source)
        assert isinstance(node, TupleNode)


class TestBacktracking:
    def test_dict_keyed_by_dicts_parses_in_linear_time(self):
        depth = 60
        source = "{" * depth + "1: 1" + "}: 1" * (depth - 1) + "}"
        start = time.perf_counter()
        tree = parse(source)
        assert time.perf_counter() - start < 2.0
        assert isinstance(tree.root, DictNode)
        assert render(tree) == source

    def test_failing_nested_braces_fail_fast(self):
        source = "{" * 60 + "1: 1" + "}: 1" * 59
        start = time.perf_counter()
        with pytest.raises(ParseError):
            parse(source)
        assert time.perf_counter() - start < 2.0

    def test_reused_offsets_keep_error_position(self):
        with pytest.raises(ParseError) as excinfo:
            parse("{{1: 2}: 3, x}")
        assert excinfo.value.position == 12
