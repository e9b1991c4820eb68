import pytest

from layout_gentest.layout_test.emitter.helpers.formatting import (IndentState,
                                                                   LineBuffer,
                                                                   cxx_string_literal,
                                                                   format_number,
                                                                   indent_line,
                                                                   split_block,
                                                                   substitute_placeholder)
from layout_gentest.layout_test.errors import ScopeStateError


def test_indent_state_fails_fast_on_underflow():
    indent = IndentState("  ")
    indent.push()
    indent.push()
    assert indent.prefix == "    "
    indent.pop()
    indent.pop()
    assert indent.prefix == ""
    with pytest.raises(ScopeStateError):
        indent.pop()
    assert indent.depth == 0


def test_blank_lines_carry_no_indentation():
    assert indent_line("", "    ") == ""
    assert indent_line("x;", "  ") == "  x;"


def test_split_block():
    assert split_block("a\nb\n") == ["a", "b"]
    assert split_block(["a", "", "b\nc"]) == ["a", "", "b", "c"]
    assert split_block([]) == []


def test_line_buffer_is_append_only():
    buffer = LineBuffer()
    buffer.append("a")
    buffer.append("")
    assert buffer.lines == ("a", "")
    assert buffer.text() == "a\n"
    assert len(buffer) == 2


@pytest.mark.parametrize(
    "value, expected",
    [(100, "100"), (100.0, "100"), (33.5, "33.5"), (-4.0, "-4"), (0, "0"), (0.25, "0.25")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_substitution_replaces_every_occurrence():
    text = "class $T : X { $T() {} }; TEST_F($T, a)"
    assert substitute_placeholder(text, "$T", "Foo") == "class Foo : X { Foo() {} }; TEST_F(Foo, a)"
    assert substitute_placeholder(text, "", "Foo") == text


def test_cxx_string_literal():
    assert cxx_string_literal("100px") == '"100px"'
    assert cxx_string_literal('a"b\\c') == '"a\\"b\\\\c"'


def test_format_number_keeps_float_notation_beyond_exact_integers():
    assert format_number(2.0 ** 53 - 1) == "9007199254740991"
    assert format_number(1e25) == "1e+25"
    assert format_number(-1e25) == "-1e+25"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_format_number_refuses_non_finite(value):
    with pytest.raises(ValueError):
        format_number(value)
