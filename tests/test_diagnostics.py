import pytest

from fern.ast import Span
from fern.diagnostics import index_to_position, position_label, render_error, render_traceback, render_exception
from fern.environment import Environment
from fern.errors import InterpError, ParseError
from fern.types import StackFrame, new_stack

SOURCE = "ab\ncd"


def test_index_to_position():
    assert index_to_position(SOURCE, 0) == (0, 0)
    assert index_to_position(SOURCE, 1) == (0, 1)
    assert index_to_position(SOURCE, 2) == (0, 2)
    assert index_to_position(SOURCE, 3) == (1, 0)
    assert index_to_position(SOURCE, 5) == (1, 2)


def test_index_outside_source():
    with pytest.raises(ValueError):
        index_to_position(SOURCE, 6)
    with pytest.raises(ValueError):
        index_to_position(SOURCE, -1)


def test_position_label_is_one_based():
    assert position_label(SOURCE, 0, 'main.fern') == 'main.fern:1:1'
    assert position_label(SOURCE, 4, 'main.fern') == 'main.fern:2:2'


def test_underline_first_character_of_file():
    assert render_error("boom", Span(0, 1), SOURCE, "f") == (
        "error in f: boom\n"
        "   1 | ab\n"
        "     | ^"
    )


def test_underline_last_character_of_line():
    assert render_error("boom", Span(4, 5), SOURCE, "f") == (
        "error in f: boom\n"
        "   2 | cd\n"
        "     |  ^"
    )


def test_underline_span_across_newline():
    assert render_error("boom", Span(1, 4), SOURCE, "f") == (
        "error in f: boom\n"
        "   1 | ab\n"
        "     |  ^\n"
        "   2 | cd\n"
        "     | ^"
    )


def test_empty_span_still_gets_a_caret():
    assert render_error("boom", Span(2, 2), SOURCE, "f").split("\n")[-1] == "     |   ^"


def test_traceback_skips_root_frame():
    source = "1\nf(1)"
    stack = new_stack() + (StackFrame(Span(2, 6)),)
    assert render_traceback(stack, source, "f") == "#0: f:2:1\n\tf(1)"


def test_render_exception_adds_call_stack_only_for_nested_errors():
    source = "1\nf(1)"
    shallow = InterpError("bad", Span(0, 1), Environment.empty(), new_stack())
    assert "call stack" not in render_exception(shallow, source, "f")

    nested = InterpError("bad", Span(4, 5), Environment.empty(), new_stack() + (StackFrame(Span(2, 6)),))
    assert render_exception(nested, source, "f").endswith("call stack:\n#0: f:2:1\n\tf(1)")

    parse = ParseError("Ran out of tokens while parsing expression", Span(6, 6))
    assert render_exception(parse, source, "f").startswith("error in f: Ran out of tokens")


def test_span_ending_at_line_start_stops_at_previous_line():
    assert render_error("boom", Span(0, 3), SOURCE, "f") == (
        "error in f: boom\n"
        "   1 | ab\n"
        "     | ^^"
    )
    assert render_error("boom", Span(1, 3), "ab\ncd\nef", "f") == (
        "error in f: boom\n"
        "   1 | ab\n"
        "     |  ^"
    )
