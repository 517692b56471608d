import pytest

from fern.ast import (
    Number, Bool, Variable, Let, LetTopLevel, BinaryOp, Lambda, Function, Call, If,
    DataDeclaration, Match, Span, NumberPattern, IdentifierPattern, DataPattern, BoolPattern,
)
from fern.errors import ParseError
from fern.lexer import tokenize
from fern.parser import parse_expression, parse_source


def parse_one(source):
    program = parse_source(source)
    assert len(program) == 1
    return program[0]


def test_multiplication_binds_tighter_than_addition():
    assert parse_one("1 + 2 * 3") == BinaryOp('+', Number(1), BinaryOp('*', Number(2), Number(3)))


def test_subtraction_is_left_associative():
    assert parse_one("1 - 2 - 3") == BinaryOp('-', BinaryOp('-', Number(1), Number(2)), Number(3))


def test_power_is_right_associative():
    assert parse_one("2 ** 3 ** 2") == BinaryOp('**', Number(2), BinaryOp('**', Number(3), Number(2)))


def test_logical_and_comparison_levels():
    assert parse_one("a < b && c == d || e") == BinaryOp(
        '||',
        BinaryOp('&&', BinaryOp('<', Variable('a'), Variable('b')), BinaryOp('==', Variable('c'), Variable('d'))),
        Variable('e'),
    )


def test_parentheses_override_precedence():
    assert parse_one("(1 + 2) * 3") == BinaryOp('*', BinaryOp('+', Number(1), Number(2)), Number(3))


def test_prefix_minus_is_zero_minus():
    assert parse_one("-x * 2") == BinaryOp('*', BinaryOp('-', Number(0), Variable('x')), Number(2))


def test_call_binds_tightest_and_chains():
    assert parse_one("f(1)(2) + 3") == BinaryOp(
        '+', Call(Call(Variable('f'), [Number(1)]), [Number(2)]), Number(3),
    )


def test_call_span_covers_closing_paren():
    node = parse_one("foo(1, 2)")
    assert node.span == Span(0, 9)


def test_top_level_let_ends_after_binding():
    program = parse_source("let a = 1\nlet b = 2 b")
    assert program == [LetTopLevel('a', Number(1)), LetTopLevel('b', Number(2)), Variable('b')]


def test_scoped_let_inside_expression():
    node = parse_one("(let a = 1 a + 1 end)")
    assert node == Let('a', Number(1), BinaryOp('+', Variable('a'), Number(1)))


def test_lambda_and_function():
    program = parse_source("function add(a, b): a + b end lambda(): true end")
    assert program == [
        Function('add', ['a', 'b'], BinaryOp('+', Variable('a'), Variable('b'))),
        Lambda([], Bool(True)),
    ]


def test_if_with_elif():
    node = parse_one("if a: 1 elif b: 2 else: 3 end")
    assert node == If([(Variable('a'), Number(1)), (Variable('b'), Number(2))], Number(3))


def test_data_declaration():
    node = parse_one("data Shape = Circle(r) | Square(side) | Empty")
    assert node == DataDeclaration('Shape', [('Circle', ['r']), ('Square', ['side']), ('Empty', [])])


def test_match_patterns():
    node = parse_one("match v case 0: a case -1: b case true: c case Pair(x, _): x case y: y end")
    assert node == Match(Variable('v'), [
        (NumberPattern(0), Variable('a')),
        (NumberPattern(-1), Variable('b')),
        (BoolPattern(True), Variable('c')),
        (DataPattern('Pair', [IdentifierPattern('x'), IdentifierPattern('_')]), Variable('x')),
        (IdentifierPattern('y'), Variable('y')),
    ])


def test_parse_expression_returns_remaining_tokens():
    node, rest = parse_expression(tokenize("1 + 2 3"))
    assert node == BinaryOp('+', Number(1), Number(2))
    assert [t.value for t in rest] == [3]


def test_min_binding_power_stops_early():
    node, rest = parse_expression(tokenize("1 + 2 * 3"), 8)
    assert node == Number(1)
    assert [t.kind for t in rest] == ['PLUS', 'NUMBER', 'STAR', 'NUMBER']


def test_function_not_at_top_level():
    with pytest.raises(ParseError) as exc:
        parse_source("let f = function g(x): x end")
    assert exc.value.message == "Function definitions are only allowed at the top level"


def test_data_not_at_top_level():
    with pytest.raises(ParseError) as exc:
        parse_source("(data T = A)")
    assert exc.value.message == "Data declarations are only allowed at the top level"


def test_missing_end():
    with pytest.raises(ParseError) as exc:
        parse_source("lambda(x): x 1")
    assert exc.value.message == "Expected 'end' while parsing lambda body but found 1"
    assert exc.value.span == Span(13, 14)


def test_ran_out_of_tokens():
    with pytest.raises(ParseError) as exc:
        parse_source("1 +")
    assert exc.value.message == "Ran out of tokens while parsing expression"
    assert exc.value.span == Span(3, 3)


def test_unexpected_token_at_start():
    with pytest.raises(ParseError) as exc:
        parse_source(")")
    assert exc.value.message == "Unexpected ')' at start of expression"


def test_duplicate_parameter():
    with pytest.raises(ParseError) as exc:
        parse_source("lambda(a, a): a end")
    assert exc.value.message == "Duplicate parameter a in lambda parameters"


def test_declarations_end_their_top_level_item():
    program = parse_source("function f(x): x end\n-1\nf(2)")
    assert program == [
        Function('f', ['x'], Variable('x')),
        BinaryOp('-', Number(0), Number(1)),
        Call(Variable('f'), [Number(2)]),
    ]
    program = parse_source("data T = A | B(x)\n-1")
    assert program[1] == BinaryOp('-', Number(0), Number(1))
    program = parse_source("function g(): 1 end\n(3)")
    assert program[1] == Number(3)
