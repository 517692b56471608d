"""Parselets for the Fern Pratt parser.

A parselet knows how to parse one construct once the parser has popped
the token that introduces it. Prefix parselets start an expression
(literals, names, parenthesised expressions and the keyword forms).
Infix and postfix parselets continue an expression that already has a
left-hand side; they carry the binding power the parser compares
against its current minimum before handing control to them.

The registries at the bottom of the module map token kinds to parselet
instances and are the whole grammar configuration of the parser.
"""

from __future__ import annotations

from typing import Dict, TYPE_CHECKING

from .ast import (
    Node, Number, Bool, Variable, Let, LetTopLevel, BinaryOp,
    Lambda, Function, Call, If, DataDeclaration, Match,
)
from .errors import ParseError
from .lexer import Token

if TYPE_CHECKING:
    from .parser import Parser


class PrefixParselet:
    # Declarations are whole top-level items; no infix parselet may extend them.
    is_declaration = False

    def parse(self, parser: 'Parser', token: Token, is_top_level: bool) -> Node:
        raise NotImplementedError


class InfixParselet:
    binding_power = 0

    def parse(self, parser: 'Parser', left: Node, token: Token) -> Node:
        raise NotImplementedError


class NumberParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        return Number(token.value, token.span)


class BoolParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        return Bool(token.value, token.span)


class IdentifierParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        return Variable(token.value, token.span)


class ParenthesisParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        expr = parser.parse_expression(0, False)
        parser.expect('RPAREN', 'parenthesized expression')
        return expr


class NegationParselet(PrefixParselet):
    """Prefix minus, parsed as ``0 - operand``."""
    def __init__(self, binding_power: int):
        self.binding_power = binding_power

    def parse(self, parser, token, is_top_level):
        operand = parser.parse_expression(self.binding_power, False)
        return BinaryOp('-', Number(0, token.span), operand, token.span.merge(operand.span))


class LetParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        name = parser.expect('NAME', 'let identifier').value
        parser.expect('EQ', 'let binding')
        binding = parser.parse_expression(0, False)
        if is_top_level:
            return LetTopLevel(name, binding, token.span.merge(binding.span))
        body = parser.parse_expression(0, False)
        end = parser.expect('END', 'let body')
        return Let(name, binding, body, token.span.merge(end.span))


class LambdaParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        parser.expect('LPAREN', 'lambda parameters')
        params = parser.parse_params('lambda parameters')
        parser.expect('COLON', 'lambda')
        body = parser.parse_expression(0, False)
        end = parser.expect('END', 'lambda body')
        return Lambda(params, body, token.span.merge(end.span))


class FunctionParselet(PrefixParselet):
    is_declaration = True

    def parse(self, parser, token, is_top_level):
        if not is_top_level:
            raise ParseError("Function definitions are only allowed at the top level", token.span)
        name = parser.expect('NAME', 'function name').value
        parser.expect('LPAREN', 'function parameters')
        params = parser.parse_params('function parameters')
        parser.expect('COLON', 'function definition')
        body = parser.parse_expression(0, False)
        end = parser.expect('END', 'function body')
        return Function(name, params, body, token.span.merge(end.span))


class IfParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        branches = []
        condition = parser.parse_expression(0, False)
        parser.expect('COLON', 'if condition')
        branches.append((condition, parser.parse_expression(0, False)))
        while parser.match('ELIF'):
            parser.next('elif')
            condition = parser.parse_expression(0, False)
            parser.expect('COLON', 'elif condition')
            branches.append((condition, parser.parse_expression(0, False)))
        parser.expect('ELSE', 'if expression')
        parser.expect('COLON', 'else branch')
        alternate = parser.parse_expression(0, False)
        end = parser.expect('END', 'if expression')
        return If(branches, alternate, token.span.merge(end.span))


class DataParselet(PrefixParselet):
    is_declaration = True

    def parse(self, parser, token, is_top_level):
        if not is_top_level:
            raise ParseError("Data declarations are only allowed at the top level", token.span)
        type_name = parser.expect('NAME', 'data type name').value
        parser.expect('EQ', 'data declaration')
        variants = []
        seen = set()
        while True:
            ctor = parser.expect('NAME', 'data constructor name')
            if ctor.value in seen:
                raise ParseError(f"Duplicate constructor {ctor.value} in data declaration", ctor.span)
            seen.add(ctor.value)
            span = ctor.span
            fields = []
            if parser.match('LPAREN'):
                parser.next('data constructor fields')
                fields = parser.parse_params('data constructor fields')
                span = parser.last_span
            variants.append((ctor.value, fields))
            if not parser.match('PIPE'):
                break
            parser.next('data declaration')
        return DataDeclaration(type_name, variants, token.span.merge(span))


class MatchParselet(PrefixParselet):
    def parse(self, parser, token, is_top_level):
        scrutinee = parser.parse_expression(0, False)
        parser.expect('CASE', 'match expression')
        arms = []
        while True:
            pattern = parser.parse_pattern()
            parser.expect('COLON', 'match case')
            arms.append((pattern, parser.parse_expression(0, False)))
            if not parser.match('CASE'):
                break
            parser.next('match expression')
        end = parser.expect('END', 'match expression')
        return Match(scrutinee, arms, token.span.merge(end.span))


class OperatorParselet(InfixParselet):
    def __init__(self, op: str, binding_power: int, is_left_associative: bool = True):
        self.op = op
        self.binding_power = binding_power
        self.is_left_associative = is_left_associative

    def parse(self, parser, left, token):
        if self.is_left_associative:
            right = parser.parse_expression(self.binding_power, False)
        else:
            right = parser.parse_expression(self.binding_power - 1, False)
        return BinaryOp(self.op, left, right, left.span.merge(right.span))


class CallParselet(InfixParselet):
    """Postfix parselet for ``callee(arg, ...)``."""
    def __init__(self, binding_power: int):
        self.binding_power = binding_power

    def parse(self, parser, left, token):
        args = parser.parse_args()
        return Call(left, args, left.span.merge(parser.last_span))


# Binding powers; higher binds tighter.
BINDING_POWERS: Dict[str, int] = {
    '||': 1,
    '&&': 2,
    '|': 3,
    '^': 4,
    '&': 5,
    '==': 6, '!=': 6,
    '<': 7, '>': 7, '<=': 7, '>=': 7,
    '+': 8, '-': 8,
    '*': 9, '/': 9, '%': 9,
    '**': 10,
    'call': 11,
}

OPERATOR_TOKENS: Dict[str, str] = {
    'OROR': '||',
    'ANDAND': '&&',
    'PIPE': '|',
    'CARET': '^',
    'AMP': '&',
    'EQEQ': '==',
    'NOTEQ': '!=',
    'LT': '<',
    'GT': '>',
    'LTEQ': '<=',
    'GTEQ': '>=',
    'PLUS': '+',
    'MINUS': '-',
    'STAR': '*',
    'SLASH': '/',
    'PERCENT': '%',
    'POW': '**',
}

RIGHT_ASSOCIATIVE = {'**'}


PREFIX_PARSELETS: Dict[str, PrefixParselet] = {
    'NUMBER': NumberParselet(),
    'TRUE': BoolParselet(),
    'FALSE': BoolParselet(),
    'NAME': IdentifierParselet(),
    'LPAREN': ParenthesisParselet(),
    'MINUS': NegationParselet(BINDING_POWERS['*']),
    'LET': LetParselet(),
    'LAMBDA': LambdaParselet(),
    'FUNCTION': FunctionParselet(),
    'IF': IfParselet(),
    'DATA': DataParselet(),
    'MATCH': MatchParselet(),
}

INFIX_PARSELETS: Dict[str, InfixParselet] = {
    kind: OperatorParselet(op, BINDING_POWERS[op], op not in RIGHT_ASSOCIATIVE)
    for kind, op in OPERATOR_TOKENS.items()
}
INFIX_PARSELETS['LPAREN'] = CallParselet(BINDING_POWERS['call'])
