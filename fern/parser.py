"""Parser for the Fern language.

This module implements a precedence-climbing (Pratt) parser. The parser
itself only knows how to drive parselets: it pops a token, asks the
prefix parselet registered for that token kind to build a left-hand
node, then keeps handing the node to infix/postfix parselets for as
long as their binding power is strictly greater than the minimum the
caller asked for. All grammar knowledge lives in `fern.parselets`.

Tokens are consumed from the front of the program. Parsing stops at the
first error; there is no recovery, and no partial tree is returned.

`parse_program` is the usual entry point and returns the list of
top-level nodes of a program.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Node, Span, Pattern, BoolPattern, NumberPattern, IdentifierPattern, DataPattern,
)
from .errors import ParseError
from .lexer import Token, tokenize
from .parselets import PREFIX_PARSELETS, INFIX_PARSELETS


TOKEN_DESCRIPTIONS = {
    'NUMBER': 'a number',
    'NAME': 'an identifier',
    'LPAREN': "'('",
    'RPAREN': "')'",
    'COMMA': "','",
    'COLON': "':'",
    'EQ': "'='",
    'END': "'end'",
    'ELSE': "'else'",
    'CASE': "'case'",
}


def describe(kind: str) -> str:
    return TOKEN_DESCRIPTIONS.get(kind, kind.lower())


class Parser:
    def __init__(self, tokens: List[Token]):
        # Stored back to front so that consuming a token is a pop from the end.
        self.tokens = list(reversed(tokens))
        self.last_span = Span(0, 0)

    def remaining(self) -> List[Token]:
        return list(reversed(self.tokens))

    def peek(self) -> Optional[Token]:
        if self.tokens:
            return self.tokens[-1]
        return None

    def match(self, kind: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind

    def next(self, context: str) -> Token:
        if not self.tokens:
            end = self.last_span.end
            raise ParseError(f"Ran out of tokens while parsing {context}", Span(end, end))
        token = self.tokens.pop()
        self.last_span = token.span
        return token

    def expect(self, kind: str, context: str) -> Token:
        token = self.next(context)
        if token.kind != kind:
            raise ParseError(
                f"Expected {describe(kind)} while parsing {context} but found {token.value!r}",
                token.span,
            )
        return token

    def parse_expression(self, min_binding_power: int = 0, is_top_level: bool = False) -> Node:
        token = self.next('expression')
        prefix = PREFIX_PARSELETS.get(token.kind)
        if prefix is None:
            raise ParseError(f"Unexpected {token.value!r} at start of expression", token.span)
        left = prefix.parse(self, token, is_top_level)
        if prefix.is_declaration:
            return left

        while True:
            token = self.peek()
            if token is None:
                break
            infix = INFIX_PARSELETS.get(token.kind)
            if infix is None or infix.binding_power <= min_binding_power:
                break
            self.next('expression')
            left = infix.parse(self, left, token)
        return left

    def parse_params(self, context: str) -> List[str]:
        """Parse ``name, name, ...)``; the opening parenthesis is already consumed."""
        params: List[str] = []
        if self.match('RPAREN'):
            self.next(context)
            return params
        while True:
            name = self.expect('NAME', context)
            if name.value in params:
                raise ParseError(f"Duplicate parameter {name.value} in {context}", name.span)
            params.append(name.value)
            token = self.next(context)
            if token.kind == 'RPAREN':
                return params
            if token.kind != 'COMMA':
                raise ParseError(
                    f"Expected ',' or ')' while parsing {context} but found {token.value!r}",
                    token.span,
                )

    def parse_args(self) -> List[Node]:
        """Parse ``expr, expr, ...)``; the opening parenthesis is already consumed."""
        args: List[Node] = []
        if self.match('RPAREN'):
            self.next('function call arguments')
            return args
        while True:
            args.append(self.parse_expression(0, False))
            token = self.next('function call arguments')
            if token.kind == 'RPAREN':
                return args
            if token.kind != 'COMMA':
                raise ParseError(
                    f"Expected ',' or ')' while parsing function call arguments but found {token.value!r}",
                    token.span,
                )

    def parse_pattern(self) -> Pattern:
        token = self.next('pattern')
        if token.kind == 'NUMBER':
            return NumberPattern(token.value)
        if token.kind == 'MINUS':
            number = self.expect('NUMBER', 'negative number pattern')
            return NumberPattern(-number.value)
        if token.kind in ('TRUE', 'FALSE'):
            return BoolPattern(token.value)
        if token.kind == 'NAME':
            if not self.match('LPAREN'):
                return IdentifierPattern(token.value)
            self.next('data pattern')
            patterns: List[Pattern] = []
            if self.match('RPAREN'):
                self.next('data pattern')
                return DataPattern(token.value, patterns)
            while True:
                patterns.append(self.parse_pattern())
                sep = self.next('data pattern')
                if sep.kind == 'RPAREN':
                    return DataPattern(token.value, patterns)
                if sep.kind != 'COMMA':
                    raise ParseError(
                        f"Expected ',' or ')' while parsing data pattern but found {sep.value!r}",
                        sep.span,
                    )
        raise ParseError(f"Unexpected {token.value!r} in pattern", token.span)

    def parse_program(self) -> List[Node]:
        program: List[Node] = []
        while self.peek() is not None:
            program.append(self.parse_expression(0, True))
        return program


def parse_expression(tokens: List[Token], min_binding_power: int = 0,
                     is_top_level: bool = False) -> Tuple[Node, List[Token]]:
    """Parse one expression from the front of `tokens`.

    Returns the node together with the tokens left unconsumed.
    """
    parser = Parser(tokens)
    node = parser.parse_expression(min_binding_power, is_top_level)
    return node, parser.remaining()


def parse_program(tokens: List[Token]) -> List[Node]:
    """Parse a whole token stream into its top-level nodes."""
    return Parser(tokens).parse_program()


def parse_source(source: str) -> List[Node]:
    """Tokenize and parse Fern source code."""
    return parse_program(tokenize(source))
