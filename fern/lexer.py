"""Tokenizer for the Fern language.

Tokens are produced by Lark's basic lexer in lexer-only mode. The
`start` rule below is never used for parsing; parsing is done by the
Pratt parser in `fern.parser`. Keywords are declared as string terminals so that Lark
re-types a `NAME` match such as ``let`` as `LET` while leaving names
like ``letter`` alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .ast import Span
from .errors import LexError


@dataclass(frozen=True)
class Token:
    kind: str
    value: Any
    span: Span

    def __str__(self) -> str:
        return f"{self.kind}({self.value})"


FERN_TOKENS = r"""
    start: token*
    ?token: NUMBER | NAME | TRUE | FALSE
          | LPAREN | RPAREN | COMMA | COLON | EQ
          | END | IF | ELIF | ELSE | LAMBDA | LET | FUNCTION | DATA | MATCH | CASE
          | POW | STAR | SLASH | PERCENT | PLUS | MINUS
          | EQEQ | NOTEQ | LTEQ | GTEQ | LT | GT
          | ANDAND | OROR | AMP | PIPE | CARET

    TRUE: "true"
    FALSE: "false"
    END: "end"
    IF: "if"
    ELIF: "elif"
    ELSE: "else"
    LAMBDA: "lambda"
    LET: "let"
    FUNCTION: "function"
    DATA: "data"
    MATCH: "match"
    CASE: "case"

    NUMBER: /[0-9]+/
    NAME: /[A-Za-z_][A-Za-z0-9_]*/

    LPAREN: "("
    RPAREN: ")"
    COMMA: ","
    COLON: ":"
    EQEQ: "=="
    NOTEQ: "!="
    LTEQ: "<="
    GTEQ: ">="
    EQ: "="
    LT: "<"
    GT: ">"
    POW: "**"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"
    PLUS: "+"
    MINUS: "-"
    ANDAND: "&&"
    OROR: "||"
    AMP: "&"
    PIPE: "|"
    CARET: "^"

    COMMENT: /#[^\n]*/
    %import common.WS
    %ignore WS
    %ignore COMMENT
"""


FERN_LEXER = Lark(FERN_TOKENS, parser=None, lexer='basic')


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens, front of the program first."""
    tokens: List[Token] = []
    try:
        for tok in FERN_LEXER.lex(source):
            if tok.type == 'NUMBER':
                value: Any = int(tok.value)
            elif tok.type in ('TRUE', 'FALSE'):
                value = tok.type == 'TRUE'
            else:
                value = str(tok.value)
            tokens.append(Token(tok.type, value, Span(tok.start_pos, tok.end_pos)))
    except UnexpectedCharacters as e:
        raise LexError(f"Unexpected character {source[e.pos_in_stream]!r}",
                       Span(e.pos_in_stream, e.pos_in_stream + 1)) from e
    return tokens
