# Fern language package
# This package provides a parser and tree-walking interpreter for the Fern language.
from .diagnostics import render_exception
from .errors import FernError, LexError, ParseError, InterpError
from .interpreter import interpret, run_program, Interpreter
from .lexer import tokenize
from .parser import parse_source

__all__ = [
    'interpret',
    'run_program',
    'Interpreter',
    'parse_source',
    'tokenize',
    'render_exception',
    'FernError',
    'LexError',
    'ParseError',
    'InterpError',
]
