"""Abstract Syntax Tree (AST) definitions for the Fern language.

The AST classes defined in this module represent the syntactic structure
of parsed Fern programs. They are shared by the parser, the data
declaration desugaring pass and the interpreter. Every node carries the
`Span` of source text it was parsed from so that errors raised anywhere
in the pipeline can point back at the original program.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Span:
    """Half-open range ``[start, end)`` of indices into the source text."""
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")

    def merge(self, other: 'Span') -> 'Span':
        return Span(min(self.start, other.start), max(self.end, other.end))


EMPTY_SPAN = Span(0, 0)


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Number(Node):
    value: int
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Bool(Node):
    value: bool
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Variable(Node):
    name: str
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Let(Node):
    """Scoped binding: ``let name = binding body end``."""
    name: str
    binding: Node
    body: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class LetTopLevel(Node):
    """Top-level binding that extends the environment of later expressions."""
    name: str
    binding: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Lambda(Node):
    params: List[str]
    body: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Function(Node):
    name: str
    params: List[str]
    body: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Call(Node):
    callee: Node
    args: List[Node]
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class If(Node):
    branches: List[Tuple[Node, Node]]  # (condition, body), first true wins
    else_branch: Node
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class DataDeclaration(Node):
    type_name: str
    variants: List[Tuple[str, List[str]]]  # (constructor, field names)
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class DataLiteral(Node):
    constructor: str
    fields: List[Node]
    span: Span = field(default=EMPTY_SPAN, compare=False)


@dataclass
class Match(Node):
    scrutinee: Node
    arms: List[Tuple['Pattern', Node]]
    span: Span = field(default=EMPTY_SPAN, compare=False)


###############################################################################
# Patterns
###############################################################################


@dataclass
class Pattern:
    """Base class for match patterns."""
    pass


@dataclass
class BoolPattern(Pattern):
    value: bool


@dataclass
class NumberPattern(Pattern):
    value: int


@dataclass
class IdentifierPattern(Pattern):
    name: str  # '_' matches anything and binds nothing


@dataclass
class DataPattern(Pattern):
    constructor: str
    patterns: List[Pattern]


Program = List[Node]
