"""Runtime values for Fern.

This module defines the values produced by the interpreter: integers,
booleans, closures and data values built by user-declared constructors.
It also defines the call stack frames recorded for diagnostics and a
helper to render values the way the command-line tools display them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .ast import Node, Span, EMPTY_SPAN
from .environment import Environment


@dataclass(frozen=True)
class NumVal:
    value: int

    def __repr__(self) -> str:
        return f"NumVal({self.value})"


@dataclass(frozen=True)
class BoolVal:
    value: bool

    def __repr__(self) -> str:
        return f"BoolVal({self.value})"


@dataclass(frozen=True)
class Closure:
    """A function value.

    `env` is the environment the closure was created in. Environments are
    persistent, so holding on to it shares structure with the creator and
    never copies bindings.
    """
    params: Tuple[str, ...]
    body: Node
    env: Environment = field(default_factory=Environment.empty)

    def __repr__(self) -> str:
        return f"<lambda({', '.join(self.params)})>"


@dataclass(frozen=True)
class DataVal:
    """A value built by a data constructor: a tag and its ordered fields."""
    tag: str
    fields: Tuple[Value, ...] = ()

    def __repr__(self) -> str:
        return f"DataVal({self.tag!r}, {list(self.fields)!r})"


Value = object  # NumVal | BoolVal | Closure | DataVal


@dataclass(frozen=True)
class StackFrame:
    span: Span
    arg_env: Environment = field(default_factory=Environment.empty, compare=False)


Stack = Tuple[StackFrame, ...]


def new_stack() -> Stack:
    """Return a call stack holding only the synthetic root frame."""
    return (StackFrame(EMPTY_SPAN),)


def to_string(value) -> str:
    """Convert a runtime value to its printed representation."""
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, NumVal):
        return str(value.value)
    if isinstance(value, Closure):
        return repr(value)
    if isinstance(value, DataVal):
        if not value.fields:
            return value.tag
        inner = ", ".join(to_string(f) for f in value.fields)
        return f"{value.tag}({inner})"
    return str(value)


def values_equal(a, b) -> bool:
    """Structural equality; values of different kinds are simply unequal."""
    if isinstance(a, DataVal) and isinstance(b, DataVal):
        if a.tag != b.tag or len(a.fields) != len(b.fields):
            return False
        return all(values_equal(x, y) for x, y in zip(a.fields, b.fields))
    if type(a) is not type(b):
        return False
    return a == b

