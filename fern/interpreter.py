"""Interpreter for the Fern language.

This module evaluates parsed Fern programs. Evaluation is a direct tree
walk over the AST produced by `fern.parser`:

1. **Setup**: data declarations are expanded into constructor functions
   and, together with every explicitly defined function, collected into
   a single function table.

2. **Evaluation**: top-level nodes are evaluated left to right. Top-level
   ``let`` bindings extend the environment seen by later nodes, function
   and data declarations produce nothing, and every other node produces
   one value.

Environments are persistent (see `fern.environment`), so closures capture
the environment they were created in without copying it, and a callee
can never disturb the bindings of its caller. Each call pushes a frame
onto a copy of the call stack; errors carry the stack as it was at the
failure point so that a traceback can be rendered.
"""

from __future__ import annotations

import operator
from typing import Dict, List, Optional

from .ast import (
    Node, Number, Bool, Variable, Let, LetTopLevel, BinaryOp, Lambda, Function,
    Call, If, DataDeclaration, DataLiteral, Match,
    Pattern, BoolPattern, NumberPattern, IdentifierPattern, DataPattern,
)
from .desugar import expand_data_declarations
from .environment import Environment
from .errors import InterpError
from .parser import parse_source
from .types import (
    NumVal, BoolVal, Closure, DataVal, Value, Stack, StackFrame,
    new_stack, to_string, values_equal,
)


def build_function_table(program: List[Node]) -> Environment:
    """Collect top-level functions and constructor functions.

    Constructor functions come last, so a constructor shadows a function
    of the same name.
    """
    functions: Dict[str, Closure] = {}
    for node in list(program) + expand_data_declarations(program):
        if isinstance(node, Function):
            functions[node.name] = Closure(tuple(node.params), node.body, Environment.empty())
    return Environment(values=functions)


def match_pattern(pattern: Pattern, value: Value) -> Optional[Dict[str, Value]]:
    """Return the bindings made by matching `value`, or None if it does not match."""
    if isinstance(pattern, BoolPattern):
        return {} if values_equal(value, BoolVal(pattern.value)) else None
    if isinstance(pattern, NumberPattern):
        return {} if values_equal(value, NumVal(pattern.value)) else None
    if isinstance(pattern, IdentifierPattern):
        if pattern.name == '_':
            return {}
        return {pattern.name: value}
    if isinstance(pattern, DataPattern):
        if not isinstance(value, DataVal):
            return None
        if value.tag != pattern.constructor or len(value.fields) != len(pattern.patterns):
            return None
        bindings: Dict[str, Value] = {}
        for sub_pattern, field_value in zip(pattern.patterns, value.fields):
            sub_bindings = match_pattern(sub_pattern, field_value)
            if sub_bindings is None:
                return None
            bindings.update(sub_bindings)
        return bindings
    raise NotImplementedError(f"match_pattern: unexpected pattern type {type(pattern)}")


def truncating_divide(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def truncating_modulo(a: int, b: int) -> int:
    return a - b * truncating_divide(a, b)


ARITHMETIC_OPS = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': truncating_divide,
    '%': truncating_modulo,
    '**': operator.pow,
    '&': operator.and_,
    '|': operator.or_,
    '^': operator.xor,
}

COMPARISON_OPS = {
    '<': operator.lt,
    '>': operator.gt,
    '<=': operator.le,
    '>=': operator.ge,
}

# Results of ** wider than this many bits are refused.
MAX_POWER_BITS = 1 << 16

LOGICAL_OPS = {
    '&&': lambda a, b: a and b,
    '||': lambda a, b: a or b,
}


class Interpreter:
    """Core interpreter that evaluates Fern programs.

    An interpreter keeps the top-level environment and the function table
    between calls to `run`, which is what the REPL relies on. A single
    call to `run` behaves exactly like `interpret`.
    """
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = None):
        self.global_env = Environment.empty()
        self.functions = Environment.empty()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: List[Node]) -> List[Value]:
        self.functions = self.functions.union(build_function_table(program))
        values: List[Value] = []
        for node in program:
            if isinstance(node, LetTopLevel):
                value = self.evaluate_top_level(node.binding, node)
                self.global_env = self.global_env.extend(node.name, value)
                if self.debug_level >= 1:
                    self.debug(f"let {node.name} = {to_string(value)}")
            elif isinstance(node, Let):
                raise InterpError("Found scoped let instead of top-level let at top level",
                                  node.span, self.global_env, new_stack())
            elif isinstance(node, (Function, DataDeclaration)):
                continue
            else:
                value = self.evaluate_top_level(node, node)
                if self.debug_level >= 1:
                    self.debug(f"value {to_string(value)}")
                values.append(value)
        return values

    def evaluate_top_level(self, expr: Node, node: Node) -> Value:
        stack = new_stack()
        try:
            return self.evaluate(expr, self.global_env, stack)
        except RecursionError:
            # Overflow outside any call, e.g. a deeply nested expression; only the root frame exists.
            raise InterpError("Maximum recursion depth exceeded", node.span, self.global_env, stack) from None

    def evaluate(self, node: Node, env: Environment, stack: Stack) -> Value:
        if isinstance(node, Number):
            return NumVal(node.value)
        if isinstance(node, Bool):
            return BoolVal(node.value)
        if isinstance(node, Variable):
            if node.name in env:
                return env[node.name]
            if node.name in self.functions:
                return self.functions[node.name]
            raise InterpError(f"Couldn't find var in environment: {node.name}", node.span, env, stack)
        if isinstance(node, Let):
            value = self.evaluate(node.binding, env, stack)
            return self.evaluate(node.body, env.extend(node.name, value), stack)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env, stack)
            right = self.evaluate(node.right, env, stack)
            return self.apply_binary_op(node, left, right, env, stack)
        if isinstance(node, Lambda):
            return Closure(tuple(node.params), node.body, env)
        if isinstance(node, Call):
            return self.call_function(node, env, stack)
        if isinstance(node, If):
            for condition, body in node.branches:
                cond = self.evaluate(condition, env, stack)
                if not isinstance(cond, BoolVal):
                    raise InterpError(f"Conditional expression with non-boolean condition: {to_string(cond)}",
                                      condition.span, env, stack)
                if self.debug_level >= 3:
                    self.debug(f"if condition -> {to_string(cond)}")
                if cond.value:
                    return self.evaluate(body, env, stack)
            return self.evaluate(node.else_branch, env, stack)
        if isinstance(node, DataLiteral):
            fields = [self.evaluate(f, env, stack) for f in node.fields]
            return DataVal(node.constructor, tuple(fields))
        if isinstance(node, Match):
            value = self.evaluate(node.scrutinee, env, stack)
            for index, (pattern, body) in enumerate(node.arms):
                bindings = match_pattern(pattern, value)
                if bindings is None:
                    continue
                if self.debug_level >= 3:
                    self.debug(f"match {to_string(value)} -> arm {index}")
                return self.evaluate(body, env.union(Environment(values=bindings)), stack)
            raise InterpError(f"No branch of match expression matched value: {to_string(value)}",
                              node.span, env, stack)
        if isinstance(node, LetTopLevel):
            raise InterpError("Found top-level let inside an expression", node.span, env, stack)
        if isinstance(node, Function):
            raise InterpError("Function definition not at top level", node.span, env, stack)
        if isinstance(node, DataDeclaration):
            raise InterpError("Data declaration not at top level", node.span, env, stack)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, node: Call, env: Environment, stack: Stack) -> Value:
        func = self.evaluate(node.callee, env, stack)
        if not isinstance(func, Closure):
            raise InterpError(f"Function call with non-function value: {to_string(func)}", node.span, env, stack)
        if len(func.params) != len(node.args):
            raise InterpError(
                f"Function takes {len(func.params)} arguments but {len(node.args)} were provided",
                node.span, env, stack,
            )
        # Arguments are evaluated in the caller's environment, left to right.
        args: Dict[str, Value] = {}
        for param, arg in zip(func.params, node.args):
            args[param] = self.evaluate(arg, env, stack)
        arg_env = Environment(values=args)
        if self.debug_level >= 2:
            name = node.callee.name if isinstance(node.callee, Variable) else 'lambda'
            shown = ", ".join(f"{k}={to_string(v)}" for k, v in args.items())
            self.debug(f"call {name}({shown}) depth {len(stack)}")
        call_stack = stack + (StackFrame(node.span, arg_env),)
        try:
            return self.evaluate(func.body, func.env.union(arg_env), call_stack)
        except RecursionError:
            # Reported from the innermost call that still has room to build the error.
            raise InterpError("Maximum recursion depth exceeded", node.span, env, call_stack) from None

    def apply_binary_op(self, node: BinaryOp, a: Value, b: Value, env: Environment, stack: Stack) -> Value:
        op = node.op
        if op == '==':
            return BoolVal(values_equal(a, b))
        if op == '!=':
            return BoolVal(not values_equal(a, b))
        if op in ARITHMETIC_OPS:
            self.check_operands(node, a, b, NumVal, env, stack)
            if op in ('/', '%') and b.value == 0:
                raise InterpError('Division by zero' if op == '/' else 'Modulo by zero', node.span, env, stack)
            if op == '**' and b.value < 0:
                raise InterpError(f"Negative exponent: {b.value}", node.span, env, stack)
            if op == '**' and abs(a.value) > 1 and b.value * a.value.bit_length() > MAX_POWER_BITS:
                raise InterpError(f"Exponent too large: {b.value}", node.span, env, stack)
            return NumVal(ARITHMETIC_OPS[op](a.value, b.value))
        if op in COMPARISON_OPS:
            self.check_operands(node, a, b, NumVal, env, stack)
            return BoolVal(COMPARISON_OPS[op](a.value, b.value))
        if op in LOGICAL_OPS:
            self.check_operands(node, a, b, BoolVal, env, stack)
            return BoolVal(LOGICAL_OPS[op](a.value, b.value))
        raise InterpError(f"Unknown operator {op}", node.span, env, stack)

    def check_operands(self, node: BinaryOp, a: Value, b: Value, kind: type, env: Environment, stack: Stack):
        a_ok = isinstance(a, kind)
        b_ok = isinstance(b, kind)
        if a_ok and b_ok:
            return
        if a_ok:
            msg = f"Bad second operand to {node.op}: {to_string(b)}"
        elif b_ok:
            msg = f"Bad first operand to {node.op}: {to_string(a)}"
        else:
            msg = f"Bad operands to {node.op}: {to_string(a)} and {to_string(b)}"
        raise InterpError(msg, node.span, env, stack)


def interpret(program: List[Node], debug_level: int = 0) -> List[Value]:
    """Evaluate a program and return the value of every top-level expression."""
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program)


def run_program(source: str, debug_level: int = 0) -> List[Value]:
    """Convenience function to parse and run a Fern program from source string."""
    return interpret(parse_source(source), debug_level=debug_level)
