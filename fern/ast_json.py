"""JSON serialization/deserialization for Fern AST.

This module converts between Fern AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, patterns and source spans.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Node,
    Span,
    Number,
    Bool,
    Variable,
    Let,
    LetTopLevel,
    BinaryOp,
    Lambda,
    Function,
    Call,
    If,
    DataDeclaration,
    DataLiteral,
    Match,
    BoolPattern,
    NumberPattern,
    IdentifierPattern,
    DataPattern,
)


def span_to_obj(span: Span) -> List[int]:
    return [span.start, span.end]


def span_from_obj(o: Any) -> Span:
    if o is None:
        return Span(0, 0)
    return Span(int(o[0]), int(o[1]))


def pattern_to_obj(p: Any) -> Dict[str, Any]:
    if isinstance(p, BoolPattern):
        return {"pattern": "Bool", "value": p.value}
    if isinstance(p, NumberPattern):
        return {"pattern": "Number", "value": p.value}
    if isinstance(p, IdentifierPattern):
        return {"pattern": "Identifier", "name": p.name}
    if isinstance(p, DataPattern):
        return {
            "pattern": "Data",
            "constructor": p.constructor,
            "patterns": [pattern_to_obj(s) for s in p.patterns],
        }
    raise TypeError(f"Unsupported pattern for serialization: {type(p).__name__}")


def pattern_from_obj(o: Dict[str, Any]) -> Any:
    kind = o.get("pattern")
    if kind == "Bool":
        return BoolPattern(bool(o["value"]))
    if kind == "Number":
        return NumberPattern(int(o["value"]))
    if kind == "Identifier":
        return IdentifierPattern(o["name"])
    if kind == "Data":
        return DataPattern(o["constructor"], [pattern_from_obj(s) for s in o["patterns"]])
    raise ValueError(f"Unknown pattern type: {kind}")


def ast_to_obj(node: Any) -> Any:
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]

    if isinstance(node, Number):
        return {"type": "Number", "value": node.value, "span": span_to_obj(node.span)}
    if isinstance(node, Bool):
        return {"type": "Bool", "value": node.value, "span": span_to_obj(node.span)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name, "span": span_to_obj(node.span)}
    if isinstance(node, Let):
        return {
            "type": "Let",
            "name": node.name,
            "binding": ast_to_obj(node.binding),
            "body": ast_to_obj(node.body),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, LetTopLevel):
        return {
            "type": "LetTopLevel",
            "name": node.name,
            "binding": ast_to_obj(node.binding),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, Lambda):
        return {"type": "Lambda", "params": list(node.params), "body": ast_to_obj(node.body),
                "span": span_to_obj(node.span)}
    if isinstance(node, Function):
        return {
            "type": "Function",
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, Call):
        return {"type": "Call", "callee": ast_to_obj(node.callee), "args": [ast_to_obj(a) for a in node.args],
                "span": span_to_obj(node.span)}
    if isinstance(node, If):
        return {
            "type": "If",
            "branches": [[ast_to_obj(c), ast_to_obj(b)] for (c, b) in node.branches],
            "else_branch": ast_to_obj(node.else_branch),
            "span": span_to_obj(node.span),
        }
    if isinstance(node, DataDeclaration):
        return {
            "type": "DataDeclaration",
            "type_name": node.type_name,
            "variants": [[name, list(fields)] for (name, fields) in node.variants],
            "span": span_to_obj(node.span),
        }
    if isinstance(node, DataLiteral):
        return {"type": "DataLiteral", "constructor": node.constructor,
                "fields": [ast_to_obj(f) for f in node.fields], "span": span_to_obj(node.span)}
    if isinstance(node, Match):
        return {
            "type": "Match",
            "scrutinee": ast_to_obj(node.scrutinee),
            "arms": [[pattern_to_obj(p), ast_to_obj(b)] for (p, b) in node.arms],
            "span": span_to_obj(node.span),
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    span = span_from_obj(obj.get("span"))
    if t == "Number":
        return Number(value=int(obj["value"]), span=span)
    if t == "Bool":
        return Bool(value=bool(obj["value"]), span=span)
    if t == "Variable":
        return Variable(name=obj["name"], span=span)
    if t == "Let":
        return Let(name=obj["name"], binding=ast_from_obj(obj["binding"]), body=ast_from_obj(obj["body"]),
                   span=span)
    if t == "LetTopLevel":
        return LetTopLevel(name=obj["name"], binding=ast_from_obj(obj["binding"]), span=span)
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), span=span)
    if t == "Lambda":
        return Lambda(params=list(obj["params"]), body=ast_from_obj(obj["body"]), span=span)
    if t == "Function":
        return Function(name=obj["name"], params=list(obj["params"]), body=ast_from_obj(obj["body"]), span=span)
    if t == "Call":
        return Call(callee=ast_from_obj(obj["callee"]), args=[ast_from_obj(a) for a in obj["args"]], span=span)
    if t == "If":
        return If(
            branches=[(ast_from_obj(c), ast_from_obj(b)) for (c, b) in obj["branches"]],
            else_branch=ast_from_obj(obj["else_branch"]),
            span=span,
        )
    if t == "DataDeclaration":
        return DataDeclaration(
            type_name=obj["type_name"],
            variants=[(name, list(fields)) for (name, fields) in obj["variants"]],
            span=span,
        )
    if t == "DataLiteral":
        return DataLiteral(constructor=obj["constructor"], fields=[ast_from_obj(f) for f in obj["fields"]],
                           span=span)
    if t == "Match":
        return Match(
            scrutinee=ast_from_obj(obj["scrutinee"]),
            arms=[(pattern_from_obj(p), ast_from_obj(b)) for (p, b) in obj["arms"]],
            span=span,
        )

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(program: List[Node]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(n) for n in program]}


def program_from_obj(obj: Dict[str, Any]) -> List[Node]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError("AST file does not contain a Program")
    return [ast_from_obj(n) for n in obj["body"]]
