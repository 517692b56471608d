"""Expansion of data declarations into constructor functions.

``data Shape = Circle(r) | Square(side)`` becomes two top-level
functions, ``Circle(r)`` and ``Square(side)``, whose bodies build the
corresponding data literal. After expansion constructors are ordinary
functions, so call sites cannot tell them apart from user functions.
"""

from typing import List

from .ast import Node, Function, DataDeclaration, DataLiteral, Variable


def constructor_function(constructor: str, fields: List[str], decl: DataDeclaration) -> Function:
    body = DataLiteral(constructor, [Variable(f, decl.span) for f in fields], decl.span)
    return Function(constructor, list(fields), body, decl.span)


def expand_data_declarations(program: List[Node]) -> List[Function]:
    functions: List[Function] = []
    for node in program:
        if isinstance(node, DataDeclaration):
            for constructor, fields in node.variants:
                functions.append(constructor_function(constructor, fields, node))
    return functions
