import json

import pytest

from fern.ast import Span
from fern.ast_json import program_to_obj, program_from_obj
from fern.interpreter import interpret
from fern.parser import parse_source
from fern.types import to_string

SOURCE = """
data Tree = Node(left, right) | Leaf(value)
function total(t):
  match t
  case Leaf(v): v
  case Node(l, r): total(l) + total(r)
  end
end
let double = lambda(x): if x > 0: x * 2 elif x == 0: 0 else: -x end end
total(Node(Leaf(1), Node(Leaf(2), Leaf(double(3)))))
let flag = match true case false: 0 case _: 1 end
let y = (let z = 2 z end)
y
"""


def test_program_survives_json_round_trip():
    program = parse_source(SOURCE)
    restored = program_from_obj(json.loads(json.dumps(program_to_obj(program))))
    assert restored == program
    assert [n.span for n in restored] == [n.span for n in program]
    assert [to_string(v) for v in interpret(restored)] == ['9', '2']


def test_serialised_form():
    obj = program_to_obj(parse_source("f(1)"))
    assert obj == {
        "type": "Program",
        "body": [{
            "type": "Call",
            "callee": {"type": "Variable", "name": "f", "span": [0, 1]},
            "args": [{"type": "Number", "value": 1, "span": [2, 3]}],
            "span": [0, 4],
        }],
    }


def test_missing_span_defaults_to_empty():
    (node,) = program_from_obj({"type": "Program", "body": [{"type": "Number", "value": 3}]})
    assert node.span == Span(0, 0)


def test_rejects_unknown_objects():
    with pytest.raises(ValueError):
        program_from_obj({"type": "Module", "body": []})
    with pytest.raises(ValueError):
        program_from_obj({"type": "Program", "body": [{"type": "While"}]})
