import pytest

from fern.environment import Environment
from fern.types import NumVal


def test_extend_does_not_change_original():
    base = Environment.empty().extend('x', NumVal(1))
    child = base.extend('x', NumVal(2)).extend('y', NumVal(3))
    assert base['x'] == NumVal(1)
    assert 'y' not in base
    assert child['x'] == NumVal(2)
    assert child.to_dict() == {'x': NumVal(2), 'y': NumVal(3)}


def test_union_prefers_right_hand_bindings():
    left = Environment(values={'a': NumVal(1), 'b': NumVal(2)})
    right = Environment(values={'b': NumVal(20), 'c': NumVal(30)})
    merged = left.union(right)
    assert merged.to_dict() == {'a': NumVal(1), 'b': NumVal(20), 'c': NumVal(30)}
    assert left.to_dict() == {'a': NumVal(1), 'b': NumVal(2)}


def test_union_with_empty_side_returns_other():
    env = Environment(values={'a': NumVal(1)})
    assert env.union(Environment.empty()) is env
    assert Environment.empty().union(env) is env


def test_lookup_of_missing_name():
    env = Environment.empty()
    assert env.get('missing') is None
    assert not env
    with pytest.raises(KeyError):
        env['missing']


def test_source_mapping_is_copied():
    values = {'a': NumVal(1)}
    env = Environment(values=values)
    values['a'] = NumVal(2)
    assert env['a'] == NumVal(1)
    assert len(env) == 1
