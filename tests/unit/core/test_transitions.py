# tests/unit/core/test_transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from tests.helpers import LIGHT_TABLE, Light
from tsm.core.transitions import Transition, TransitionTable, describe_state
from tsm.interfaces.protocols import TransitionType


def test_describe_state():
    assert describe_state(Light.Red) == "Red"
    assert describe_state("idle") == "idle"
    assert describe_state(3) == "3"


def test_transition_satisfies_protocol():
    transition = Transition(state=Light.Green, effect="go")
    assert isinstance(transition, TransitionType)
    assert transition.state is Light.Green
    assert transition.effect == "go"


def test_unconditional_transition():
    transition = Transition(state=Light.Green, effect="go")
    assert all(transition.is_valid(light) for light in Light)
    assert transition.process(Light.Red) == ["go"]


def test_allowed_from_is_frozen():
    transition = Transition(state=Light.Green, effect="go", allowed_from=[Light.Red])
    assert transition.allowed_from == frozenset({Light.Red})
    assert transition.is_valid(Light.Red)
    assert not transition.is_valid(Light.Yellow)


def test_guard_takes_precedence():
    transition = Transition(
        state=Light.Green,
        effect="go",
        allowed_from={Light.Red},
        guard=lambda current, target: current is Light.Yellow and target is Light.Green,
    )
    assert transition.is_valid(Light.Yellow)
    assert not transition.is_valid(Light.Red)


def test_custom_effects():
    transition = Transition(
        state=Light.Green,
        effect="go",
        effects=lambda current, target, effect: (f"{current.name}->{target.name}", effect),
    )
    assert transition.process(Light.Red) == ["Red->Green", "go"]


def test_transitions_compare_by_value():
    assert Transition(state=Light.Green, effect="go", allowed_from={Light.Red}) == Transition(
        state=Light.Green, effect="go", allowed_from=[Light.Red]
    )
    with pytest.raises(AttributeError):
        Transition(state=Light.Green, effect="go").state = Light.Red


def test_from_table():
    transition = Transition.from_table({Light.Red: [Light.Green], Light.Yellow: [Light.Green, Light.Red]}, Light.Green, 1)
    assert transition.allowed_from == frozenset({Light.Red, Light.Yellow})


@pytest.mark.parametrize(
    "source,target,allowed",
    [
        (Light.Red, Light.Green, True),
        (Light.Green, Light.Yellow, True),
        (Light.Yellow, Light.Red, True),
        (Light.Red, Light.Yellow, False),
        (Light.Green, Light.Red, False),
        (Light.Yellow, Light.Green, False),
        (Light.Red, Light.Red, False),
    ],
)
def test_table_transitions(source, target, allowed):
    assert LIGHT_TABLE.allows(source, target) is allowed
    assert LIGHT_TABLE.transition(target, "e").is_valid(source) is allowed


def test_table_lookup():
    table = TransitionTable({"a": ["b", "c"]})
    assert table.targets("a") == frozenset({"b", "c"})
    assert table.targets("z") == frozenset()
    assert "a" in table
    assert "b" not in table
