# tests/unit/core/test_history.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from tsm.core.history import StateHistory


def test_seeded_with_initial_state():
    history = StateHistory(3, "a")
    assert history.to_list() == ["a"]
    assert len(history) == 1
    assert history.capacity == 3


def test_evicts_oldest_first():
    history = StateHistory(3, "a")
    for state in "bcde":
        history.append(state)
    assert history.to_list() == ["c", "d", "e"]
    assert list(history) == ["c", "d", "e"]


def test_repeated_states_are_kept():
    history = StateHistory(3, "a")
    history.append("a")
    history.append("a")
    assert history.to_list() == ["a", "a", "a"]


@pytest.mark.parametrize("capacity", [0, -1])
def test_rejects_non_positive_capacity(capacity):
    with pytest.raises(ValueError):
        StateHistory(capacity, "a")


def test_repr():
    assert repr(StateHistory(10, "a")) == "StateHistory(capacity=10, size=1)"
