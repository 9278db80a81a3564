# tests/unit/core/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import copy
import pickle

from tsm.core.errors import InvalidTransitionError, PersistenceError, StateMachineError


def test_error_hierarchy():
    assert issubclass(InvalidTransitionError, StateMachineError)
    assert issubclass(PersistenceError, StateMachineError)
    assert issubclass(StateMachineError, Exception)


def test_invalid_transition_error():
    error = InvalidTransitionError(from_state="Red", to_state="Yellow")
    assert error.from_state == "Red"
    assert error.to_state == "Yellow"
    assert str(error) == "Invalid transition: Red → Yellow"


def test_invalid_transition_equality():
    assert InvalidTransitionError("a", "b") == InvalidTransitionError("a", "b")
    assert InvalidTransitionError("a", "b") != InvalidTransitionError("b", "a")
    assert hash(InvalidTransitionError("a", "b")) == hash(InvalidTransitionError("a", "b"))


def test_persistence_error():
    error = PersistenceError("write failed", key="com.statemachine.light")
    assert error.key == "com.statemachine.light"
    assert str(error) == "write failed"
    assert PersistenceError("no key").key is None


def test_invalid_transition_error_survives_pickle_and_copy():
    error = InvalidTransitionError("Red", "Yellow")
    for clone in (pickle.loads(pickle.dumps(error)), copy.copy(error)):
        assert type(clone) is InvalidTransitionError
        assert clone == error
        assert str(clone) == "Invalid transition: Red → Yellow"


def test_persistence_error_survives_pickle_and_copy():
    error = PersistenceError("read failed", key="com.statemachine.light")
    for clone in (pickle.loads(pickle.dumps(error)), copy.copy(error)):
        assert type(clone) is PersistenceError
        assert str(clone) == "read failed"
        assert clone.key == "com.statemachine.light"
