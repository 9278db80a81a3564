# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading

import pytest

from tests.helpers import LIGHT_TABLE, Light, Step
from tsm.core.logging_config import CollectingSink, LogLevel
from tsm.core.state_machine import StateMachine
from tsm.core.transitions import Transition


@pytest.fixture
def sink():
    """A sink recording every diagnostic."""
    return CollectingSink()


@pytest.fixture
def light_transition():
    """Returns a factory building a traffic-light transition to a target light."""

    def _factory(target: Light, effect=None):
        return LIGHT_TABLE.transition(target, effect if effect is not None else f"go:{target.name}")

    return _factory


@pytest.fixture
def step_transition():
    """Returns a factory building a transition valid only from the preceding step."""

    def _factory(target: Step):
        return Transition(state=target, effect=target.value, guard=lambda current, nxt: current.next is nxt)

    return _factory


@pytest.fixture
def machine_factory(sink):
    """Returns a factory creating a traffic light machine starting at Red."""

    def _factory(level: LogLevel = LogLevel.MINIMAL, **kwargs):
        kwargs.setdefault("log_sink", sink)
        return StateMachine(Light.Red, category="traffic", log_level=level, **kwargs)

    return _factory


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining non-daemon threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive() and not thread.daemon:
            thread.join(timeout=1.0)
