# tsm/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Optional

from tsm.interfaces.types import StateName


class StateMachineError(Exception):
    """
    Base exception class for errors raised by the transition engine and its
    collaborators.
    """


class InvalidTransitionError(StateMachineError):
    """
    Raised when a transition is rejected by its own validity check. The engine
    is left exactly as it was before the call.

    Both sides are carried as their string descriptions, not the state values.
    """

    def __init__(self, from_state: StateName, to_state: StateName) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state} → {to_state}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidTransitionError):
            return NotImplemented
        return (self.from_state, self.to_state) == (other.from_state, other.to_state)

    def __hash__(self) -> int:
        return hash((self.from_state, self.to_state))

    def __reduce__(self):
        return (type(self), (self.from_state, self.to_state))


class PersistenceError(StateMachineError):
    """
    Raised when saving or restoring a state through the key-value store fails.
    """

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message)

    def __reduce__(self):
        return (type(self), (self.args[0], self.key))
