# tsm/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, List, Optional, Protocol, TypeVar, runtime_checkable

S = TypeVar("S")
E_co = TypeVar("E_co", covariant=True)


@runtime_checkable
class TransitionType(Protocol[S, E_co]):
    """
    Transition protocol for type checking.

    Members:
        state: The target state of the transition.
        effect: The effect payload carried by the transition.
        is_valid(current_state): Whether the transition may fire from current_state.
        process(current_state): The effects to hand back to the caller.

    Runtime Invariants:
    - `state` and `effect` are plain accessors with no side effects.
    - `is_valid` is deterministic for the same (current_state, state) pair.
    - `process` is only called by the engine after `is_valid` returned True
      for the same pair. The transition itself never enforces that ordering.

    Error Handling:
    - A rejected transition is reported by returning False from `is_valid`,
      never by raising. The engine turns that into an InvalidTransitionError.
    """

    @property
    def state(self) -> S:
        """The state the machine moves to when this transition fires."""
        ...

    @property
    def effect(self) -> E_co:
        """The effect payload associated with this transition."""
        ...

    def is_valid(self, current_state: S) -> bool:
        """Return True if this transition is allowed from current_state."""
        ...

    def process(self, current_state: S) -> List[E_co]:
        """Compute the effects produced by moving from current_state to `state`."""
        ...


@runtime_checkable
class Persistable(Protocol):
    """
    A state that can be stored in a key-value store. The persistence key is
    appended to the configured prefix to build the storage key.
    """

    @property
    def persistence_key(self) -> str: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """
    A byte-oriented key-value store used by the persistence collaborator.

    `get` returns None when no value is stored under the key; that is not an
    error. I/O failures may raise any exception; callers wrap them.
    """

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...


@runtime_checkable
class StateCodec(Protocol):
    """Converts states to and from bytes for storage."""

    def encode(self, state: Any) -> bytes: ...

    def decode(self, data: bytes) -> Any: ...

