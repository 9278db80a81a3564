# tsm/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Generic, Iterable, List, Mapping, Optional, TypeVar

S = TypeVar("S")
E = TypeVar("E")


def describe_state(state: Any) -> str:
    """
    Return the human-readable description of a state used in diagnostics and
    errors. Enum members are described by their member name.
    """
    if isinstance(state, Enum):
        return state.name
    return str(state)


@dataclass(frozen=True)
class Transition(Generic[S, E]):
    """
    A concrete transition for table-driven machines.

    The transition is valid from any state in `allowed_from`, or, when a
    `guard` is given, whenever ``guard(current_state, state)`` is true. With
    neither, the transition is unconditional. By default processing yields
    ``[effect]``; pass `effects` to compute the list from
    ``(current_state, state, effect)`` instead.
    """

    state: S
    effect: E
    allowed_from: Optional[FrozenSet[S]] = None
    guard: Optional[Callable[[S, S], bool]] = field(default=None, compare=False)
    effects: Optional[Callable[[S, S, E], Iterable[E]]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.allowed_from is not None and not isinstance(self.allowed_from, frozenset):
            object.__setattr__(self, "allowed_from", frozenset(self.allowed_from))

    @classmethod
    def from_table(cls, table: Mapping[S, Iterable[S]], state: S, effect: E, **kwargs: Any) -> "Transition[S, E]":
        """
        Build a transition to `state` that is valid from every source whose
        row in `table` lists `state` as a target.

        :param table: Mapping of source state to the targets reachable from it.
        :param state: The target state.
        :param effect: The effect payload.
        """
        sources = frozenset(src for src, targets in table.items() if state in set(targets))
        return cls(state=state, effect=effect, allowed_from=sources, **kwargs)

    def is_valid(self, current_state: S) -> bool:
        if self.guard is not None:
            return bool(self.guard(current_state, self.state))
        if self.allowed_from is None:
            return True
        return current_state in self.allowed_from

    def process(self, current_state: S) -> List[E]:
        if self.effects is not None:
            return list(self.effects(current_state, self.state, self.effect))
        return [self.effect]


class TransitionTable(Generic[S]):
    """
    Read-only view over a ``{source: {targets}}`` table, used to build
    transitions and to answer reachability questions.
    """

    def __init__(self, rows: Mapping[S, Iterable[S]]) -> None:
        self._rows: Dict[S, FrozenSet[S]] = {src: frozenset(targets) for src, targets in rows.items()}

    def allows(self, source: S, target: S) -> bool:
        return target in self._rows.get(source, frozenset())

    def targets(self, source: S) -> FrozenSet[S]:
        return self._rows.get(source, frozenset())

    def transition(self, state: S, effect: Any, **kwargs: Any) -> Transition:
        """Return a Transition to `state` that is valid wherever the table allows it."""
        return Transition.from_table(self._rows, state, effect, **kwargs)

    def __contains__(self, state: object) -> bool:
        return state in self._rows
