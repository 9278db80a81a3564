# tsm/core/state_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Generic, List, Optional, TypeVar

from tsm.core.errors import InvalidTransitionError
from tsm.core.history import StateHistory
from tsm.core.logging_config import LoggingConfig, LogLevel, PrintSink
from tsm.core.transitions import describe_state
from tsm.interfaces.protocols import TransitionType
from tsm.interfaces.types import LogHandler
from tsm.persistence.serializer import restore_state, save_state
from tsm.persistence.store import PersistenceConfig
from tsm.visualization.renderer import VisualizationConfig, render

logger = logging.getLogger(__name__)

S = TypeVar("S")
E = TypeVar("E")


class StateMachine(Generic[S, E]):
    """
    A finite state machine holding exactly one current state. Transitions are
    supplied one at a time by the caller; each one decides for itself whether
    it may fire and which effects it produces.

    Thread Safety:
    - No internal locking. Use ThreadSafeStateMachine or AsyncStateMachine, or
      impose mutual exclusion externally, when sharing an instance.
    """

    def __init__(
        self,
        initial_state: S,
        category: str = "default",
        log_level: LogLevel = LogLevel.MINIMAL,
        log_sink: Optional[LogHandler] = None,
        persistence: Optional[PersistenceConfig] = None,
        *,
        config: Optional[LoggingConfig] = None,
    ) -> None:
        """
        :param initial_state: The state in which this machine begins.
        :param category: Label prefixed to every diagnostic.
        :param log_level: Gates diagnostics and the history capacity.
        :param log_sink: Receiver for diagnostics; a PrintSink if omitted.
        :param persistence: Enables persist_state() and load_persisted_state().
        :param config: A prepared LoggingConfig. When given, it replaces
            log_level, log_sink and persistence.
        """
        if config is None:
            config = LoggingConfig(
                level=log_level,
                sink=log_sink if log_sink is not None else PrintSink(),
                persistence=persistence,
            )
        self._current_state = initial_state
        self._category = category
        self._config = config
        self._history: Optional[StateHistory[S]] = None

        if config.level.records_history:
            self._history = StateHistory(config.history_size, initial_state)
            self._log(f"Initial state: {describe_state(initial_state)}")

    @classmethod
    def from_config(cls, initial_state: S, config: LoggingConfig, category: str = "default") -> "StateMachine[S, E]":
        """Create a machine from a prepared LoggingConfig."""
        return cls(initial_state, category, config=config)

    @property
    def current_state(self) -> S:
        """The current state."""
        return self._current_state

    @property
    def category(self) -> str:
        return self._category

    @property
    def config(self) -> LoggingConfig:
        return self._config

    @property
    def log_level(self) -> LogLevel:
        return self._config.level

    @property
    def history(self) -> Optional[List[S]]:
        """The state history, oldest first, or None when logging is disabled."""
        return self.get_state_history()

    def get_current_state(self) -> S:
        return self._current_state

    def get_state_history(self) -> Optional[List[S]]:
        """
        Return a copy of the recorded states, oldest first, starting with the
        initial state until it is evicted. None when the log level is NONE.
        """
        if self._history is None:
            return None
        return self._history.to_list()

    def process(self, transition: TransitionType[S, E]) -> List[E]:
        """
        Validate and apply a transition.

        :param transition: The candidate transition.
        :return: The effects produced by the transition, unchanged.
        :raises InvalidTransitionError: If the transition is not valid from the
            current state. Nothing is changed in that case.
        """
        level = self._config.level
        current = self._current_state
        target = transition.state
        is_valid = transition.is_valid(current)

        if level.logs_validation:
            self._log(f"Validating transition: {describe_state(current)} → {describe_state(target)}")

        if not is_valid:
            if level.logs_validation:
                self._log(f"Invalid transition: {describe_state(current)} → {describe_state(target)}")
            raise InvalidTransitionError(from_state=describe_state(current), to_state=describe_state(target))

        effects = list(transition.process(current))

        if level.logs_state_changes:
            self._log(f"{describe_state(current)} → {describe_state(target)}")

        if level.logs_effects:
            self._log(f"Effects produced: {len(effects)}")

        if self._history is not None:
            self._history.append(target)

        self._current_state = target
        return effects

    def persist_state(self) -> Optional[str]:
        """
        Save the current state to the configured store. Does nothing when no
        persistence is configured.

        :return: The key written, or None if persistence is not configured.
        :raises PersistenceError: If the state cannot be keyed, encoded or written.
        """
        persistence = self._config.persistence
        if persistence is None:
            return None
        return save_state(persistence, self._current_state)

    def load_persisted_state(self) -> bool:
        """
        Replace the current state with the one stored under the current
        state's key, bypassing validation. The history is not touched.

        :return: True if a stored state was loaded.
        :raises PersistenceError: If the stored value cannot be read or decoded.
        """
        persistence = self._config.persistence
        if persistence is None:
            return False
        restored = restore_state(persistence, self._current_state)
        if restored is None:
            return False
        logger.debug("Restored state %s for category %s", describe_state(restored), self._category)
        self._current_state = restored
        return True

    def generate_visualization(self, config: Optional[VisualizationConfig] = None) -> str:
        """
        Render the current state and history as a diagram.

        :param config: A VisualizationConfig; Mermaid with history by default.
        """
        return render(self._current_state, self.get_state_history(), config)

    def _log(self, message: str) -> None:
        self._config.sink(f"[{self._category}] {message}")

    def __repr__(self) -> str:
        return (
            f"StateMachine(category={self._category!r}, state={describe_state(self._current_state)}, "
            f"level={self._config.level.name})"
        )
