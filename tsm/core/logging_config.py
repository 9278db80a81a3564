# tsm/core/logging_config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, TextIO

from tsm.interfaces.types import LogHandler

if TYPE_CHECKING:
    from tsm.persistence.store import PersistenceConfig


class LogLevel(Enum):
    """
    Verbosity of an engine instance. Gates both the diagnostics sent to the
    sink and whether a state history is kept at all.
    """

    NONE = 0
    MINIMAL = 1
    STANDARD = 2
    VERBOSE = 3

    @property
    def records_history(self) -> bool:
        return self is not LogLevel.NONE

    @property
    def logs_validation(self) -> bool:
        return self in (LogLevel.STANDARD, LogLevel.VERBOSE)

    @property
    def logs_state_changes(self) -> bool:
        return self is not LogLevel.NONE

    @property
    def logs_effects(self) -> bool:
        return self is LogLevel.VERBOSE


_HISTORY_SIZES = {
    LogLevel.NONE: 0,
    LogLevel.MINIMAL: 10,
    LogLevel.STANDARD: 100,
    LogLevel.VERBOSE: 100,
}


def history_size(level: LogLevel) -> int:
    """Return the history capacity for a log level; 0 means no history."""
    return _HISTORY_SIZES[level]


class PrintSink:
    """
    Writes each diagnostic to a text stream behind a fixed prefix. This is the
    sink an engine gets when none is configured.
    """

    def __init__(self, prefix: str = "[StateMachine]", stream: Optional[TextIO] = None) -> None:
        self.prefix = prefix
        self._stream = stream

    def __call__(self, message: str) -> None:
        print(f"{self.prefix} {message}", file=self._stream or sys.stdout)


class LoggerSink:
    """
    Routes diagnostics into the standard logging system.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger("tsm")
        self.level = level

    def __call__(self, message: str) -> None:
        self.logger.log(self.level, message)


class CollectingSink:
    """Keeps every diagnostic it receives, in order."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for an engine instance.

    :param level: Verbosity; see LogLevel.
    :param sink: Receiver for formatted diagnostics. Defaults to a new PrintSink.
    :param persistence: Optional persistence settings enabling
        persist_state() / load_persisted_state().
    """

    level: LogLevel = LogLevel.MINIMAL
    sink: LogHandler = field(default_factory=PrintSink)
    persistence: Optional["PersistenceConfig"] = None

    @property
    def history_size(self) -> int:
        return history_size(self.level)
