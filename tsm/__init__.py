"""tsm: generic finite state transition engine

Responsibilities:
    - Validating caller-supplied transitions against the current state
    - Committing valid transitions and returning their effects
    - Bounded state history tied to the log level
    - Diagnostics routed to a pluggable sink
    - Serialized access for threaded and asyncio callers

Interactions:
    - Client transitions through the TransitionType protocol
    - Key-value stores for state persistence
    - Logging system for library diagnostics
"""

from tsm.core.errors import InvalidTransitionError, PersistenceError, StateMachineError
from tsm.core.logging_config import CollectingSink, LoggerSink, LoggingConfig, LogLevel, PrintSink, history_size
from tsm.core.state_machine import StateMachine
from tsm.core.transitions import Transition, TransitionTable, describe_state
from tsm.interfaces.protocols import KeyValueStore, Persistable, StateCodec, TransitionType
from tsm.persistence.serializer import JsonStateCodec
from tsm.persistence.store import InMemoryStore, JsonFileStore, PersistenceConfig
from tsm.runtime.async_support import AsyncStateMachine
from tsm.runtime.executor import SerialExecutor, ThreadSafeStateMachine
from tsm.visualization.renderer import VisualizationConfig, VisualizationFormat, render

__version__ = "0.1.0"

__all__ = [
    # Engine
    "StateMachine",
    "AsyncStateMachine",
    "ThreadSafeStateMachine",
    "SerialExecutor",
    # Transitions
    "Transition",
    "TransitionTable",
    "TransitionType",
    "describe_state",
    # Logging policy
    "LogLevel",
    "LoggingConfig",
    "PrintSink",
    "LoggerSink",
    "CollectingSink",
    "history_size",
    # Persistence
    "Persistable",
    "KeyValueStore",
    "StateCodec",
    "PersistenceConfig",
    "InMemoryStore",
    "JsonFileStore",
    "JsonStateCodec",
    # Visualization
    "VisualizationConfig",
    "VisualizationFormat",
    "render",
    # Errors
    "StateMachineError",
    "InvalidTransitionError",
    "PersistenceError",
]
