# tsm/runtime/executor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable, Generic, List, Optional, TypeVar

from tsm.core.errors import StateMachineError
from tsm.core.logging_config import LoggingConfig, LogLevel
from tsm.core.state_machine import StateMachine
from tsm.interfaces.protocols import TransitionType
from tsm.interfaces.types import LogHandler
from tsm.persistence.store import PersistenceConfig

logger = logging.getLogger(__name__)

S = TypeVar("S")
E = TypeVar("E")
T = TypeVar("T")

_STOP = object()


class SerialExecutor:
    """
    Runs submitted callables one at a time, in submission order, on a single
    worker thread. Results and exceptions are delivered through
    concurrent.futures.Future objects.

    Submitted work cannot be cancelled: a caller may stop waiting on its
    future, but the callable still runs.
    """

    def __init__(self, name: str = "tsm-serial") -> None:
        """
        :param name: Name given to the worker thread.
        """
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._running = True
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()
        logger.debug("Started serial executor %s", name)

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def in_worker(self) -> bool:
        """True when called from the worker thread itself."""
        return threading.current_thread() is self._thread

    def submit(self, func: Callable[..., T], *args: Any) -> "Future[T]":
        """
        Queue `func(*args)` behind everything already submitted.

        :raises RuntimeError: If the executor has been shut down.
        """
        future: "Future[T]" = Future()
        # Mark running immediately so the future can no longer be cancelled.
        future.set_running_or_notify_cancel()
        with self._lock:
            if not self._running:
                raise RuntimeError("Cannot submit to a serial executor after shutdown")
            self._queue.put((func, args, future))
        return future

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    break
                func, args, future = item
                try:
                    result = func(*args)
                except BaseException as exc:
                    # Relayed to the submitter only; the worker keeps serving the queue.
                    if not isinstance(exc, StateMachineError):
                        logger.exception("Serial executor task %r failed", func)
                    future.set_exception(exc)
                else:
                    future.set_result(result)
            finally:
                self._queue.task_done()
        logger.debug("Serial executor %s stopped", self._thread.name)

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting work. Everything already queued still runs before the
        worker exits.

        :param wait: Block until the worker thread has finished.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._queue.put(_STOP)
        if wait and not self.in_worker():
            self._thread.join()


class ThreadSafeStateMachine(Generic[S, E]):
    """
    Shares one StateMachine between threads. Every operation is funnelled
    through a SerialExecutor, so operations never interleave and complete in
    the order they were submitted.

    The blocking methods wait for their own operation; the ``submit_*``
    variants return a future instead. Do not call the blocking methods from a
    log sink, which runs on the worker thread.
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
        self._machine: StateMachine[S, E] = StateMachine(
            initial_state,
            category=category,
            log_level=log_level,
            log_sink=log_sink,
            persistence=persistence,
            config=config,
        )
        self._executor = SerialExecutor(name=f"tsm.{category}")

    @classmethod
    def from_config(
        cls, initial_state: S, config: LoggingConfig, category: str = "default"
    ) -> "ThreadSafeStateMachine[S, E]":
        return cls(initial_state, category, config=config)

    @property
    def category(self) -> str:
        return self._machine.category

    def submit_process(self, transition: TransitionType[S, E]) -> "Future[List[E]]":
        return self._executor.submit(self._machine.process, transition)

    def submit_get_current_state(self) -> "Future[S]":
        return self._executor.submit(self._machine.get_current_state)

    def submit_get_state_history(self) -> "Future[Optional[List[S]]]":
        return self._executor.submit(self._machine.get_state_history)

    def process(self, transition: TransitionType[S, E]) -> List[E]:
        """
        Process a transition on the worker and wait for the effects.

        :raises InvalidTransitionError: If the transition is rejected.
        """
        return self._call(self._machine.process, transition)

    def get_current_state(self) -> S:
        return self._call(self._machine.get_current_state)

    def get_state_history(self) -> Optional[List[S]]:
        return self._call(self._machine.get_state_history)

    def persist_state(self) -> Optional[str]:
        return self._call(self._machine.persist_state)

    def load_persisted_state(self) -> bool:
        return self._call(self._machine.load_persisted_state)

    def _call(self, func: Callable[..., T], *args: Any) -> T:
        if self._executor.in_worker():
            raise RuntimeError("Blocking call made from the state machine worker thread")
        return self._executor.submit(func, *args).result()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ThreadSafeStateMachine[S, E]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
