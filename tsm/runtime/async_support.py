# tsm/runtime/async_support.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Generic, List, NamedTuple, Optional, TypeVar

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


class _Request(NamedTuple):
    func: Callable[..., Any]
    args: tuple
    future: "asyncio.Future[Any]"


_STOP = object()


class AsyncStateMachine(Generic[S, E]):
    """
    Asynchronous, serialized front for a StateMachine.

    A single worker task consumes a FIFO queue of requests, so at most one
    operation touches the machine at a time and operations complete in the
    order they were submitted. Each caller awaits only its own request.

    A caller that stops waiting (for example through asyncio.wait_for) does not
    withdraw its request; the operation still runs. Rejected transitions are
    raised to the caller that submitted them and nobody else.

    The worker is bound to the event loop of the first call. It runs until
    aclose() is awaited, so either call aclose() or use the instance as an
    ``async with`` block; otherwise the loop reports the worker task as
    destroyed while pending when it shuts down.
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
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._closed = False

    @classmethod
    def from_config(cls, initial_state: S, config: LoggingConfig, category: str = "default") -> "AsyncStateMachine[S, E]":
        return cls(initial_state, category, config=config)

    @property
    def category(self) -> str:
        return self._machine.category

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of requests waiting behind the one being executed."""
        return self._queue.qsize() if self._queue is not None else 0

    async def process(self, transition: TransitionType[S, E]) -> List[E]:
        """
        Process a transition on the worker.

        :return: The effects produced by the transition.
        :raises InvalidTransitionError: If the transition is rejected.
        """
        return await self._submit(self._machine.process, transition)

    async def get_current_state(self) -> S:
        return await self._submit(self._machine.get_current_state)

    async def get_state_history(self) -> Optional[List[S]]:
        return await self._submit(self._machine.get_state_history)

    async def persist_state(self) -> Optional[str]:
        return await self._submit(self._machine.persist_state)

    async def load_persisted_state(self) -> bool:
        return await self._submit(self._machine.load_persisted_state)

    async def _submit(self, func: Callable[..., T], *args: Any) -> T:
        if self._closed:
            raise RuntimeError("AsyncStateMachine is closed")
        self._ensure_worker()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(_Request(func, args, future))
        return await future

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._queue = asyncio.Queue()
            self._worker = asyncio.get_running_loop().create_task(self._run())
            logger.debug("Started worker for state machine %s", self.category)

    async def _run(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                if request is _STOP:
                    break
                try:
                    result = request.func(*request.args)
                except BaseException as exc:
                    # Relayed to the submitter only; the worker keeps serving the queue.
                    if not isinstance(exc, StateMachineError):
                        logger.exception("State machine %s request %r failed", self.category, request.func)
                    if not request.future.done():
                        request.future.set_exception(exc)
                else:
                    if not request.future.done():
                        request.future.set_result(result)
            finally:
                self._queue.task_done()
        logger.debug("Worker for state machine %s stopped", self.category)

    async def aclose(self) -> None:
        """
        Stop accepting requests and wait until everything already queued has
        run.
        """
        if self._closed:
            return
        self._closed = True
        if self._worker is not None and not self._worker.done():
            self._queue.put_nowait(_STOP)
            await self._worker

    async def __aenter__(self) -> "AsyncStateMachine[S, E]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
