"""Orchestrator.

`Engine.run` walks a descriptor tree, starts every job at once as an asyncio
task and collects the outcomes into a result tree shaped like the input.

A run moves ``IDLE -> RUNNING -> SUCCEEDED | FAILED`` and settles exactly once:
on the first job error, or once every job has succeeded. Outcomes arriving
after settlement are dropped; jobs still in flight are not cancelled.

Progress is reported synchronously to ``on_progress``: one ``started``, one
``loaded`` per successful job in completion order, and ``done`` on success.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Any, Callable, Optional, Set

import structlog

from .config import Settings
from .errors import InvalidNodeError, JobError, UnsupportedEnvironmentError
from .loaders import HttpLoader
from .models import EventType, ProgressEvent
from .registry import LoaderFn, LoaderRegistry
from .runner import JobRunner
from .settlement import Observer, Settlement, callback_adapter, future_adapter
from .utils import percent
from .walker import Job, Plan, walk

logger = structlog.get_logger(__name__)

ProgressFn = Callable[[ProgressEvent], None]
FutureFactory = Callable[[], Any]


class RunState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def loop_future() -> "asyncio.Future[Any]":
    """Default future factory: a future bound to the running event loop."""
    return asyncio.get_running_loop().create_future()


class Engine:
    """Loads descriptor trees using its own loader registry.

    ``future_factory`` builds the object returned by `run` when no completion
    callback is given. Set it to another factory to use a different future
    type, or to None to forbid future-based completion altogether.
    """

    def __init__(
        self,
        registry: Optional[LoaderRegistry] = None,
        settings: Optional[Settings] = None,
        transport: Any = None,
        future_factory: Optional[FutureFactory] = loop_future,
    ) -> None:
        self.registry = registry or LoaderRegistry(HttpLoader(settings, transport))
        self.future_factory = future_factory
        self._runner = JobRunner(self.registry)
        self._tasks: Set["asyncio.Task[None]"] = set()

    def register(self, type_name: str, loader: LoaderFn) -> "Engine":
        """Register a loader for ``type_name``; returns the engine for chaining."""
        self.registry.register(type_name, loader)
        return self

    def run(
        self,
        tree: Any,
        on_complete: Optional[Observer] = None,
        on_progress: Optional[ProgressFn] = None,
    ) -> Any:
        """Start loading ``tree``.

        With ``on_complete`` the callback receives ``(error, result)`` exactly
        once and None is returned. Without it a future from ``future_factory``
        is returned instead.

        Must be called from a running event loop when the tree has jobs.

        Raises:
            UnsupportedEnvironmentError: no callback and no future factory.
        """
        settlement = Settlement()
        future = None
        if on_complete is not None:
            settlement.subscribe(callback_adapter(on_complete))
        elif self.future_factory is None:
            raise UnsupportedEnvironmentError()
        else:
            future = self.future_factory()
            settlement.subscribe(future_adapter(future))

        _Run(self, settlement, on_progress).start(tree)
        return future

    async def load(self, tree: Any, on_progress: Optional[ProgressFn] = None) -> Any:
        """Await the result tree of ``tree``; raises the run's error on failure."""
        future = asyncio.get_running_loop().create_future()
        self.run(tree, future_adapter(future), on_progress)
        return await future

    def _spawn(self, coro: Any) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


class _Run:
    """State of one `Engine.run` invocation."""

    def __init__(self, engine: Engine, settlement: Settlement, on_progress: Optional[ProgressFn]) -> None:
        self._engine = engine
        self._settlement = settlement
        self._on_progress = on_progress
        self.state = RunState.IDLE
        self.plan = Plan()
        self.processed = 0

    def start(self, tree: Any) -> None:
        try:
            self.plan = walk(tree)
        except InvalidNodeError as exc:
            logger.warning("run.invalid_tree", error=str(exc))
            self._finish(RunState.FAILED, exc, {})
            return

        total = self.plan.total
        if total:
            # Fail fast outside an event loop, before any event is emitted.
            asyncio.get_running_loop()

        self.state = RunState.RUNNING
        logger.debug("run.started", total=total)
        self._emit("started")

        if total == 0:
            self._emit("done")
            self._finish(RunState.SUCCEEDED, None, self.plan.shape)
            return

        for job in self.plan.jobs:
            self._engine._spawn(self._drive(job))

    async def _drive(self, job: Job) -> None:
        try:
            value = await self._engine._runner.execute(job)
        except JobError as exc:
            self._failed(job, exc)
        else:
            self._loaded(job, value)

    def _loaded(self, job: Job, value: Any) -> None:
        if self.state is not RunState.RUNNING:
            logger.debug("job.discarded", src=job.src, state=self.state.value)
            return
        self.plan.assign(job.path, value)
        self.processed += 1
        logger.debug("job.loaded", src=job.src, processed=self.processed, total=self.plan.total)
        self._emit("loaded", src=job.src)
        if self.processed == self.plan.total:
            self._emit("done")
            self._finish(RunState.SUCCEEDED, None, self.plan.shape)

    def _failed(self, job: Job, error: JobError) -> None:
        if self.state is not RunState.RUNNING:
            logger.debug("job.discarded", src=job.src, state=self.state.value, error=str(error))
            return
        logger.warning("job.failed", src=job.src, error=str(error))
        self._finish(RunState.FAILED, error, {})

    def _emit(self, event_type: EventType, src: Any = None) -> None:
        if self._on_progress is None:
            return
        total = self.plan.total
        event = ProgressEvent(
            type=event_type,
            processed=self.processed,
            remaining=total - self.processed,
            total=total,
            percent=percent(self.processed, total),
            src=src,
        )
        try:
            self._on_progress(event)
        except Exception:
            # Progress observers cannot stop the run from settling.
            logger.exception("run.progress_failed", event_type=event_type, src=src)

    def _finish(self, state: RunState, error: Optional[BaseException], result: Any) -> None:
        self.state = state
        if state is RunState.SUCCEEDED:
            logger.info("run.done", total=self.plan.total)
        else:
            logger.info("run.failed", error=str(error))
        self._settlement.settle(error, result)
