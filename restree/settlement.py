"""Settle-once completion primitive and its two observation adapters."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

Outcome = Tuple[Optional[BaseException], Any]
Observer = Callable[[Optional[BaseException], Any], None]


class Settlement:
    """Holds the single outcome of a run.

    The first call to `settle` wins; later calls are ignored and return False.
    Observers run synchronously, in subscription order, at the moment of
    settlement (or immediately when subscribing to a settled instance).
    """

    def __init__(self) -> None:
        self._outcome: Optional[Outcome] = None
        self._observers: List[Observer] = []

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    def subscribe(self, observer: Observer) -> None:
        if self._outcome is not None:
            observer(*self._outcome)
        else:
            self._observers.append(observer)

    def settle(self, error: Optional[BaseException], result: Any) -> bool:
        if self._outcome is not None:
            return False
        self._outcome = (error, result)
        observers, self._observers = self._observers, []
        for observer in observers:
            observer(error, result)
        return True


def callback_adapter(on_complete: Observer) -> Observer:
    """Observe a settlement through a plain ``(error, result)`` callback.

    Exceptions raised by the callback are logged, so observers subscribed
    after it are still notified.
    """

    def observe(error: Optional[BaseException], result: Any) -> None:
        try:
            on_complete(error, result)
        except Exception:
            logger.exception("run.callback_failed", error=str(error) if error else None)

    return observe


def future_adapter(future: "asyncio.Future[Any]") -> Observer:
    """Observe a settlement through a future: resolve it or set its exception."""

    def observe(error: Optional[BaseException], result: Any) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    return observe
