"""Data models for the loader engine.

The engine reads job descriptors as plain mappings (what callers write) and
validates each of them into a `JobNode`. Parsers are explicit tagged wrappers:
`SyncTransform` for a plain function, `AsyncTransform` for a coroutine
function, so the runner never has to guess how to call them.

This file uses Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SyncTransform:
    """Parser applied inline: ``fn(value) -> result``."""

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self.fn = fn

    def __repr__(self) -> str:
        return f"SyncTransform({self.fn!r})"


class AsyncTransform:
    """Parser awaited by the runner: ``await fn(value) -> result``.

    Callback-style code can be bridged by resolving an `asyncio.Future` from
    the callback and returning ``await future``.
    """

    __slots__ = ("fn",)

    def __init__(self, fn: Callable[[Any], Awaitable[Any]]) -> None:
        self.fn = fn

    def __repr__(self) -> str:
        return f"AsyncTransform({self.fn!r})"


Transform = Union[SyncTransform, AsyncTransform]
Source = Union[str, List[str], Dict[str, str]]


class JobNode(BaseModel):
    """A leaf descriptor: where to fetch, how to decode, what to do after.

    Unknown keys are kept so custom loaders can read their own options.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="allow")

    src: Source
    type: str = "text"
    parser: Optional[Transform] = None
    cb: Optional[Callable[..., Any]] = Field(
        default=None,
        description="Observer called with (error, value) once the job finishes.",
    )
    credentials: bool = False

    @field_validator("parser", mode="before")
    @classmethod
    def _coerce_parser(cls, value: Any) -> Any:
        # Bare callables are synchronous; async parsers must be tagged.
        if value is None or isinstance(value, (SyncTransform, AsyncTransform)):
            return value
        if callable(value):
            return SyncTransform(value)
        return value


EventType = Literal["started", "loaded", "done"]


class ProgressEvent(BaseModel):
    """One progress notification emitted by a run."""

    type: EventType
    processed: int
    remaining: int
    total: int
    percent: float
    src: Optional[Any] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
