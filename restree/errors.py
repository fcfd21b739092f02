"""Error types raised by the loader engine.

Per-job failures (unknown type, transport, decode, parser) are reported to the
run as a single `JobError` that keeps the original exception around. Structural
errors and environment errors concern the whole run.
"""

from __future__ import annotations

from typing import Any


class RestreeError(Exception):
    """Base class for every error raised by restree itself."""


class InvalidNodeError(RestreeError):
    """A tree position holds something that is neither a container nor a job."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid node: {path}")
        self.path = path


class LoaderNotFoundError(RestreeError):
    """No loader is registered under the requested type name."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Invalid type: {type_name}")
        self.type_name = type_name


class DecodeError(RestreeError):
    """A fetched payload could not be decoded."""


class UnsupportedEnvironmentError(RestreeError):
    """Raised when no completion callback is given and futures are disabled."""

    def __init__(self) -> None:
        super().__init__("Promises are not supported in this environment")


class JobError(RestreeError):
    """Wraps the original failure of one job together with its source."""

    def __init__(self, src: Any, original: BaseException) -> None:
        super().__init__(f"Job error {format_src(src)}. {original}")
        self.src = src
        self.original = original
        self.__cause__ = original


def format_src(src: Any) -> str:
    """Render a job source for messages: lists comma-joined, dicts as key=value."""
    if isinstance(src, dict):
        return ",".join(f"{k}={v}" for k, v in src.items())
    if isinstance(src, (list, tuple)):
        return ",".join(str(s) for s in src)
    return str(src)
