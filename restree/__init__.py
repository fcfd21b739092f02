"""Asynchronous resource-tree loader.

The package is structured around a small orchestration core:
- `walker.py` turns a descriptor tree into a list of jobs and a result skeleton.
- `runner.py` loads one job (fan-out over list/dict sources) and applies its parser.
- `engine.py` runs all jobs at once and settles a single outcome.
- `loaders/` contains the built-in ``text`` and ``json`` HTTP loaders.

`run`, `load` and `register` operate on a process-wide default engine; create
your own `Engine` to keep a separate loader registry.
"""

from .engine import Engine, RunState
from .errors import (
    DecodeError,
    InvalidNodeError,
    JobError,
    LoaderNotFoundError,
    RestreeError,
    UnsupportedEnvironmentError,
)
from .models import AsyncTransform, JobNode, ProgressEvent, SyncTransform
from .registry import LoaderRegistry

default_engine = Engine()

run = default_engine.run
load = default_engine.load
register = default_engine.register

__all__ = [
    "AsyncTransform",
    "DecodeError",
    "Engine",
    "InvalidNodeError",
    "JobError",
    "JobNode",
    "LoaderNotFoundError",
    "LoaderRegistry",
    "ProgressEvent",
    "RestreeError",
    "RunState",
    "SyncTransform",
    "UnsupportedEnvironmentError",
    "default_engine",
    "load",
    "register",
    "run",
]
