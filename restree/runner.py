"""Job runner: load one job node, apply its parser, report one outcome.

``src`` may be a single location, a list of locations or a mapping of keys to
locations. Lists and mappings fan out to one loader call per location, all
running at once; the assembled list keeps input order whatever order the
fetches finish in. The first failing fetch fails the job. Siblings still in
flight are left to finish and their results dropped.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog

from .errors import JobError
from .models import AsyncTransform, JobNode, SyncTransform
from .registry import LoaderFn, LoaderRegistry
from .walker import Job

logger = structlog.get_logger(__name__)


class JobRunner:
    """Runs single jobs against a `LoaderRegistry`."""

    def __init__(self, registry: LoaderRegistry) -> None:
        self._registry = registry

    async def execute(self, job: Job) -> Any:
        """Return the job's final value or raise `JobError`.

        The node's ``cb`` observes the same outcome, with the unwrapped error.
        """
        node = job.node
        error: Optional[BaseException] = None
        value: Any = None
        try:
            value = await self._load(node)
        except Exception as exc:
            error = exc

        _notify(node, error, value)

        if error is not None:
            logger.debug("job.failed", src=node.src, error=str(error))
            raise JobError(node.src, error) from error
        return value

    async def _load(self, node: JobNode) -> Any:
        loader = self._registry.resolve(node.type)
        value = await self._fetch(loader, node)
        return await _apply_parser(node, value)

    async def _fetch(self, loader: LoaderFn, node: JobNode) -> Any:
        src = node.src
        if isinstance(src, str):
            return await loader(node)
        if isinstance(src, dict):
            keys = list(src)
            values = await asyncio.gather(
                *(loader(node.model_copy(update={"src": src[k]})) for k in keys)
            )
            return dict(zip(keys, values))
        return list(
            await asyncio.gather(*(loader(node.model_copy(update={"src": loc})) for loc in src))
        )


async def _apply_parser(node: JobNode, value: Any) -> Any:
    parser = node.parser
    if parser is None:
        return value
    if isinstance(parser, AsyncTransform):
        return await parser.fn(value)
    if isinstance(parser, SyncTransform):
        return parser.fn(value)
    raise TypeError(f"Unsupported parser: {parser!r}")


def _notify(node: JobNode, error: Optional[BaseException], value: Any) -> None:
    if node.cb is None:
        return
    try:
        node.cb(error, None if error is not None else value)
    except Exception:
        # The job callback is an observer; it cannot change the outcome.
        logger.exception("job.callback_failed", src=node.src)
