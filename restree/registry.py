"""Loader registry: maps a type name to an async loader callable."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional

import structlog

from .errors import LoaderNotFoundError
from .loaders import HttpLoader, JsonLoader
from .models import JobNode

logger = structlog.get_logger(__name__)

LoaderFn = Callable[[JobNode], Awaitable[Any]]


class LoaderRegistry:
    """Mutable name -> loader table seeded with the ``text`` and ``json`` loaders."""

    def __init__(self, http: Optional[HttpLoader] = None) -> None:
        http = http or HttpLoader()
        self._loaders: Dict[str, LoaderFn] = {
            HttpLoader.name: http,
            JsonLoader.name: JsonLoader(http),
        }

    def register(self, type_name: str, loader: LoaderFn) -> "LoaderRegistry":
        """Register ``loader`` under ``type_name``, replacing any previous entry."""
        if not callable(loader):
            raise TypeError(f"Loader for {type_name!r} is not callable")
        logger.debug("registry.register", type=type_name)
        self._loaders[type_name] = loader
        return self

    def resolve(self, type_name: str) -> LoaderFn:
        try:
            return self._loaders[type_name]
        except KeyError:
            raise LoaderNotFoundError(type_name) from None

    def names(self) -> List[str]:
        return list(self._loaders)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._loaders
