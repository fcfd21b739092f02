"""Base class for built-in loaders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import JobNode


class Loader(ABC):
    """Abstract base class for a loader.

    Any async callable taking a `JobNode` can be registered as a loader; this
    class only gives the built-ins a common shape.
    """

    name: str

    @abstractmethod
    async def __call__(self, node: JobNode) -> Any:
        """Fetch and decode the single location in ``node.src``."""
        raise NotImplementedError
