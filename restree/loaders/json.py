"""JSON loader: fetch over HTTP, then decode the body."""

from __future__ import annotations

import json
from typing import Any, Optional

from ..errors import DecodeError
from ..models import JobNode
from .base import Loader
from .http import HttpLoader


class JsonLoader(Loader):
    """Fetch a location through an `HttpLoader` and parse the body as JSON."""

    name = "json"

    def __init__(self, http: Optional[HttpLoader] = None) -> None:
        self._http = http or HttpLoader()

    async def __call__(self, node: JobNode) -> Any:
        body = await self._http(node)
        try:
            return json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON from {node.src}: {exc}") from exc
