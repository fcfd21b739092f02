"""HTTP text loader.

Performs a GET against the job's location and returns the body as text.
Stored credentials (bearer token and cookies from the settings) are attached
only when the job asks for them with ``credentials=True``.

Timeouts and redirects are the HTTP client's business; the engine itself never
times a job out.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import Settings, get_settings
from ..models import JobNode
from .base import Loader

logger = structlog.get_logger(__name__)


class HttpLoader(Loader):
    """Fetch a location over HTTP and return the response body."""

    name = "text"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def _credentials(self) -> Dict[str, Any]:
        """Client keyword arguments carrying the stored credentials."""
        settings = self.settings
        kwargs: Dict[str, Any] = {}
        if settings.auth_token is not None:
            kwargs["headers"] = {"Authorization": f"Bearer {settings.auth_token.get_secret_value()}"}
        if settings.cookies:
            kwargs["cookies"] = dict(settings.cookies)
        return kwargs

    async def fetch(self, node: JobNode) -> httpx.Response:
        """GET ``node.src`` and return the response, raising on non-2xx status."""
        settings = self.settings
        client_kwargs: Dict[str, Any] = {
            "base_url": settings.base_url,
            "timeout": settings.timeout_s,
            "follow_redirects": settings.follow_redirects,
        }
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        if node.credentials:
            client_kwargs.update(self._credentials())

        async with httpx.AsyncClient(**client_kwargs) as client:
            logger.debug("http.get", src=node.src, credentials=node.credentials)
            resp = await client.get(node.src)
            resp.raise_for_status()
            return resp

    async def __call__(self, node: JobNode) -> str:
        resp = await self.fetch(node)
        return resp.text
