"""Pytest configuration and fixtures."""

import asyncio

import httpx
import pytest

from restree import Engine
from restree.config import Settings

BASE_URL = "http://testserver"


class FakeServer:
    """Serves canned bodies, delays and transport errors by path."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="missing")
        if route.get("delay"):
            await asyncio.sleep(route["delay"])
        if route.get("exc") is not None:
            raise route["exc"]
        return httpx.Response(route.get("status", 200), text=route.get("body", ""))

    def headers_for(self, path):
        return [r.headers for r in self.requests if r.url.path == path]


@pytest.fixture
def settings():
    return Settings(base_url=BASE_URL, auth_token="s3cret", cookies={"sid": "abc"})


@pytest.fixture
def make_engine(settings):
    """Build an engine whose HTTP loaders talk to a `FakeServer`."""

    def factory(routes):
        server = FakeServer(routes)
        engine = Engine(settings=settings, transport=httpx.MockTransport(server))
        return engine, server

    return factory


@pytest.fixture
def collect():
    """Run a tree through the callback API and gather every observation.

    Waits a little after completion so late job outcomes would show up as
    extra completion calls.
    """

    async def runner(engine, tree, settle_delay=0.05):
        done = asyncio.get_running_loop().create_future()
        calls = []
        events = []

        def on_complete(error, result):
            calls.append((error, result))
            if not done.done():
                done.set_result(None)

        engine.run(tree, on_complete, lambda event: events.append(event.as_dict()))
        await asyncio.wait_for(done, timeout=5)
        await asyncio.sleep(settle_delay)
        return calls, events

    return runner


@pytest.fixture
def fake_server():
    return FakeServer
