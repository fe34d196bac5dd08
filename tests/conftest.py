import asyncio
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

# Ensure the project root is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from assistant.models import Coordinate  # noqa: E402


def feature(**props: Any) -> dict[str, Any]:
    """One Geoapify GeoJSON feature with the given properties."""
    return {"type": "Feature", "properties": props}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def origin() -> Coordinate:
    return Coordinate(lat=43.6532, lon=-79.3832)


@pytest.fixture
def make_client():
    """Build AsyncClients backed by a recording mock transport; closed on teardown."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return client, transport

    yield _make

    async def _close_all() -> None:
        for client in clients:
            await client.aclose()

    # private loop so the test loop managed by pytest-asyncio is left alone
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(_close_all())
    finally:
        loop.close()
