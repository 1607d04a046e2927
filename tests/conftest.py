"""Shared test fixtures for all test modules."""

from typing import Any

import pytest

from udpstats.adapters.transport.in_memory import InMemoryTransport
from udpstats.core.facade import Stats

try:
    import httpx
except ImportError:
    httpx = None


class FakeSocket:
    """Stand-in for a UDP socket that records datagrams.

    Args:
        short_by: Number of bytes to under-report on each sendto.
        error: Exception raised by sendto instead of sending.
    """

    def __init__(self, short_by: int = 0, error: Exception | None = None) -> None:
        self.short_by = short_by
        self.error = error
        self.sent: list[tuple[bytes, Any]] = []
        self.timeout: float | None = None
        self.closed = False

    def settimeout(self, timeout: float) -> None:
        self.timeout = timeout

    def sendto(self, data: bytes, address: Any) -> int:
        if self.error is not None:
            raise self.error
        self.sent.append((data, address))
        return len(data) - self.short_by

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_socket_factory():
    """Factory fixture returning (socket_factory, created_sockets).

    Pass keyword arguments to configure the FakeSocket instances it creates.
    """

    def _factory(**socket_kwargs: Any):
        created: list[FakeSocket] = []

        def socket_factory(family: int, type: int) -> FakeSocket:
            sock = FakeSocket(**socket_kwargs)
            created.append(sock)
            return sock

        return socket_factory, created

    return _factory


@pytest.fixture
def transport() -> InMemoryTransport:
    """In-memory transport whose sampler always draws 0.0."""
    return InMemoryTransport(rng=lambda: 0.0)


@pytest.fixture
def stats(transport: InMemoryTransport) -> Stats:
    """Facade without a prefix, backed by the in-memory transport."""
    return Stats(transport)


# === ASGI Test Fixtures ===


@pytest.fixture
def basic_asgi_app():
    """Basic ASGI app fixture that returns 200 OK."""
    from udpstats.adapters.frameworks.asgi import Receive, Scope, Send

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Simple ASGI app that returns 200 OK."""
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts."""
    from udpstats.adapters.frameworks.asgi import Scope

    def _scope(method: str = "GET", path: str = "/test", type: str = "http") -> Scope:
        return {
            "type": type,
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture."""

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_receive():
    """Async receive stub."""

    async def receive() -> dict[str, object]:
        return {"type": "http.request", "body": b""}

    return receive


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client
