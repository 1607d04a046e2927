"""ASGI middleware that times requests and counts response statuses.

Works with any ASGI server or framework (uvicorn, Starlette, FastAPI)
without depending on either.
"""

import asyncio
import fnmatch
import time
from collections.abc import Callable, Coroutine
from typing import Any

from udpstats.core.facade import Stats

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


def _generate_key(path: str) -> str:
    """Derive a metric key from a request path.

    "/" maps to "index"; otherwise leading and trailing slashes are
    stripped and the remaining ones become dots ("/users/42" -> "users.42").

    Args:
        path: Request path from the ASGI scope.

    Returns:
        Dot-delimited key, not yet normalized.
    """
    stripped = path.strip().strip("/")
    if not stripped:
        return "index"
    return ".".join(part for part in stripped.split("/") if part)


class StatsMiddleware:
    """ASGI middleware that records per-path request metrics.

    For every HTTP request it emits a timing on ``<key>.render`` and
    increments ``<key>.status.<code>``, where key is derived from the path.
    Metrics are sent from a worker thread so the event loop never blocks
    on the transport.
    """

    def __init__(
        self,
        app: ASGIApp,
        stats: Stats,
        exclude_paths: list[str] | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            stats: Facade used to emit metrics.
            exclude_paths: Paths to leave unrecorded. Supports exact matches
                          and wildcard patterns (e.g., "/internal/*").
        """
        self.app = app
        self.stats = stats
        self.exclude_paths = exclude_paths or []
        self.record_status = True

    def set_record_status(self, enabled: bool) -> None:
        """Set whether to count response status codes.

        Args:
            enabled: True to count statuses, False to record timings only.
        """
        self.record_status = enabled

    def _path_excluded(self, path: str) -> bool:
        """Check if path matches any pattern in exclude_paths."""
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http" or self._path_excluded(scope["path"]):
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        captured: dict[str, Any] = {"status": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        await self.app(scope, receive, wrapped_send)

        elapsed_ms = round((time.perf_counter() - start_time) * 1000)
        key = _generate_key(scope["path"])
        await asyncio.to_thread(self._record, key, elapsed_ms, captured["status"])

    def _record(self, key: str, elapsed_ms: int, status: int | None) -> None:
        """Emit request metrics; runs in a worker thread, off the event loop."""
        self.stats.timing([key, "render"], elapsed_ms)
        if self.record_status and status is not None:
            self.stats.increment([key, "status", status])
