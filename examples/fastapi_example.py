"""Example FastAPI application emitting statsd metrics.

Run with:
    STATSD_APPNAME=example uvicorn examples.fastapi_example:app --reload

Watch the datagrams with:
    nc -kul 8125

Instrumentation:
    StatsMiddleware times every request (``<path>.render``) and counts
    response statuses (``<path>.status.<code>``). Handlers use the
    facade directly for business metrics.
"""

import asyncio
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from udpstats import NamespaceRegistry, StatsConfig, StatsMiddleware

config = StatsConfig.from_env()
registry = NamespaceRegistry.from_config(config)
stats = registry.lookup("Stats")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Register a deploy event when the app starts."""
    stats.deploy(config.appname or None)
    yield


app = FastAPI(title="udpstats example", lifespan=lifespan)
app.add_middleware(StatsMiddleware, stats=stats, exclude_paths=["/health"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint; timed by the middleware."""
    await asyncio.sleep(0.01)
    return {"message": "Hello! Watch UDP port 8125."}


@app.post("/orders")
async def place_order() -> dict[str, bool]:
    """Record the outcome of a (simulated) payment and the basket size."""
    with stats.bulk() as batch:
        paid = batch.increment_on("orders.payment", random.random() > 0.1)
        batch.histogram("orders.items", random.randint(1, 10))
        batch.increment("orders.placed")
    return {"paid": paid}


@app.get("/report")
async def report() -> dict[str, int]:
    """Time a synchronous computation, sampled at 50%."""
    total = stats.time("report.build", lambda: sum(range(100_000)), 0.5)
    return {"total": total}


@app.get("/health")
async def health() -> dict[str, str]:
    """Excluded from metrics."""
    return {"status": "ok"}

