"""The public metrics API.

Example:
    ```python
    from udpstats import Stats, StatsConfig

    stats = Stats.from_config(StatsConfig(appname="shop"))
    stats.increment("orders.placed")
    stats.timing("db.query", 42)

    with stats.timer("render"):
        render_page()

    with stats.bulk() as batch:
        batch.increment("a")
        batch.gauge("b", 3)
    ```
"""

import functools
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, TypeVar

from udpstats.core.config import StatsConfig
from udpstats.core.models import (
    MetricName,
    MetricType,
    MetricValue,
    Payload,
    check_sample_rate,
)
from udpstats.core.payload import normalize_bucket, render_bulk, render_payload
from udpstats.core.ports import TransportPort

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


class Stats:
    """Metrics facade that renders observations and hands them to a transport.

    Every emitting method returns the transport's result: True when the line
    was written, False when it was sampled out or the send failed. Transport
    errors never reach the caller; an empty metric name
    (InvalidMetricName) or a sample rate outside (0, 1] (InvalidSampleRate)
    does.
    """

    def __init__(self, transport: TransportPort, prefix: str = "") -> None:
        """Initialize the facade.

        Args:
            transport: Adapter implementing TransportPort.
            prefix: Bucket prefix applied to every metric.
        """
        self.transport = transport
        self.prefix = prefix

    @classmethod
    def from_config(
        cls, config: StatsConfig, logger: logging.Logger | None = None
    ) -> "Stats":
        """Create a facade sending over UDP as described by config."""
        from udpstats.adapters.transport.udp import UDPTransport

        return cls(UDPTransport(config, logger=logger), prefix=config.data_prefix)

    def _send(
        self,
        stat: MetricName,
        value: MetricValue,
        type: MetricType,
        sample_rate: float,
    ) -> bool:
        payload = Payload(name=stat, value=value, type=type, sample_rate=sample_rate)
        return self.transport.send(render_payload(payload, self.prefix), sample_rate)

    # Counters

    def increment(self, stat: MetricName, sample_rate: float = 1) -> bool:
        """Increment a counter by one.

        `stats.increment("wat")`
        """
        return self.count(stat, 1, sample_rate)

    def decrement(self, stat: MetricName, sample_rate: float = 1) -> bool:
        """Decrement a counter by one.

        `stats.decrement("wat")`
        """
        return self.count(stat, -1, sample_rate)

    def count(self, stat: MetricName, delta: int, sample_rate: float = 1) -> bool:
        """Register a count for the given stat.

        `stats.count("wat", 500)`
        """
        return self._send(stat, delta, MetricType.COUNT, sample_rate)

    def increment_on(self, stat: MetricName, outcome: T, sample_rate: float = 1) -> T:
        """Increment ``<stat>.success`` or ``<stat>.fail`` and return outcome.

        Only False and None count as failures; empty or zero values are
        successes. Returning the outcome allows inline use:

        `if stats.increment_on("payment", gateway.charge(order)): ...`
        """
        failed = outcome is None or outcome is False
        self.increment([stat, "fail" if failed else "success"], sample_rate)
        return outcome

    # Values

    def gauge(self, stat: MetricName, value: MetricValue, sample_rate: float = 1) -> bool:
        """Register an arbitrary value."""
        return self._send(stat, value, MetricType.GAUGE, sample_rate)

    def histogram(
        self, stat: MetricName, value: MetricValue, sample_rate: float = 1
    ) -> bool:
        """Register a histogram value."""
        return self._send(stat, value, MetricType.HISTOGRAM, sample_rate)

    def timing(self, stat: MetricName, ms: int | float, sample_rate: float = 1) -> bool:
        """Register a timing in milliseconds."""
        return self._send(stat, ms, MetricType.TIMING, sample_rate)

    # Timing helpers

    def time(self, stat: MetricName, block: Callable[[], T], sample_rate: float = 1) -> T:
        """Call block once, record how long it took in ms, return its result.

        If block raises, nothing is recorded and the exception propagates.

        `stats.time("wat", lambda: do_something())`
        """
        normalize_bucket(stat)
        check_sample_rate(sample_rate)
        start = time.perf_counter()
        result = block()
        self.timing(stat, round((time.perf_counter() - start) * 1000), sample_rate)
        return result

    def time_to_do(
        self, stat: MetricName, block: Callable[[], T], sample_rate: float = 1
    ) -> T:
        return self.time(stat, block, sample_rate)

    def time_for(
        self, stat: MetricName, block: Callable[[], T], sample_rate: float = 1
    ) -> T:
        return self.time(stat, block, sample_rate)

    @contextmanager
    def timer(self, stat: MetricName, sample_rate: float = 1) -> Iterator[None]:
        """Context manager recording the time spent in its body.

        Nothing is recorded if the body raises.
        """
        normalize_bucket(stat)
        check_sample_rate(sample_rate)
        start = time.perf_counter()
        yield
        self.timing(stat, round((time.perf_counter() - start) * 1000), sample_rate)

    def timed(self, stat: MetricName, sample_rate: float = 1) -> Callable[[F], F]:
        """Decorator recording the duration of every call to the function."""

        def decorator(func: F) -> F:
            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                return self.time(stat, lambda: func(*args, **kwargs), sample_rate)

            return wrapper  # type: ignore[return-value]

        return decorator

    # Events

    def event(self, type: object, app: str | None = None) -> bool:
        """Register an event of any type, optionally scoped to an app.

        The value is the sub-second microsecond part of the current time.
        """
        return self.gauge(["event", type, app], datetime.now().microsecond)

    def commit(self) -> bool:
        return self.event("commit")

    def committed(self) -> bool:
        return self.commit()

    def build(self) -> bool:
        return self.event("build")

    def built(self) -> bool:
        return self.build()

    def deploy(self, app: str | None = None) -> bool:
        return self.event("deploy", app)

    def deployed(self, app: str | None = None) -> bool:
        return self.deploy(app)

    # Batching

    @contextmanager
    def bulk(self) -> Iterator["Bulk"]:
        """Buffer metrics and send them as one newline-joined datagram.

        The batch is flushed when the block exits normally. If the block
        raises, buffered metrics are discarded and the exception propagates.

        Example:
            ```python
            with stats.bulk() as batch:
                batch.increment("wat")
                batch.decrement("wot")
            ```
        """
        batch = Bulk(self)
        yield batch
        batch.flush()


class Bulk(Stats):
    """Stats facade that buffers payloads until flushed.

    Buffered calls return True. ``result`` holds the outcome of the flush.
    """

    def __init__(self, parent: Stats) -> None:
        super().__init__(parent.transport, prefix=parent.prefix)
        self.payloads: list[Payload] = []
        self.result = False

    @classmethod
    def from_config(
        cls, config: StatsConfig, logger: logging.Logger | None = None
    ) -> "Stats":
        raise TypeError("Bulk has no config of its own; use Stats.bulk()")

    def _send(
        self,
        stat: MetricName,
        value: MetricValue,
        type: MetricType,
        sample_rate: float,
    ) -> bool:
        normalize_bucket(stat)
        self.payloads.append(
            Payload(name=stat, value=value, type=type, sample_rate=sample_rate)
        )
        return True

    @contextmanager
    def bulk(self) -> Iterator["Bulk"]:
        """Nested batches join the enclosing one."""
        yield self

    def flush(self) -> bool:
        """Send surviving payloads as one batch and clear the buffer.

        Each payload gets its own sampling decision. Returns True only if a
        batch was written in full.
        """
        payloads, self.payloads = self.payloads, []
        kept = [p for p in payloads if self.transport.sampled(p.sample_rate)]
        if not kept:
            self.result = False
            return self.result
        self.result = self.transport.send(render_bulk(kept, self.prefix), 1)
        return self.result
