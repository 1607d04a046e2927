"""In-memory transport adapter."""

import random
from collections.abc import Callable

from udpstats.adapters.transport.base import SampledTransport
from udpstats.core.payload import BULK_DELIMITER


class InMemoryTransport(SampledTransport):
    """In-memory implementation of TransportPort.

    Records every line that survives sampling. Suitable for testing and
    for running without a collector.
    """

    def __init__(self, rng: Callable[[], float] = random.random) -> None:
        super().__init__(rng)
        self.lines: list[str] = []

    def _write(self, line: str) -> bool:
        self.lines.append(line)
        return True

    def metrics(self) -> list[str]:
        """Return every recorded metric line, with batches split apart."""
        return [m for line in self.lines for m in line.split(BULK_DELIMITER)]

    def clear(self) -> None:
        """Forget all recorded lines."""
        self.lines.clear()
