"""Base class for transport adapters."""

import random
from collections.abc import Callable


class SampledTransport:
    """Shared sampling logic for TransportPort implementations.

    Subclasses implement ``_write``; ``send`` applies the sampling decision
    first and only writes lines that survive it.
    """

    def __init__(self, rng: Callable[[], float] = random.random) -> None:
        """Initialize the transport.

        Args:
            rng: Source of uniform random numbers in [0, 1).
        """
        self._rng = rng

    def sampled(self, sample_rate: float = 1) -> bool:
        """Return True if an observation at this rate should be sent."""
        if sample_rate >= 1:
            return True
        return self._rng() <= sample_rate

    def send(self, line: str, sample_rate: float = 1) -> bool:
        """Send a line if it survives sampling."""
        if not self.sampled(sample_rate):
            return False
        return self._write(line)

    def _write(self, line: str) -> bool:
        raise NotImplementedError
