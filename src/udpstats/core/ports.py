"""Port interfaces for transport adapters.

The facade depends only on this protocol, not on concrete transports.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TransportPort(Protocol):
    """Port for delivering rendered statsd lines.

    Adapters implementing this protocol decide whether a sampled line is
    sent and report the outcome as a bool. They must never raise.
    Examples: UDPTransport, InMemoryTransport.
    """

    def sampled(self, sample_rate: float = 1) -> bool:
        """Return True if an observation at this rate should be sent.

        Draws at most one random number per call.
        """
        ...

    def send(self, line: str, sample_rate: float = 1) -> bool:
        """Send a line (or newline-joined batch), subject to sampling.

        Returns:
            True if the whole line was written, False if it was sampled
            out or the write failed.
        """
        ...
