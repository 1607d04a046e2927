"""Transport adapters implementing TransportPort."""

from udpstats.adapters.transport.base import SampledTransport
from udpstats.adapters.transport.in_memory import InMemoryTransport
from udpstats.adapters.transport.udp import UDPTransport

__all__ = [
    "InMemoryTransport",
    "SampledTransport",
    "UDPTransport",
]
