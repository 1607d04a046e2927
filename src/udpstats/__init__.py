"""udpstats - a statsd client sending metrics over UDP."""

from udpstats.adapters.frameworks.asgi import StatsMiddleware
from udpstats.adapters.transport import InMemoryTransport, UDPTransport
from udpstats.core.config import StatsConfig
from udpstats.core.errors import InvalidMetricName, InvalidSampleRate, UdpStatsError
from udpstats.core.facade import Bulk, Stats
from udpstats.core.models import MetricType, Payload
from udpstats.core.payload import normalize_bucket, render, render_bulk
from udpstats.core.ports import TransportPort
from udpstats.core.registry import NamespaceRegistry

__all__ = [
    "Bulk",
    "InMemoryTransport",
    "InvalidMetricName",
    "InvalidSampleRate",
    "MetricType",
    "NamespaceRegistry",
    "Payload",
    "Stats",
    "StatsConfig",
    "StatsMiddleware",
    "TransportPort",
    "UDPTransport",
    "UdpStatsError",
    "normalize_bucket",
    "render",
    "render_bulk",
]
