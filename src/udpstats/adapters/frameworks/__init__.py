"""Framework adapters."""

from udpstats.adapters.frameworks.asgi import StatsMiddleware

__all__ = ["StatsMiddleware"]
