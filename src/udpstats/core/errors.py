"""Exceptions raised by udpstats."""


class UdpStatsError(Exception):
    """Base class for udpstats errors."""


class InvalidMetricName(UdpStatsError, ValueError):
    """Raised when a metric name normalizes to an empty bucket."""

    def __init__(self, name: object) -> None:
        super().__init__(f"metric name required, got {name!r}")
        self.name = name


class InvalidSampleRate(UdpStatsError, ValueError):
    """Raised when a sample rate falls outside (0, 1]."""

    def __init__(self, sample_rate: object) -> None:
        super().__init__(f"sample_rate must be in (0, 1], got {sample_rate!r}")
        self.sample_rate = sample_rate
