"""Core domain models for metric payloads."""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from udpstats.core.errors import InvalidSampleRate

# A single name segment, or an arbitrarily nested sequence of segments.
Segment = Union[str, int, float, Enum, None]
MetricName = Union[Segment, Sequence["MetricName"]]
MetricValue = Union[int, float, str]


def check_sample_rate(sample_rate: float) -> float:
    """Return sample_rate unchanged, or raise InvalidSampleRate outside (0, 1]."""
    if not 0 < sample_rate <= 1:
        raise InvalidSampleRate(sample_rate)
    return sample_rate


class MetricType(Enum):
    """Statsd metric types and their wire codes."""

    COUNT = "c"
    GAUGE = "g"
    TIMING = "ms"
    HISTOGRAM = "h"

    @classmethod
    def coerce(cls, value: "MetricType | str | None") -> "MetricType":
        """Resolve a type or type name, falling back to GAUGE when unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                return cls.GAUGE
        return cls.GAUGE


@dataclass(frozen=True)
class Payload:
    """A single metric observation, ready to be rendered.

    Attributes:
        name: Metric name segments (e.g., "wat" or ["event", "deploy", "app"]).
        value: The observed value.
        type: Metric type; unknown types render as gauges.
        sample_rate: Probability in (0, 1] that the observation is sent.
    """

    name: MetricName
    value: MetricValue
    type: MetricType | str | None = MetricType.GAUGE
    sample_rate: float = 1

    def __post_init__(self) -> None:
        check_sample_rate(self.sample_rate)

    @property
    def metric_type(self) -> MetricType:
        return MetricType.coerce(self.type)
