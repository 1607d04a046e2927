"""Statsd line encoder.

Renders metric names, values, types and sample rates into the statsd text
protocol::

    bucket:value|type[@sample_rate]

Everything here is pure; no sockets, no clocks, no randomness.
"""

import re
from collections.abc import Iterable, Iterator
from decimal import Decimal
from enum import Enum

from udpstats.core.errors import InvalidMetricName
from udpstats.core.models import MetricName, MetricType, MetricValue, Payload

RESERVED_CHARS = re.compile(r"[:|@\s]")
RESERVED_CHARS_REPLACEMENT = "_"
DELIMITER = "."
BULK_DELIMITER = "\n"


def _flatten(name: MetricName) -> Iterator[object]:
    if isinstance(name, (list, tuple)):
        for segment in name:
            yield from _flatten(segment)
    else:
        yield name


def _segment_text(segment: object) -> str:
    if isinstance(segment, Enum):
        segment = segment.value
    return str(segment)


def _format_number(number: float | Decimal) -> str:
    """Format a float with minimal precision and without exponent notation."""
    text = format(Decimal(repr(float(number))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def normalize_bucket(name: MetricName, prefix: str = "") -> str:
    """Normalize metric name segments into a statsd bucket.

    Args:
        name: A segment or (nested) list of segments. None and empty
              segments are dropped.
        prefix: Optional prefix prepended with a dot.

    Returns:
        Lower-cased, dot-joined bucket with reserved characters replaced.

    Raises:
        InvalidMetricName: If no non-empty segment remains.
    """
    parts = [
        _segment_text(segment)
        for segment in _flatten(name)
        if segment is not None and segment != ""
    ]
    bucket = DELIMITER.join(parts).lower()
    if not bucket:
        raise InvalidMetricName(name)
    bucket = RESERVED_CHARS.sub(RESERVED_CHARS_REPLACEMENT, bucket)
    if prefix:
        bucket = f"{prefix}{DELIMITER}{bucket}"
    return bucket


def format_value(value: MetricValue) -> str:
    """Serialize a metric value using its natural representation."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def format_sample_rate(sample_rate: float) -> str:
    """Return the ``@rate`` suffix, or an empty string for a rate of 1."""
    if sample_rate >= 1:
        return ""
    if isinstance(sample_rate, int):
        return f"@{sample_rate}"
    return f"@{_format_number(sample_rate)}"


def render(
    name: MetricName,
    value: MetricValue,
    type: MetricType | str | None = MetricType.GAUGE,
    sample_rate: float = 1,
    prefix: str = "",
) -> str:
    """Render a single statsd protocol line.

    Args:
        name: Metric name segments.
        value: Metric value.
        type: Metric type; unrecognized types render as gauges.
        sample_rate: Rate in (0, 1]; rates below 1 add an ``@rate`` suffix.
        prefix: Optional bucket prefix.

    Returns:
        The wire line, e.g. ``"myapp.event.deploy:1234|g"``.
    """
    bucket = normalize_bucket(name, prefix)
    code = MetricType.coerce(type).value
    return f"{bucket}:{format_value(value)}|{code}{format_sample_rate(sample_rate)}"


def render_payload(payload: Payload, prefix: str = "") -> str:
    """Render a Payload into a statsd protocol line."""
    return render(
        payload.name,
        payload.value,
        payload.metric_type,
        payload.sample_rate,
        prefix=prefix,
    )


def render_bulk(payloads: Iterable[Payload], prefix: str = "") -> str:
    """Render payloads into newline-delimited lines, preserving order."""
    return BULK_DELIMITER.join(render_payload(p, prefix) for p in payloads)
