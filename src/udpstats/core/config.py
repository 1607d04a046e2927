"""Client configuration.

StatsConfig is a plain frozen dataclass; build it directly, from environment
variables with ``StatsConfig.from_env()``, or derive a copy with
``with_overrides()``.
"""

import dataclasses
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8125
DEFAULT_TIMEOUT = 0.5
DEFAULT_NAMESPACES = ("Stats", "S", "Statistics", "Warehouse")

_SAFE_SEPARATOR = "-"


@dataclass(frozen=True)
class StatsConfig:
    """Settings for the statsd client.

    Attributes:
        host: Collector host name or address.
        port: Collector UDP port.
        timeout: Send timeout in seconds.
        appname: Application name, first part of the derived prefix.
        env: Deployment environment, last part of the derived prefix.
        origin_name: Host the metrics originate from.
        prefix: Explicit bucket prefix. None derives one from
                appname, origin_name and env; "" disables prefixing.
        namespaces: Names under which the client is registered.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    appname: str = ""
    env: str = "development"
    origin_name: str = field(default_factory=lambda: socket.gethostname())
    prefix: str | None = None
    namespaces: tuple[str, ...] = DEFAULT_NAMESPACES

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def data_prefix(self) -> str:
        """Bucket prefix applied to every metric."""
        if self.prefix is not None:
            return self.prefix
        parts = [self.appname, self.origin_name, self.env]
        return ".".join(p.replace(".", _SAFE_SEPARATOR) for p in parts if p)

    def with_overrides(self, **changes: object) -> "StatsConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StatsConfig":
        """Build a config from STATSD_* environment variables.

        Args:
            environ: Mapping to read from (default: os.environ).

        Raises:
            ValueError: If STATSD_PORT or STATSD_TIMEOUT is not numeric.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        if "STATSD_HOST" in env:
            kwargs["host"] = env["STATSD_HOST"]
        if "STATSD_PORT" in env:
            kwargs["port"] = _parse_number(env, "STATSD_PORT", int)
        if "STATSD_TIMEOUT" in env:
            kwargs["timeout"] = _parse_number(env, "STATSD_TIMEOUT", float)
        if "STATSD_APPNAME" in env:
            kwargs["appname"] = env["STATSD_APPNAME"]
        if "STATSD_ENV" in env:
            kwargs["env"] = env["STATSD_ENV"]
        elif "APP_ENV" in env:
            kwargs["env"] = env["APP_ENV"]
        if "STATSD_ORIGIN" in env:
            kwargs["origin_name"] = env["STATSD_ORIGIN"]
        if "STATSD_PREFIX" in env:
            kwargs["prefix"] = env["STATSD_PREFIX"]
        if "STATSD_NAMESPACES" in env:
            kwargs["namespaces"] = tuple(
                ns.strip() for ns in env["STATSD_NAMESPACES"].split(",") if ns.strip()
            )

        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_number(env: Mapping[str, str], key: str, kind: type) -> int | float:
    raw = env[key]
    try:
        return kind(raw)  # type: ignore[no-any-return]
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
