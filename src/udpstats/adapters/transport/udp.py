"""UDP transport adapter.

Sends statsd lines to the collector as UDP datagrams. Delivery is best
effort: a failed send is reported as False and logged at debug level,
never raised and never retried.
"""

import logging
import random
import socket
import threading
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any

from udpstats.adapters.transport.base import SampledTransport
from udpstats.core.config import StatsConfig

_logger = logging.getLogger(__name__)

SocketFactory = Callable[[int, int], Any]


class UDPTransport(SampledTransport):
    """UDP implementation of TransportPort.

    The collector address is resolved once, in a background thread, and
    the socket is created on first use and reused for the lifetime of the
    transport. Both the lookup and the write are bounded by
    ``config.timeout``. A lookup that failed or overran the timeout once is
    not waited for again: later sends fail at once until it completes or
    the transport is closed.

    The socket is shared by every thread sending through this object;
    datagram writes are atomic, so only creation is locked.

    Example:
        ```python
        transport = UDPTransport(StatsConfig(host="statsd.local"))
        transport.send("requests:1|c")
        ```
    """

    def __init__(
        self,
        config: StatsConfig,
        logger: logging.Logger | None = None,
        rng: Callable[[], float] = random.random,
        socket_factory: SocketFactory = socket.socket,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Collector host, port and send timeout.
            logger: Logger for debug output (default: module logger).
            rng: Source of uniform random numbers in [0, 1) for sampling.
            socket_factory: Callable taking (family, type) and returning a
                            socket; replaced in tests.
        """
        super().__init__(rng)
        self.config = config
        self._logger = logger or _logger
        self._socket_factory = socket_factory
        self._socket: Any = None
        self._address: tuple[Any, ...] | None = None
        self._resolution: Future | None = None
        self._resolution_overdue = False
        self._lock = threading.Lock()

    def _start_resolution(self) -> Future:
        """Look up the collector address in a daemon thread."""
        future: Future = Future()
        host, port = self.config.host, self.config.port

        def resolve() -> None:
            try:
                future.set_result(
                    socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
                )
            except BaseException as exc:
                future.set_exception(exc)

        threading.Thread(target=resolve, name="udpstats-resolve", daemon=True).start()
        return future

    def _resolve(self) -> tuple[Any, ...]:
        """Wait for the address lookup, at most config.timeout once."""
        with self._lock:
            if self._resolution is None:
                self._resolution = self._start_resolution()
            resolution = self._resolution
            wait = 0 if self._resolution_overdue else self.config.timeout
        try:
            return resolution.result(timeout=wait)  # type: ignore[no-any-return]
        except FuturesTimeoutError:
            self._resolution_overdue = True
            raise

    def _ensure_socket(self) -> tuple[Any, tuple[Any, ...]]:
        """Resolve the collector address and create the socket once."""
        sock, address = self._socket, self._address
        if sock is not None and address is not None:
            return sock, address
        family, _, _, _, sockaddr = self._resolve()
        with self._lock:
            if self._socket is None or self._address is None:
                sock = self._socket_factory(family, socket.SOCK_DGRAM)
                sock.settimeout(self.config.timeout)
                self._socket, self._address = sock, sockaddr
            return self._socket, self._address

    def _write(self, line: str) -> bool:
        data = line.encode("utf-8")
        self._logger.debug("Statsd: %s", line)
        try:
            sock, address = self._ensure_socket()
            sent = int(sock.sendto(data, address))
        except Exception:
            self._logger.debug("Statsd failure sending %r", line, exc_info=True)
            return False
        self._logger.debug("Statsd sent: %s", sent)
        return sent == len(data)

    def close(self) -> None:
        """Close the socket. The next send resolves and opens a new one."""
        with self._lock:
            sock, self._socket, self._address = self._socket, None, None
            self._resolution, self._resolution_overdue = None, False
        if sock is not None:
            sock.close()
