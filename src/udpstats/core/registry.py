"""Registry mapping namespace names to Stats facades.

Applications resolve their facade by name instead of relying on globals:

    registry = NamespaceRegistry.from_config(StatsConfig.from_env())
    stats = registry.lookup("Stats")
"""

from udpstats.core.config import StatsConfig
from udpstats.core.facade import Stats
from udpstats.core.ports import TransportPort


class NamespaceRegistry:
    """Registry of Stats facades keyed by namespace."""

    def __init__(self) -> None:
        self._facades: dict[str, Stats] = {}

    def register(self, namespace: str, stats: Stats) -> None:
        """Register a facade under a namespace.

        Raises:
            TypeError: If stats is not a Stats instance.
            ValueError: If the namespace is already registered.
        """
        if not isinstance(stats, Stats):
            raise TypeError(f"stats must be a Stats instance, got {type(stats).__name__}")
        if namespace in self._facades:
            raise ValueError(f"namespace {namespace!r} already registered")
        self._facades[namespace] = stats

    def lookup(self, namespace: str) -> Stats | None:
        """Return the facade for a namespace, or None if unregistered."""
        return self._facades.get(namespace)

    def namespaces(self) -> list[str]:
        """Return registered namespaces in registration order."""
        return list(self._facades)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._facades

    @classmethod
    def from_config(
        cls, config: StatsConfig, transport: TransportPort | None = None
    ) -> "NamespaceRegistry":
        """Register one shared facade under every configured namespace.

        Args:
            config: Client configuration; its namespaces and data_prefix
                    are used.
            transport: Transport to share (default: a UDPTransport built
                       from config).
        """
        if transport is None:
            stats = Stats.from_config(config)
        else:
            stats = Stats(transport, prefix=config.data_prefix)
        registry = cls()
        for namespace in config.namespaces:
            if namespace not in registry:
                registry.register(namespace, stats)
        return registry
