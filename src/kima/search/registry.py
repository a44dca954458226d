"""Search Registry — hands out one ``Solr`` facade per core name.

The registry replaces process-wide singletons: create one per application
and pass it to the components that search.

Example:
    >>> registry = SearchRegistry.from_settings(Settings())
    >>> registry.get("products") is registry.get("products")
    True
"""

from __future__ import annotations

import logging
import threading

from kima.config.settings import ConfigProvider, Settings
from kima.search.connection import ConnectionFactory, ConnectionManager, SolrConnection
from kima.search.exceptions import ErrorKind
from kima.search.sink import ErrorSink, RaisingErrorSink, fail
from kima.search.solr import Solr

logger = logging.getLogger(__name__)

ERROR_NO_SOLR = "Solr search is not available in this environment"


class SearchRegistry:
    """Registry of per-core ``Solr`` facades sharing one connection manager.

    Args:
        provider: Source of per-core connection options.
        sink: Error sink for every search failure (raises by default).
        enabled: Whether the search capability is available at all.
        factory: Connection factory handed to the connection manager.
    """

    def __init__(
        self,
        provider: ConfigProvider,
        sink: ErrorSink | None = None,
        *,
        enabled: bool = True,
        factory: ConnectionFactory = SolrConnection.from_options,
    ) -> None:
        self._sink = sink or RaisingErrorSink()
        self._enabled = enabled
        self._connections = ConnectionManager(provider, self._sink, factory)
        self._instances: dict[str, Solr] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, sink: ErrorSink | None = None) -> SearchRegistry:
        return cls(settings, sink, enabled=settings.search.enabled)

    def get(self, core: str) -> Solr:
        """Return the facade for a core, creating it on first request.

        Raises:
            ServiceUnavailableError: If search is disabled in this environment.
        """
        core = str(core)
        with self._lock:
            instance = self._instances.get(core)
            if instance is None:
                if not self._enabled:
                    raise fail(self._sink, ErrorKind.UNAVAILABLE, ERROR_NO_SOLR)
                instance = Solr(core, self._connections, self._sink)
                self._instances[core] = instance
                logger.debug("Registered Solr core: %s", core)
            return instance

    @property
    def connections(self) -> ConnectionManager:
        return self._connections

    @property
    def cores(self) -> list[str]:
        """List all core names handed out so far."""
        return list(self._instances.keys())

    def close(self) -> None:
        """Close every open connection."""
        self._connections.close_all()
