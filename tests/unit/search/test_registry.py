"""Tests for the per-core search registry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from kima.config.settings import Settings
from kima.search.connection import SolrConnection
from kima.search.exceptions import ServiceUnavailableError
from kima.search.registry import SearchRegistry
from kima.search.sink import RaisingErrorSink
from kima.search.solr import Solr


@pytest.fixture
def registry(settings: Settings) -> SearchRegistry:
    return SearchRegistry(settings, factory=lambda core, options: MagicMock(spec=SolrConnection))


class TestSearchRegistry:
    def test_one_instance_per_core(self, registry: SearchRegistry) -> None:
        first = registry.get("products")
        assert isinstance(first, Solr)
        assert registry.get("products") is first
        assert registry.get("orders") is not first
        assert registry.cores == ["products", "orders"]

    def test_core_name_coerced_to_string(self, registry: SearchRegistry) -> None:
        assert registry.get(7) is registry.get("7")  # type: ignore[arg-type]

    def test_instances_share_connections(self, registry: SearchRegistry) -> None:
        registry.get("products").get_connection()
        assert registry.connections.is_resolved("products")
        assert registry.get("products").get_connection() is registry.connections.resolve("products")

    def test_disabled_search_is_unavailable(self, settings: Settings) -> None:
        registry = SearchRegistry(settings, enabled=False)
        with pytest.raises(ServiceUnavailableError, match="not available"):
            registry.get("products")
        assert registry.cores == []

    def test_from_settings(self, settings: Settings) -> None:
        settings.search.enabled = False
        with pytest.raises(ServiceUnavailableError):
            SearchRegistry.from_settings(settings).get("products")

    def test_default_sink_raises(self, settings: Settings) -> None:
        assert isinstance(SearchRegistry(settings)._sink, RaisingErrorSink)

    def test_close_closes_connections(self, settings: Settings) -> None:
        handle = MagicMock(spec=SolrConnection)
        registry = SearchRegistry(settings, factory=lambda core, options: handle)
        registry.get("products").get_connection()

        registry.close()

        handle.close.assert_called_once()
