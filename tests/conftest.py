"""Shared test fixtures and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import MagicMock

import pytest

from kima.config.settings import Settings
from kima.search.connection import ConnectionManager, SolrConnection
from kima.search.sink import RaisingErrorSink
from kima.search.solr import Solr


@dataclass
class Product:
    """Plain domain object used as an indexing source."""

    id: str
    name: str
    price: float
    tags: list[str] = field(default_factory=list)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with one configured core."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        search={
            "solr": {
                "products": {"hostname": "solr.test", "port": 8983, "path": "/solr/products"},
            },
        },
    )


@pytest.fixture
def sink() -> RaisingErrorSink:
    return RaisingErrorSink()


@pytest.fixture
def connection() -> MagicMock:
    """A connection double with Solr-shaped replies."""
    conn = MagicMock(spec=SolrConnection)
    conn.base_url = "http://solr.test:8983/solr/products"
    conn.query.return_value = {
        "responseHeader": {"status": 0, "QTime": 2},
        "response": {
            "numFound": 1,
            "start": 0,
            "docs": [{"id": "sku-1", "name": "Desk lamp"}],
        },
    }
    conn.commit.return_value = {"responseHeader": {"status": 0, "QTime": 11}}
    conn.add_documents.return_value = {"responseHeader": {"status": 0, "QTime": 4}}
    conn.delete_by_id.return_value = {"responseHeader": {"status": 0, "QTime": 1}}
    conn.optimize.return_value = {"responseHeader": {"status": 0, "QTime": 120}}
    conn.ping.return_value = {"responseHeader": {"status": 0, "QTime": 0}, "status": "OK"}
    return conn


@pytest.fixture
def manager(settings: Settings, sink: RaisingErrorSink, connection: MagicMock) -> ConnectionManager:
    """A connection manager whose factory hands out the connection double."""
    return ConnectionManager(settings, sink, factory=lambda core, options: connection)


@pytest.fixture
def solr(manager: ConnectionManager, sink: RaisingErrorSink) -> Solr:
    return Solr("products", manager, sink)


@pytest.fixture
def sample_product() -> Product:
    return Product(id="sku-1", name="Desk lamp", price=24.5, tags=["lighting", "office"])


@pytest.fixture
def sample_solr_error() -> dict[str, Any]:
    """Sample Solr JSON error body."""
    return {
        "responseHeader": {"status": 400, "QTime": 1},
        "error": {"msg": "undefined field nme", "code": 400},
    }
