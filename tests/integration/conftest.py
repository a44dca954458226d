"""Integration test fixtures — a live Solr instance.

Expects a Solr server with a schemaless core named ``kima_test``:
    docker run -d -p 8983:8983 solr:9 solr-precreate kima_test

Tests are skipped when Solr is not reachable.
"""

from __future__ import annotations

import time

import httpx
import pytest

SOLR_HOST = "localhost"
SOLR_PORT = 8983
SOLR_CORE = "kima_test"


def _wait_for_service(url: str, timeout: float = 5.0) -> bool:
    """Poll a URL until it answers 200 or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if httpx.get(url, timeout=2.0).status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(0.5)
    return False


@pytest.fixture(scope="session")
def solr_ready() -> dict[str, object]:
    """Connection options of the test core, or skip if Solr is down."""
    url = f"http://{SOLR_HOST}:{SOLR_PORT}/solr/{SOLR_CORE}/admin/ping"
    if not _wait_for_service(url):
        pytest.skip(f"Solr not available at {SOLR_HOST}:{SOLR_PORT}")
    return {"hostname": SOLR_HOST, "port": SOLR_PORT, "path": f"/solr/{SOLR_CORE}"}
