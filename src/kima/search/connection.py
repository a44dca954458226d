"""Solr connections — one lazily created HTTP handle per core.

``SolrConnection`` talks to a single core over Solr's HTTP API using a
synchronous ``httpx.Client``. ``ConnectionManager`` owns the handles and
builds each one at most once, the first time a core is used.

Usage::

    manager = ConnectionManager(settings, RaisingErrorSink())
    connection = manager.resolve("products")
    connection.query(request)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import httpx
import pydantic_core
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from kima.config.settings import ConfigProvider
from kima.search.document import SolrDocument
from kima.search.exceptions import ErrorKind, SolrClientError
from kima.search.query import QueryRequest
from kima.search.sink import ErrorSink, fail

logger = logging.getLogger(__name__)

ERROR_NO_CONFIG = 'Empty Solr config for core "%s"'
ERROR_INVALID_CONFIG = 'Invalid Solr config for core "%s": %s'

# DNS name, IPv4 address or bracketed IPv6 address
_HOSTNAME_PATTERN = r"^(?:[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?|\[[0-9A-Fa-f:.]+\])$"


class SolrConnectionOptions(BaseModel):
    """Connection options of one Solr core, as found in the configuration."""

    hostname: str = Field(default="localhost", pattern=_HOSTNAME_PATTERN, description="Solr host")
    port: int = Field(default=8983, ge=1, le=65535, description="Solr port")
    path: str | None = Field(default=None, description="Core path, defaults to /solr/<core>")
    username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("username", "login"),
        description="Basic-auth username",
    )
    password: str | None = Field(default=None, description="Basic-auth password")
    secure: bool = Field(default=False, description="Use https")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")

    def base_url(self, core: str) -> str:
        scheme = "https" if self.secure else "http"
        path = (self.path or f"/solr/{core}").strip("/")
        return f"{scheme}://{self.hostname}:{self.port}/{path}"


class SolrConnection:
    """HTTP handle bound to a single Solr core.

    Every operation returns Solr's decoded JSON reply or raises
    ``SolrClientError``. The handle is safe to share as far as
    ``httpx.Client`` is; it performs no retries and no liveness checks.

    Args:
        core: Core name, used for logging and the default path.
        options: Validated connection options.
        client: Pre-built HTTP client (tests inject one with a mock transport).
    """

    def __init__(
        self,
        core: str,
        options: SolrConnectionOptions,
        client: httpx.Client | None = None,
    ) -> None:
        self._core = core
        self._options = options
        self._base_url = options.base_url(core)

        if client is None:
            auth = None
            if options.username and options.password:
                auth = httpx.BasicAuth(options.username, options.password)
            client = httpx.Client(
                base_url=self._base_url,
                timeout=httpx.Timeout(options.timeout),
                auth=auth,
            )
        self._client = client

    @classmethod
    def from_options(cls, core: str, options: Mapping[str, Any]) -> SolrConnection:
        """Validate raw options and build a connection.

        Raises:
            pydantic.ValidationError: If the options are malformed.
            httpx.InvalidURL: If the options do not form a valid URL.
        """
        validated = SolrConnectionOptions.model_validate(dict(options))
        httpx.URL(validated.base_url(core))
        return cls(core, validated)

    @property
    def core(self) -> str:
        return self._core

    @property
    def base_url(self) -> str:
        return self._base_url

    # ── Operations ───────────────────────────────────────────────────────

    def query(self, request: QueryRequest) -> dict[str, Any]:
        """Run a ``/select`` request."""
        return self._request("GET", "/select", params=request.to_params())

    def add_documents(self, documents: Sequence[SolrDocument]) -> dict[str, Any]:
        """Send documents to the index, without committing."""
        return self._update([doc.to_json() for doc in documents])

    def delete_by_id(self, doc_id: str) -> dict[str, Any]:
        """Delete one document by its unique key, without committing."""
        return self._update({"delete": {"id": doc_id}})

    def commit(self) -> dict[str, Any]:
        return self._update({"commit": {}})

    def optimize(self) -> dict[str, Any]:
        return self._update({"optimize": {}})

    def ping(self) -> dict[str, Any]:
        return self._request("GET", "/admin/ping")

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    # ── Helpers ──────────────────────────────────────────────────────────

    def _update(self, payload: Any) -> dict[str, Any]:
        try:
            body = pydantic_core.to_json(payload)
        except pydantic_core.PydanticSerializationError as e:
            raise SolrClientError(f"Cannot encode update request: {e}") from e
        return self._request(
            "POST",
            "/update",
            params={"wt": "json"},
            content=body,
            headers={"Content-Type": "application/json"},
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        start = time.monotonic()
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise SolrClientError(str(e) or type(e).__name__) from e

        took_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Solr %s %s%s -> %s in %dms", method, self._base_url, url, resp.status_code, took_ms)

        if resp.is_error:
            raise SolrClientError(self._error_message(resp), status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise SolrClientError(f"Invalid JSON response from Solr: {e}", status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise SolrClientError("Unexpected Solr response body", status_code=resp.status_code)
        return data

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        """Prefer Solr's own ``error.msg`` over the bare HTTP status."""
        try:
            return str(resp.json()["error"]["msg"])
        except (ValueError, KeyError, TypeError):
            return f"HTTP {resp.status_code} {resp.reason_phrase}".rstrip()


ConnectionFactory = Callable[[str, Mapping[str, Any]], SolrConnection]


class ConnectionManager:
    """Owns one cached ``SolrConnection`` per core.

    A handle is created the first time its core is resolved and then reused
    for the lifetime of the manager. Construction is serialized by a lock, so
    concurrent first calls still build a single handle and consult the
    config provider once.

    Args:
        provider: Source of per-core connection options.
        sink: Error sink that receives configuration failures.
        factory: Builds a handle from a core name and its raw options.
    """

    def __init__(
        self,
        provider: ConfigProvider,
        sink: ErrorSink,
        factory: ConnectionFactory = SolrConnection.from_options,
    ) -> None:
        self._provider = provider
        self._sink = sink
        self._factory = factory
        self._connections: dict[str, SolrConnection] = {}
        self._lock = threading.Lock()

    def resolve(self, core: str) -> SolrConnection:
        """Return the connection of a core, creating it on first use.

        Raises:
            ConfigurationError: If the core has no usable options. Nothing is
                cached, so a later call tries again.
        """
        core = str(core)
        connection = self._connections.get(core)
        if connection is not None:
            return connection

        with self._lock:
            connection = self._connections.get(core)
            if connection is not None:
                return connection

            options = self._provider.get_core_options(core)
            if not options:
                raise fail(self._sink, ErrorKind.CONFIGURATION, ERROR_NO_CONFIG % core)

            try:
                connection = self._factory(core, options)
            except (ValidationError, httpx.InvalidURL) as e:
                raise fail(self._sink, ErrorKind.CONFIGURATION, ERROR_INVALID_CONFIG % (core, e)) from e

            self._connections[core] = connection
            logger.info("Created Solr connection for core '%s' at %s", core, connection.base_url)
            return connection

    def is_resolved(self, core: str) -> bool:
        return str(core) in self._connections

    def close_all(self) -> None:
        """Close and forget every cached connection."""
        with self._lock:
            for core, connection in self._connections.items():
                try:
                    connection.close()
                    logger.info("Closed Solr connection for core '%s'", core)
                except Exception:
                    logger.warning("Error closing Solr connection for core '%s'", core, exc_info=True)
            self._connections.clear()
