"""Solr facade — the per-core surface used by application code.

Usage::

    registry = SearchRegistry.from_settings(settings)
    products = registry.get("products")

    page = products.limit(20, page=2).order({"name": "ASC", "price": "DESC"}).fetch(
        fields=["id", "name"],
        query_string="name:lamp",
        filter_query="in_stock:true",
    )
    products.put([Product(...), Product(...)])
    products.delete(["sku-1", "sku-2"])
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from kima.search.connection import ConnectionManager, SolrConnection
from kima.search.document import ERROR_INVALID_DOCUMENT, SolrDocument, to_document
from kima.search.exceptions import ErrorKind, InvalidDocumentError, SearchError, SolrClientError
from kima.search.query import (
    MATCH_ALL,
    ORDER_ASC,
    ORDER_DESC,
    Pagination,
    QueryRequest,
    SortFields,
    SortOrder,
    build_query,
    parse_sort_fields,
)
from kima.search.sink import ErrorSink, fail

logger = logging.getLogger(__name__)

ERROR_SOLR_CLIENT = 'Solr client exception: "%s"'

ResultSet = dict[str, Any]
"""The ``response`` section of a Solr reply: ``numFound``, ``start`` and ``docs``."""


class IndexHealth(BaseModel):
    """Health status of a Solr core."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the ping in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the check")
    message: str | None = Field(default=None, description="Additional health message")


class Solr:
    """Search operations against one Solr core.

    Pagination and sort set through ``limit()`` and ``order()`` stay on the
    instance and apply to every later ``fetch()`` until overwritten.

    Args:
        core: Name of the core.
        connections: Manager that owns the core's connection.
        sink: Error sink receiving every failure.
    """

    ORDER_ASC = ORDER_ASC
    ORDER_DESC = ORDER_DESC

    def __init__(self, core: str, connections: ConnectionManager, sink: ErrorSink) -> None:
        self._core = str(core)
        self._connections = connections
        self._sink = sink
        self._pagination = Pagination()
        self._sort_fields: dict[str, SortOrder] = {}

    @property
    def core(self) -> str:
        return self._core

    def get_connection(self) -> SolrConnection:
        """Resolve the core's connection, creating it on first use."""
        return self._connections.resolve(self._core)

    # ── Builder state ────────────────────────────────────────────────────

    def limit(self, limit: int, page: int = 0) -> Solr:
        """Set the result window; ``limit <= 0`` removes it."""
        self._pagination = Pagination(limit=int(limit), page=int(page))
        return self

    def order(self, sort_fields: SortFields = ()) -> Solr:
        """Replace the sort fields.

        Args:
            sort_fields: ``["name", "type"]``, ``{"name": "ASC", "type": "DESC"}``
                or ``["name", ("type", "DESC")]``. Fields without the ``"DESC"``
                token sort ascending.

        Raises:
            ValueError: If an item is neither a name nor a (name, direction) pair.
        """
        self._sort_fields = parse_sort_fields(sort_fields)
        return self

    @property
    def pagination(self) -> Pagination:
        return self._pagination

    @property
    def sort_fields(self) -> dict[str, SortOrder]:
        return dict(self._sort_fields)

    def build_query(
        self,
        fields: Iterable[str] = (),
        query_string: str = MATCH_ALL,
        filter_query: str = "",
    ) -> QueryRequest:
        """Build the request ``fetch()`` would send, without sending it."""
        return build_query(fields, query_string, filter_query, self._pagination, self._sort_fields)

    # ── Operations ───────────────────────────────────────────────────────

    def fetch(
        self,
        fields: Iterable[str] = (),
        query_string: str = MATCH_ALL,
        filter_query: str = "",
    ) -> ResultSet:
        """Fetch documents from the index.

        Args:
            fields: Fields to return, in order. Empty returns Solr's default fields.
            query_string: Main query, match-all by default.
            filter_query: Optional filter query, ANDed with the main query.

        Returns:
            The ``response`` section of Solr's reply, unmodified.

        Raises:
            SearchTransportError: If Solr rejects or fails the query.
        """
        request = self.build_query(fields, query_string, filter_query)
        connection = self.get_connection()

        try:
            data = connection.query(request)
        except SolrClientError as e:
            raise self._transport_error(e) from e

        result = data.get("response")
        if not isinstance(result, dict):
            raise fail(self._sink, ErrorKind.TRANSPORT, ERROR_SOLR_CLIENT % "response section missing")
        logger.debug(
            "Fetched %d of %s documents from core '%s'",
            len(result.get("docs", [])),
            result.get("numFound"),
            self._core,
        )
        return result

    def put(self, documents: Any) -> dict[str, Any]:
        """Index one object or a list of objects, then commit.

        Every object is converted before anything is sent, so an invalid
        element means nothing reaches Solr.

        Returns:
            Solr's commit response.

        Raises:
            InvalidDocumentError: If any element is not a structured object,
                or the list is empty.
            SearchTransportError: If the add or the commit fails.
        """
        batch = list(documents) if isinstance(documents, (list, tuple)) else [documents]
        if not batch:
            raise fail(self._sink, ErrorKind.INVALID_DOCUMENT, ERROR_INVALID_DOCUMENT)

        try:
            docs: list[SolrDocument] = [to_document(document) for document in batch]
        except InvalidDocumentError as e:
            raise fail(self._sink, ErrorKind.INVALID_DOCUMENT, str(e)) from e

        connection = self.get_connection()

        try:
            connection.add_documents(docs)
            response = connection.commit()
        except SolrClientError as e:
            raise self._transport_error(e) from e

        logger.info("Indexed %d documents into core '%s'", len(docs), self._core)
        return response

    def delete(self, ids: Iterable[str]) -> dict[str, Any]:
        """Delete documents by id, in order, then commit once.

        The first failure stops the call: later ids are not attempted, no
        commit is sent and deletes already issued are not undone.

        Returns:
            Solr's commit response.

        Raises:
            SearchTransportError: If a delete or the commit fails.
        """
        id_list = [ids] if isinstance(ids, str) else list(ids)
        connection = self.get_connection()

        try:
            for doc_id in id_list:
                connection.delete_by_id(doc_id)
            response = connection.commit()
        except SolrClientError as e:
            raise self._transport_error(e) from e

        logger.info("Deleted %d documents from core '%s'", len(id_list), self._core)
        return response

    def optimize(self) -> dict[str, Any]:
        """Optimize the core's index.

        Raises:
            SearchTransportError: If Solr fails the request.
        """
        connection = self.get_connection()
        try:
            return connection.optimize()
        except SolrClientError as e:
            raise self._transport_error(e) from e

    def ping(self) -> dict[str, Any]:
        """Ping the core's admin handler."""
        connection = self.get_connection()
        try:
            return connection.ping()
        except SolrClientError as e:
            raise self._transport_error(e) from e

    def health_check(self) -> IndexHealth:
        """Ping the core and report its health; never raises."""
        try:
            start = time.monotonic()
            data = self.ping()
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return IndexHealth(status="unhealthy", last_check=datetime.now(UTC).isoformat(), message=str(e))

        solr_status = data.get("status", "unknown")
        return IndexHealth(
            status="healthy" if solr_status == "OK" else "degraded",
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Core: {self._core}, status: {solr_status}",
        )

    def _transport_error(self, error: SolrClientError) -> SearchError:
        return fail(self._sink, ErrorKind.TRANSPORT, ERROR_SOLR_CLIENT % error)
