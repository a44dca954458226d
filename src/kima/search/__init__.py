"""Search layer — Solr connections, query building and document indexing.

Quick start::

    from kima.config import Settings
    from kima.search import SearchRegistry

    registry = SearchRegistry.from_settings(Settings())
    result = registry.get("products").limit(10).fetch(query_string="name:lamp")
"""

from kima.search.connection import ConnectionManager, SolrConnection, SolrConnectionOptions
from kima.search.document import Indexable, SolrDocument, to_document
from kima.search.exceptions import (
    ConfigurationError,
    ErrorKind,
    InvalidDocumentError,
    SearchError,
    SearchTransportError,
    ServiceUnavailableError,
    SolrClientError,
)
from kima.search.query import Pagination, QueryRequest, SortOrder, build_query
from kima.search.registry import SearchRegistry
from kima.search.sink import ErrorSink, LoggingErrorSink, RaisingErrorSink
from kima.search.solr import IndexHealth, ResultSet, Solr

__all__ = [
    "ConfigurationError",
    "ConnectionManager",
    "ErrorKind",
    "ErrorSink",
    "IndexHealth",
    "Indexable",
    "InvalidDocumentError",
    "LoggingErrorSink",
    "Pagination",
    "QueryRequest",
    "RaisingErrorSink",
    "ResultSet",
    "SearchError",
    "SearchRegistry",
    "SearchTransportError",
    "ServiceUnavailableError",
    "Solr",
    "SolrClientError",
    "SolrConnection",
    "SolrConnectionOptions",
    "SolrDocument",
    "SortOrder",
    "build_query",
    "to_document",
]
