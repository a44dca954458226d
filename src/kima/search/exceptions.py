"""Search-layer exceptions."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a failure reported to the error sink."""

    CONFIGURATION = "configuration"
    INVALID_DOCUMENT = "invalid_document"
    TRANSPORT = "transport"
    UNAVAILABLE = "unavailable"


class SearchError(Exception):
    """Base exception for search errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT


class ConfigurationError(SearchError):
    """Raised when a core has no usable connection options."""

    kind = ErrorKind.CONFIGURATION


class InvalidDocumentError(SearchError):
    """Raised when a value that is not a structured object is given for indexing."""

    kind = ErrorKind.INVALID_DOCUMENT


class SearchTransportError(SearchError):
    """Raised when Solr rejects or fails to process a request."""

    kind = ErrorKind.TRANSPORT


class ServiceUnavailableError(SearchError):
    """Raised when the search capability is not available in this environment."""

    kind = ErrorKind.UNAVAILABLE


_ERRORS: dict[ErrorKind, type[SearchError]] = {
    ErrorKind.CONFIGURATION: ConfigurationError,
    ErrorKind.INVALID_DOCUMENT: InvalidDocumentError,
    ErrorKind.TRANSPORT: SearchTransportError,
    ErrorKind.UNAVAILABLE: ServiceUnavailableError,
}


def error_for(kind: ErrorKind, message: str) -> SearchError:
    """Build the typed exception matching an error kind."""
    return _ERRORS[ErrorKind(kind)](message)


class SolrClientError(Exception):
    """Transport-level failure raised by a Solr connection handle.

    Args:
        message: Human readable description, preferably Solr's own error message.
        status_code: HTTP status of the response, if one was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
