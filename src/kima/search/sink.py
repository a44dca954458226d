"""Error sink — the single channel through which search failures are reported.

The search layer never swallows an error: it reports it to a sink and then
raises the typed exception. The sink decides whether a report is only logged
or raised right away (the default).
"""

from __future__ import annotations

import logging
from typing import Protocol

from kima.search.exceptions import ErrorKind, SearchError, error_for

logger = logging.getLogger(__name__)


class ErrorSink(Protocol):
    """Receives every failure detected by the search layer."""

    def report(self, message: str, kind: ErrorKind) -> None:
        """Record or raise a failure."""
        ...


class LoggingErrorSink:
    """Sink that only logs reports."""

    def report(self, message: str, kind: ErrorKind) -> None:
        logger.error("Search error (%s): %s", ErrorKind(kind).value, message)


class RaisingErrorSink(LoggingErrorSink):
    """Sink that logs and then raises the typed exception for the report."""

    def report(self, message: str, kind: ErrorKind) -> None:
        super().report(message, kind)
        raise error_for(kind, message)


def fail(sink: ErrorSink, kind: ErrorKind, message: str) -> SearchError:
    """Report a failure and return the exception the caller must raise.

    Sinks are free to return instead of raising; the caller raises the
    returned exception in that case, so a failed operation never yields a
    value.

    Example:
        >>> raise fail(self._sink, ErrorKind.TRANSPORT, "Solr client exception: ...")
    """
    sink.report(message, kind)
    return error_for(kind, message)
