"""Tests for the error sink and the exception taxonomy."""

from __future__ import annotations

import logging

import pytest

from kima.search.exceptions import (
    ConfigurationError,
    ErrorKind,
    InvalidDocumentError,
    SearchError,
    SearchTransportError,
    ServiceUnavailableError,
    error_for,
)
from kima.search.sink import LoggingErrorSink, RaisingErrorSink, fail


class TestErrorFor:
    @pytest.mark.parametrize(
        ("kind", "error_type"),
        [
            (ErrorKind.CONFIGURATION, ConfigurationError),
            (ErrorKind.INVALID_DOCUMENT, InvalidDocumentError),
            (ErrorKind.TRANSPORT, SearchTransportError),
            (ErrorKind.UNAVAILABLE, ServiceUnavailableError),
        ],
    )
    def test_kind_maps_to_type(self, kind: ErrorKind, error_type: type[SearchError]) -> None:
        error = error_for(kind, "message")
        assert type(error) is error_type
        assert error.kind is kind
        assert str(error) == "message"

    def test_accepts_kind_value(self) -> None:
        assert isinstance(error_for("transport", "x"), SearchTransportError)  # type: ignore[arg-type]


class TestSinks:
    def test_logging_sink_logs_and_returns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="kima.search.sink"):
            LoggingErrorSink().report("no config", ErrorKind.CONFIGURATION)
        assert "configuration" in caplog.text
        assert "no config" in caplog.text

    def test_raising_sink_raises_typed_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR), pytest.raises(InvalidDocumentError, match="bad doc"):
            RaisingErrorSink().report("bad doc", ErrorKind.INVALID_DOCUMENT)
        assert "bad doc" in caplog.text

    def test_fail_returns_error_when_sink_does_not_raise(self) -> None:
        error = fail(LoggingErrorSink(), ErrorKind.TRANSPORT, "boom")
        assert isinstance(error, SearchTransportError)

    def test_fail_propagates_sink_exception(self) -> None:
        with pytest.raises(ServiceUnavailableError):
            fail(RaisingErrorSink(), ErrorKind.UNAVAILABLE, "down")
