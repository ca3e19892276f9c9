"""
Tests for wide events (canonical log lines) utility.

Tests the structured logging patterns including:
- WideEvent creation and context management
- Timer and performance breakdown
- track_operation success and failure paths
"""

from unittest.mock import patch

import pytest

from chargelog.utils.wide_events import WideEvent, track_operation


class TestWideEvent:
    """Tests for WideEvent class."""

    def test_creates_event_with_defaults(self):
        event = WideEvent(operation="csv_import")

        assert event.context["operation"] == "csv_import"
        assert "timestamp" in event.context
        assert "start_time" in event.context
        assert "request_id" in event.context

    def test_explicit_request_id(self):
        event = WideEvent(operation="csv_import", request_id="req-1")
        assert event.context["request_id"] == "req-1"

    def test_add_context(self):
        event = WideEvent(operation="test")
        event.add_context(filename="records.csv", mode="append")

        assert event.context["filename"] == "records.csv"
        assert event.context["mode"] == "append"

    def test_add_business_metric(self):
        event = WideEvent(operation="test")
        event.add_business_metric("rows_imported", 42)
        event.add_business_metric("short_rows", 2)

        assert event.context["business_metrics"] == {"rows_imported": 42, "short_rows": 2}

    def test_add_error(self):
        event = WideEvent(operation="test")
        event.add_error(ValueError("bad value"), row=3)

        assert event.context["success"] is False
        assert event.context["error"]["type"] == "ValueError"
        assert event.context["error"]["message"] == "bad value"
        assert event.context["error"]["details"] == {"row": 3}

    def test_mark_success_and_failure(self):
        event = WideEvent(operation="test")
        event.mark_success()
        assert event.context["success"] is True

        event.mark_failure("unavailable")
        assert event.context["success"] is False
        assert event.context["failure_reason"] == "unavailable"

    def test_timer(self):
        event = WideEvent(operation="test")
        with event.timer("parse"):
            pass

        assert "parse_ms" in event.context["performance_breakdown"]

    def test_timer_records_on_exception(self):
        event = WideEvent(operation="test")
        with pytest.raises(RuntimeError):
            with event.timer("save"):
                raise RuntimeError("boom")

        assert "save_ms" in event.context["performance_breakdown"]

    def test_set_duration(self):
        event = WideEvent(operation="test")
        event.set_duration()

        assert "duration_ms" in event.context
        assert "start_time" not in event.context

    def test_emit_uses_level(self):
        event = WideEvent(operation="csv_export")
        with patch.object(event, "logger") as mock_logger:
            event.emit(level="warning")

        mock_logger.warning.assert_called_once()
        args, kwargs = mock_logger.warning.call_args
        assert args[0] == "csv_export_complete"
        assert kwargs["operation"] == "csv_export"


class TestTrackOperation:
    """Tests for the track_operation context manager."""

    def test_success(self):
        with patch("chargelog.utils.wide_events.WideEvent.emit") as mock_emit:
            with track_operation("csv_export", include_bom=True) as event:
                event.add_business_metric("records_exported", 3)

        assert event.context["success"] is True
        assert event.context["include_bom"] is True
        mock_emit.assert_called_once_with(level="info")

    def test_failure_reraises(self):
        with patch("chargelog.utils.wide_events.WideEvent.emit") as mock_emit:
            with pytest.raises(ValueError):
                with track_operation("csv_import") as event:
                    raise ValueError("broken file")

        assert event.context["success"] is False
        assert event.context["failure_reason"] == "broken file"
        mock_emit.assert_called_once_with(level="error")
