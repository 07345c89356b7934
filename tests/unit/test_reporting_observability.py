"""Unit tests for reporting observability logging."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from crawlreport.documents import ReportQuery
from crawlreport.errors import InvalidJobStateError
from crawlreport.reporting import ReportAggregator, ReportAggregatorDependencies
from crawlreport.reporting.observability import (
    ReportingEventLogger,
    ReportingEventType,
)
from tests.helpers.fakes import FakeEngine, FakeRegistry, FakeStore, live_job
from tests.helpers.femtologging_capture import capture_femto_logs

LOGGER_NAME = "crawlreport.reporting.observability"


class TestReportingEventLogger:
    """Tests for ``ReportingEventLogger`` structured log events."""

    @pytest.fixture
    def event_logger(self) -> ReportingEventLogger:
        """Return a fresh reporting event logger."""
        return ReportingEventLogger()

    def test_report_started(self, event_logger: ReportingEventLogger) -> None:
        """Start events carry the job, branch and cutoff."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_started(
                job_id="J1",
                branch="live",
                cutoff=dt.datetime(2023, 1, 1, tzinfo=dt.UTC),
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "INFO"
            assert ReportingEventType.REPORT_STARTED in record.message
            assert "job_id=J1" in record.message
            assert "branch=live" in record.message
            assert "cutoff=2023-01-01T00:00:00+00:00" in record.message

    def test_report_completed(self, event_logger: ReportingEventLogger) -> None:
        """Completion events carry the status and duration."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_completed(
                job_id="J1", status="RUNNING", duration=dt.timedelta(seconds=1.5)
            )
            capture.wait_for_count(1)
            message = capture.records[0].message
            assert ReportingEventType.REPORT_COMPLETED in message
            assert "status=RUNNING" in message
            assert "duration_seconds=1.500" in message

    def test_report_failed(self, event_logger: ReportingEventLogger) -> None:
        """Failure events are logged at ERROR with the error type."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_failed(
                job_id="J3",
                error=InvalidJobStateError("J3", "no status"),
                duration=dt.timedelta(seconds=0),
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "ERROR"
            assert ReportingEventType.REPORT_FAILED in record.message
            assert "error_type=InvalidJobStateError" in record.message

    def test_batch_completed(self, event_logger: ReportingEventLogger) -> None:
        """Batch events carry member and failure counts."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_batch_completed(
                batch_id="B1", operation="office_list", members=3, failures=1
            )
            capture.wait_for_count(1)
            message = capture.records[0].message
            assert "operation=office_list" in message
            assert "members=3 failures=1" in message

    def test_spreadsheet_rendered(self, event_logger: ReportingEventLogger) -> None:
        """Render events carry the published path."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_spreadsheet_rendered(
                job_id="J1", path=Path("reports/report-J1.xlsx")
            )
            capture.wait_for_count(1)
            assert "path=reports/report-J1.xlsx" in capture.records[0].message


@pytest.mark.asyncio
async def test_aggregator_logs_failed_reports() -> None:
    """The aggregator logs a failure event before re-raising."""
    aggregator = ReportAggregator(
        ReportAggregatorDependencies(
            registry=FakeRegistry(jobs=[live_job("J3", status=None)]),
            store=FakeStore(),
            engine=FakeEngine(),
        ),
        event_logger=ReportingEventLogger(),
    )

    with capture_femto_logs(LOGGER_NAME) as capture:
        with pytest.raises(InvalidJobStateError):
            await aggregator.build_report("J3", ReportQuery.create(None))
        capture.wait_for_count(1)
        assert ReportingEventType.REPORT_FAILED in capture.records[0].message
