"""Emit structured observability events for report aggregation and rendering.

Usage
-----
>>> event_logger = ReportingEventLogger()
>>> event_logger.log_report_started(job_id="job-1", branch="live", cutoff=None)

"""

from __future__ import annotations

import enum
import typing as typ

from crawlreport.logging import get_logger, log_error, log_info

if typ.TYPE_CHECKING:
    import datetime as dt
    from pathlib import Path

logger = get_logger(__name__)


class ReportingEventType(enum.StrEnum):
    """Structured log event types for the reporting core."""

    REPORT_STARTED = "reporting.report.started"
    REPORT_COMPLETED = "reporting.report.completed"
    REPORT_FAILED = "reporting.report.failed"
    BATCH_COMPLETED = "reporting.batch.completed"
    SPREADSHEET_RENDERED = "reporting.spreadsheet.rendered"


def _format_cutoff(cutoff: dt.datetime | None) -> str:
    return "None" if cutoff is None else cutoff.isoformat()


class ReportingEventLogger:
    """Emit structured reporting events via femtologging."""

    def log_report_started(
        self,
        *,
        job_id: str,
        branch: str,
        cutoff: dt.datetime | None,
    ) -> None:
        """Log the start of a job report on the ``live`` or ``archived`` branch."""
        log_info(
            logger,
            "[%s] job_id=%s branch=%s cutoff=%s",
            ReportingEventType.REPORT_STARTED,
            job_id,
            branch,
            _format_cutoff(cutoff),
        )

    def log_report_completed(
        self,
        *,
        job_id: str,
        status: str,
        duration: dt.timedelta,
    ) -> None:
        """Log a successfully built job report."""
        log_info(
            logger,
            "[%s] job_id=%s status=%s duration_seconds=%.3f",
            ReportingEventType.REPORT_COMPLETED,
            job_id,
            status,
            duration.total_seconds(),
        )

    def log_report_failed(
        self,
        *,
        job_id: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a job report that could not be built.

        Parameters
        ----------
        job_id
            Crawl job identifier.
        error
            Raised exception; attached as exc_info.
        duration
            Elapsed time between start and failure.

        """
        log_error(
            logger,
            "[%s] job_id=%s duration_seconds=%.3f error_type=%s error_message=%s",
            ReportingEventType.REPORT_FAILED,
            job_id,
            duration.total_seconds(),
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_batch_completed(
        self,
        *,
        batch_id: str,
        operation: str,
        members: int,
        failures: int,
    ) -> None:
        """Log a batch fan-out with its member and failure counts."""
        log_info(
            logger,
            "[%s] batch_id=%s operation=%s members=%d failures=%d",
            ReportingEventType.BATCH_COMPLETED,
            batch_id,
            operation,
            members,
            failures,
        )

    def log_spreadsheet_rendered(self, *, job_id: str, path: Path) -> None:
        """Log the publication of a rendered spreadsheet."""
        log_info(
            logger,
            "[%s] job_id=%s path=%s",
            ReportingEventType.SPREADSHEET_RENDERED,
            job_id,
            path,
        )
