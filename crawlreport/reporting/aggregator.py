"""Report aggregation: merge registry, store and crawl engine into a JobReport.

Usage
-----
>>> aggregator = ReportAggregator(
...     ReportAggregatorDependencies(
...         registry=SqlJobRegistry(session_factory),
...         store=SqlClassificationStore(session_factory),
...         engine=HeritrixClient(CrawlEngineConfig.from_env()),
...     )
... )
>>> report = await aggregator.build_report("job-1", ReportQuery.create(None))

"""

from __future__ import annotations

import contextlib
import dataclasses as dc
import datetime as dt
import re
import time
import typing as typ

from crawlreport.common.time import format_report_time
from crawlreport.engine.errors import CrawlEngineError
from crawlreport.errors import (
    InvalidJobStateError,
    ReportingError,
    UpstreamUnavailableError,
)
from crawlreport.registry.models import ArchivedJob, LiveJob
from crawlreport.reporting.models import FINISHED_STATUS, JobReport

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from crawlreport.documents.models import ReportQuery
    from crawlreport.documents.protocol import ClassificationStore
    from crawlreport.engine.protocol import CrawlEngineClient
    from crawlreport.registry.models import CrawlJobRecord, JobSource
    from crawlreport.registry.protocol import JobRegistry
    from crawlreport.reporting.observability import ReportingEventLogger

_WHITESPACE = re.compile(r"\s+")


@dc.dataclass(frozen=True, slots=True)
class ReportAggregatorDependencies:
    """Collaborators queried while building a report.

    Attributes
    ----------
    registry
        Source of crawl job records.
    store
        Source of document classification counts.
    engine
        Client for the live crawl engine.

    """

    registry: JobRegistry
    store: ClassificationStore
    engine: CrawlEngineClient


@dc.dataclass(frozen=True, slots=True)
class _CrawlProgress:
    url: str
    status: str
    downloaded_count: int


@contextlib.contextmanager
def _crawl_engine_errors() -> cabc.Iterator[None]:
    try:
        yield
    except CrawlEngineError as exc:
        raise UpstreamUnavailableError.crawl_engine(str(exc)) from exc


def _check_reportable(record: CrawlJobRecord) -> None:
    """Reject records that carry neither a live status nor a finish time."""
    has_status = record.status is not None and record.status.strip() != ""
    if not has_status and record.finish_time is None:
        raise InvalidJobStateError(record.id, "neither a live status nor a finish time")


def _first_url(job_id: str, urls: list[str]) -> str:
    if not urls:
        raise InvalidJobStateError(job_id, "crawl engine reports no seed URL")
    return urls[0]


class ReportAggregator:
    """Build :class:`JobReport` values for individual crawl jobs.

    A job is reported on one of two mutually exclusive branches, chosen by
    the record's :attr:`CrawlJobRecord.source`:

    - live: entry URL, status and downloaded count come from the engine;
    - archived: the entry URL is parsed from the saved configuration, the
      status is ``"finished"`` and the downloaded count is 0.

    Document statistics come from the classification store on both branches,
    all under the same :class:`ReportQuery`.
    """

    def __init__(
        self,
        dependencies: ReportAggregatorDependencies,
        *,
        event_logger: ReportingEventLogger | None = None,
    ) -> None:
        """Configure the aggregator with its collaborators."""
        self._registry = dependencies.registry
        self._store = dependencies.store
        self._engine = dependencies.engine
        self._event_logger = event_logger

    async def build_report(self, job_id: str, query: ReportQuery) -> JobReport:
        """Build the report for ``job_id`` under ``query``.

        Raises
        ------
        CrawlJobNotFoundError
            If the registry has no record for ``job_id``.
        UpstreamUnavailableError
            If the crawl engine or a store cannot answer.
        InvalidJobStateError
            If the record or the engine's answer cannot be reported on.

        """
        started = time.monotonic()
        try:
            report = await self._build(job_id, query)
        except ReportingError as exc:
            if self._event_logger is not None:
                self._event_logger.log_report_failed(
                    job_id=job_id,
                    error=exc,
                    duration=dt.timedelta(seconds=time.monotonic() - started),
                )
            raise
        if self._event_logger is not None:
            self._event_logger.log_report_completed(
                job_id=job_id,
                status=report.status,
                duration=dt.timedelta(seconds=time.monotonic() - started),
            )
        return report

    async def _build(self, job_id: str, query: ReportQuery) -> JobReport:
        record = await self._registry.get_crawl_job(job_id)
        _check_reportable(record)
        source = record.source
        if self._event_logger is not None:
            self._event_logger.log_report_started(
                job_id=job_id,
                branch="live" if isinstance(source, LiveJob) else "archived",
                cutoff=query.cutoff,
            )
        progress = await self._resolve_progress(source)

        pdf_statistics = await self._store.get_validation_statistics(job_id, query)
        odf_count = await self._store.get_count_odf(job_id, query)
        office_count = await self._store.get_count_office(job_id, query)
        ooxml_count = await self._store.get_count_ooxml(job_id, query)

        return JobReport(
            id=job_id,
            url=progress.url,
            status=progress.status,
            downloaded_count=progress.downloaded_count,
            pdf_statistics=pdf_statistics,
            odf_count=odf_count,
            office_count=office_count,
            ooxml_count=ooxml_count,
            start_time=format_report_time(record.start_time),
            finish_time=(
                format_report_time(record.finish_time)
                if record.finish_time is not None
                else None
            ),
        )

    async def _resolve_progress(self, source: JobSource) -> _CrawlProgress:
        match source:
            case LiveJob(job_id=job_id):
                with _crawl_engine_errors():
                    urls = await self._engine.get_crawl_urls(job_id)
                    status = await self._engine.get_status(job_id)
                    downloaded = await self._engine.get_downloaded_count(job_id)
                return _CrawlProgress(
                    url=_first_url(job_id, urls),
                    status=_WHITESPACE.sub("", status),
                    downloaded_count=downloaded,
                )
            case ArchivedJob(job_id=job_id, config_url=config_url):
                with _crawl_engine_errors():
                    config = await self._engine.get_config(config_url)
                    urls = self._engine.parse_crawl_urls_from_config(config)
                return _CrawlProgress(
                    url=_first_url(job_id, urls),
                    status=FINISHED_STATUS,
                    downloaded_count=0,
                )
