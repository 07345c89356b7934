"""Batch expansion: per-member reports, document lists and spreadsheets.

Every operation resolves the batch once, pins one :class:`ReportQuery` to the
batch's cutoff and reuses it for every member, so all figures of one response
share the same time bounds. Members are processed concurrently (bounded by
``ReportingConfig.batch_concurrency``) and returned in the batch's declared
order. A :class:`ReportingError` raised for one member is attached to that
member instead of failing the whole response.
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import typing as typ

from crawlreport.documents.models import DocumentList, ListCategory, ReportQuery
from crawlreport.errors import ReportingError
from crawlreport.registry.errors import CrawlJobNotInBatchError
from crawlreport.reporting.config import ReportingConfig
from crawlreport.reporting.models import (
    MemberDocumentList,
    MemberReport,
    ReportDocuments,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from crawlreport.documents.protocol import ClassificationStore
    from crawlreport.registry.protocol import JobRegistry
    from crawlreport.reporting.aggregator import ReportAggregator
    from crawlreport.reporting.observability import ReportingEventLogger
    from crawlreport.reporting.spreadsheet import SpreadsheetRenderer


@dc.dataclass(frozen=True, slots=True)
class BatchReportServiceDependencies:
    """Core dependencies for BatchReportService.

    Attributes
    ----------
    registry
        Source of batch and crawl job records.
    store
        Source of document listings.
    aggregator
        Builds individual job reports.
    renderer
        Renders spreadsheets for single jobs.

    """

    registry: JobRegistry
    store: ClassificationStore
    aggregator: ReportAggregator
    renderer: SpreadsheetRenderer


def _process_gathered[T](gathered: list[T | BaseException]) -> list[T]:
    """Return member outcomes, re-raising anything that escaped isolation."""
    results: list[T] = []
    for result in gathered:
        if isinstance(result, BaseException):
            raise result
        results.append(result)
    return results


class BatchReportService:
    """Expand batch-level requests over their member crawl jobs."""

    def __init__(
        self,
        dependencies: BatchReportServiceDependencies,
        config: ReportingConfig | None = None,
        event_logger: ReportingEventLogger | None = None,
    ) -> None:
        """Configure the service with dependencies.

        Parameters
        ----------
        dependencies
            Registry, store, aggregator and renderer.
        config
            Optional reporting configuration; uses defaults if not provided.
        event_logger
            Optional structured event logger.

        """
        self._registry = dependencies.registry
        self._store = dependencies.store
        self._aggregator = dependencies.aggregator
        self._renderer = dependencies.renderer
        self._config = config or ReportingConfig()
        self._event_logger = event_logger

    async def _fan_out[T](
        self,
        job_ids: tuple[str, ...],
        member: cabc.Callable[[str], cabc.Awaitable[T]],
    ) -> list[T]:
        semaphore = asyncio.Semaphore(self._config.batch_concurrency)

        async def bounded(job_id: str) -> T:
            async with semaphore:
                return await member(job_id)

        gathered = await asyncio.gather(
            *(bounded(job_id) for job_id in job_ids), return_exceptions=True
        )
        return _process_gathered(gathered)

    def _log_batch(
        self,
        batch_id: str,
        operation: str,
        outcomes: cabc.Sequence[MemberReport | MemberDocumentList],
    ) -> None:
        if self._event_logger is None:
            return
        self._event_logger.log_batch_completed(
            batch_id=batch_id,
            operation=operation,
            members=len(outcomes),
            failures=sum(1 for outcome in outcomes if not outcome.ok),
        )

    async def build_batch_report(self, batch_id: str) -> list[MemberReport]:
        """Build one report per batch member, in member order.

        Raises
        ------
        BatchJobNotFoundError
            If the batch is unknown.
        UpstreamUnavailableError
            If the batch itself cannot be loaded.

        """
        batch = await self._registry.get_batch_job(batch_id)
        query = ReportQuery.create(batch.crawl_since)

        async def member(job_id: str) -> MemberReport:
            try:
                report = await self._aggregator.build_report(job_id, query)
            except ReportingError as exc:
                return MemberReport(job_id=job_id, error=exc)
            return MemberReport(job_id=job_id, report=report)

        outcomes = await self._fan_out(batch.crawl_job_ids, member)
        self._log_batch(batch_id, "report", outcomes)
        return outcomes

    async def list_documents(
        self, job_id: str, category: ListCategory, query: ReportQuery
    ) -> list[str]:
        """Return the URLs of one category for one job under ``query``."""
        match category:
            case ListCategory.OFFICE:
                return await self._store.get_office_files(job_id, query)
            case ListCategory.INVALID_PDF:
                return await self._store.get_invalid_pdf_files(job_id, query)
            case ListCategory.OOXML:
                return await self._store.get_ooxml_files(job_id, query)

    async def build_document_lists(
        self, batch_id: str, category: ListCategory
    ) -> list[MemberDocumentList]:
        """Pair each member's crawled site with its documents of ``category``.

        Raises
        ------
        BatchJobNotFoundError
            If the batch is unknown.

        """
        batch = await self._registry.get_batch_job(batch_id)
        query = ReportQuery.create(batch.crawl_since)

        async def member(job_id: str) -> MemberDocumentList:
            try:
                source_url = await self._registry.get_crawl_url(job_id)
                urls = await self.list_documents(job_id, category, query)
            except ReportingError as exc:
                return MemberDocumentList(job_id=job_id, error=exc)
            return MemberDocumentList(
                job_id=job_id,
                documents=DocumentList(source_url=source_url, document_urls=urls),
            )

        outcomes = await self._fan_out(batch.crawl_job_ids, member)
        self._log_batch(batch_id, f"{category.value}_list", outcomes)
        return outcomes

    async def render_spreadsheet(self, batch_id: str, job_id: str) -> Path:
        """Render the spreadsheet report of one batch member.

        The report and the three listings are all fetched under one query
        built from the batch's cutoff.

        Raises
        ------
        BatchJobNotFoundError
            If the batch is unknown.
        CrawlJobNotInBatchError
            If ``job_id`` is not a member of the batch.
        ReportingError
            Any failure from building the report or rendering it.

        """
        batch = await self._registry.get_batch_job(batch_id)
        if job_id not in batch.crawl_job_ids:
            raise CrawlJobNotInBatchError(batch_id, job_id)
        query = ReportQuery.create(batch.crawl_since)

        report = await self._aggregator.build_report(job_id, query)
        documents = ReportDocuments(
            office=await self.list_documents(job_id, ListCategory.OFFICE, query),
            invalid_pdf=await self.list_documents(
                job_id, ListCategory.INVALID_PDF, query
            ),
            ooxml=await self.list_documents(job_id, ListCategory.OOXML, query),
        )
        return await self._renderer.render(report, documents, cutoff=query.cutoff)
