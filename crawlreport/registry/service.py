"""SQLAlchemy-backed job registry.

Usage
-----
>>> registry = SqlJobRegistry(session_factory)
>>> batch = await registry.get_batch_job("batch-1")
>>> [await registry.get_crawl_url(job_id) for job_id in batch.crawl_job_ids]

"""

from __future__ import annotations

import typing as typ

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from crawlreport.common.db import read_session
from crawlreport.registry.errors import BatchJobNotFoundError, CrawlJobNotFoundError
from crawlreport.registry.models import BatchJob, CrawlJobRecord
from crawlreport.registry.storage import BatchJobRow, CrawlJob

if typ.TYPE_CHECKING:
    from crawlreport.common.db import SessionFactory


def _to_record(row: CrawlJob) -> CrawlJobRecord:
    return CrawlJobRecord(
        id=row.id,
        crawl_url=row.crawl_url,
        job_url=row.job_url,
        start_time=row.start_time,
        finish_time=row.finish_time,
        status=row.status,
    )


class SqlJobRegistry:
    """Job registry reading the ``crawl_jobs`` and ``batch_jobs`` tables.

    Parameters
    ----------
    session_factory:
        Async session factory for the registry database.

    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """Configure the registry with a session factory."""
        self._session_factory = session_factory

    async def get_crawl_job(self, job_id: str) -> CrawlJobRecord:
        """Return the crawl job record for ``job_id``."""
        async with read_session(self._session_factory, "get_crawl_job") as session:
            row = await session.get(CrawlJob, job_id)
            if row is None:
                raise CrawlJobNotFoundError(job_id)
            return _to_record(row)

    async def get_batch_job(self, batch_id: str) -> BatchJob:
        """Return the batch job with its members in position order."""
        async with read_session(self._session_factory, "get_batch_job") as session:
            row = await session.scalar(
                select(BatchJobRow)
                .where(BatchJobRow.id == batch_id)
                .options(selectinload(BatchJobRow.members))
            )
            if row is None:
                raise BatchJobNotFoundError(batch_id)
            return BatchJob(
                id=row.id,
                crawl_job_ids=tuple(member.crawl_job_id for member in row.members),
                crawl_since=row.crawl_since,
                finished=row.is_finished,
            )

    async def get_crawl_url(self, job_id: str) -> str:
        """Return the crawled site URL for ``job_id``."""
        async with read_session(self._session_factory, "get_crawl_url") as session:
            crawl_url: str | None = await session.scalar(
                select(CrawlJob.crawl_url).where(CrawlJob.id == job_id)
            )
        if crawl_url is None:
            raise CrawlJobNotFoundError(job_id)
        return crawl_url
