"""JobRegistry protocol consumed by the reporting core."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from crawlreport.registry.models import BatchJob, CrawlJobRecord


@typ.runtime_checkable
class JobRegistry(typ.Protocol):
    """Read-only access to crawl job and batch job records."""

    async def get_crawl_job(self, job_id: str) -> CrawlJobRecord:
        """Return the record for ``job_id``.

        Raises
        ------
        CrawlJobNotFoundError
            If the identifier is unknown.

        """
        ...

    async def get_batch_job(self, batch_id: str) -> BatchJob:
        """Return the batch with its members in declared order.

        Raises
        ------
        BatchJobNotFoundError
            If the identifier is unknown.

        """
        ...

    async def get_crawl_url(self, job_id: str) -> str:
        """Return the site URL crawled by ``job_id``."""
        ...
