"""CrawlEngineClient protocol consumed by the reporting core."""

from __future__ import annotations

import typing as typ


@typ.runtime_checkable
class CrawlEngineClient(typ.Protocol):
    """Status and configuration lookups against the live crawl engine.

    Implementations raise :class:`crawlreport.engine.errors.CrawlEngineError`
    subclasses on failure and never retry on their own.
    """

    async def get_crawl_urls(self, job_id: str) -> list[str]:
        """Return the seed URLs currently configured for ``job_id``."""
        ...

    async def get_status(self, job_id: str) -> str:
        """Return the engine's raw status string for ``job_id``."""
        ...

    async def get_downloaded_count(self, job_id: str) -> int:
        """Return the number of URIs downloaded so far by ``job_id``."""
        ...

    async def get_config(self, url: str) -> str:
        """Return the saved job configuration stored at ``url``."""
        ...

    def parse_crawl_urls_from_config(self, config: str) -> list[str]:
        """Extract the seed URLs from a job configuration blob."""
        ...
