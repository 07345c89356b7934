"""Errors raised by the job registry."""

from __future__ import annotations

from crawlreport.errors import NotFoundError


class RegistryError(Exception):
    """Base class for registry errors."""


class CrawlJobNotFoundError(RegistryError, NotFoundError):
    """Raised when a crawl job identifier has no registry entry."""

    def __init__(self, job_id: str) -> None:
        """Initialise with the missing crawl job identifier."""
        self.job_id = job_id
        super().__init__(f"Crawl job not found: {job_id}")


class BatchJobNotFoundError(RegistryError, NotFoundError):
    """Raised when a batch job identifier has no registry entry."""

    def __init__(self, batch_id: str) -> None:
        """Initialise with the missing batch job identifier."""
        self.batch_id = batch_id
        super().__init__(f"Batch job not found: {batch_id}")


class CrawlJobNotInBatchError(RegistryError, NotFoundError):
    """Raised when a crawl job exists but is not a member of the batch."""

    def __init__(self, batch_id: str, job_id: str) -> None:
        """Initialise with the batch and crawl job identifiers."""
        self.batch_id = batch_id
        self.job_id = job_id
        super().__init__(f"Crawl job {job_id} is not part of batch job {batch_id}")
