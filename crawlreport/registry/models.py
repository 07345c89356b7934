"""Data transfer objects for the job registry."""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003


@dataclasses.dataclass(slots=True, frozen=True)
class LiveJob:
    """Job still attached to the crawl engine; status is read live."""

    job_id: str


@dataclasses.dataclass(slots=True, frozen=True)
class ArchivedJob:
    """Finished job whose entry URL comes from its saved configuration."""

    job_id: str
    config_url: str


type JobSource = LiveJob | ArchivedJob


@dataclasses.dataclass(slots=True, frozen=True)
class CrawlJobRecord:
    """Registry view of one crawl job.

    ``job_url`` keeps the stored value verbatim; use :attr:`source` to decide
    between the live and archived representations.
    """

    id: str
    crawl_url: str
    job_url: str
    start_time: dt.datetime
    finish_time: dt.datetime | None = None
    status: str | None = None

    @property
    def source(self) -> JobSource:
        """Return where the job's entry URL and status must be resolved."""
        if self.job_url == "":
            return LiveJob(self.id)
        return ArchivedJob(self.id, self.job_url)

    @property
    def is_running(self) -> bool:
        """Return True when no finish time has been recorded."""
        return self.finish_time is None


@dataclasses.dataclass(slots=True, frozen=True)
class BatchJob:
    """Batch of crawl jobs reported together under one cutoff."""

    id: str
    crawl_job_ids: tuple[str, ...]
    crawl_since: dt.datetime | None = None
    finished: bool = False
