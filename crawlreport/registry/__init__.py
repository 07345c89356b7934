"""Job registry: crawl job records and the batches that group them.

The registry is read-only from the reporting side. Records are written by
the crawl lifecycle; ``init_registry_storage`` only exists so tests and local
runs can create the tables.

Usage
-----
::

    from crawlreport.registry import SqlJobRegistry

    registry = SqlJobRegistry(session_factory)
    record = await registry.get_crawl_job("job-1")
    match record.source:
        case LiveJob():
            ...
        case ArchivedJob(config_url=url):
            ...

"""

from crawlreport.registry.errors import (
    BatchJobNotFoundError,
    CrawlJobNotFoundError,
    CrawlJobNotInBatchError,
    RegistryError,
)
from crawlreport.registry.models import (
    ArchivedJob,
    BatchJob,
    CrawlJobRecord,
    JobSource,
    LiveJob,
)
from crawlreport.registry.protocol import JobRegistry
from crawlreport.registry.service import SqlJobRegistry
from crawlreport.registry.storage import (
    BatchJobMember,
    BatchJobRow,
    CrawlJob,
    init_registry_storage,
)

__all__ = [
    "ArchivedJob",
    "BatchJob",
    "BatchJobMember",
    "BatchJobNotFoundError",
    "BatchJobRow",
    "CrawlJob",
    "CrawlJobNotFoundError",
    "CrawlJobNotInBatchError",
    "CrawlJobRecord",
    "JobRegistry",
    "JobSource",
    "LiveJob",
    "RegistryError",
    "SqlJobRegistry",
    "init_registry_storage",
]
