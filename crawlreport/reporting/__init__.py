"""Report aggregation and spreadsheet rendering for crawl jobs.

Public API
----------
ReportAggregator
    Builds a ``JobReport`` for one crawl job on the live or archived branch.
BatchReportService
    Expands batch requests over member jobs with per-member error isolation.
SpreadsheetRenderer
    Projects a ``JobReport`` onto the fixed-layout spreadsheet template.
ReportingConfig
    Template, output and concurrency settings.
JobReport, MemberReport, MemberDocumentList, ReportDocuments
    Report values and batch outcomes.

Example:
Build the reports of a batch:

>>> aggregator = ReportAggregator(
...     ReportAggregatorDependencies(registry=registry, store=store, engine=engine)
... )
>>> service = BatchReportService(
...     BatchReportServiceDependencies(
...         registry=registry,
...         store=store,
...         aggregator=aggregator,
...         renderer=SpreadsheetRenderer(template_path, output_dir),
...     )
... )
>>> outcomes = await service.build_batch_report("batch-1")

"""

from crawlreport.reporting.aggregator import (
    ReportAggregator,
    ReportAggregatorDependencies,
)
from crawlreport.reporting.batch import (
    BatchReportService,
    BatchReportServiceDependencies,
)
from crawlreport.reporting.config import ReportingConfig
from crawlreport.reporting.models import (
    FINISHED_STATUS,
    JobReport,
    MemberDocumentList,
    MemberReport,
    ReportDocuments,
)
from crawlreport.reporting.observability import ReportingEventLogger
from crawlreport.reporting.spreadsheet import SpreadsheetRenderer
from crawlreport.reporting.template import write_default_template

__all__ = [
    "FINISHED_STATUS",
    "BatchReportService",
    "BatchReportServiceDependencies",
    "JobReport",
    "MemberDocumentList",
    "MemberReport",
    "ReportAggregator",
    "ReportAggregatorDependencies",
    "ReportDocuments",
    "ReportingConfig",
    "ReportingEventLogger",
    "SpreadsheetRenderer",
    "write_default_template",
]
