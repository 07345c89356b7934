"""Classified documents discovered by crawl jobs.

Public API
----------
ClassificationStore
    Protocol (port) for per-job category counts and URL listings.
SqlClassificationStore
    SQLAlchemy adapter reading the ``documents`` table.
ReportQuery
    Time bounds shared by all queries of one report request.
ValidationStatistics, DocumentList
    Query results.
"""

from crawlreport.documents.models import (
    DocumentCategory,
    DocumentList,
    ListCategory,
    ReportQuery,
    ValidationStatistics,
)
from crawlreport.documents.protocol import ClassificationStore
from crawlreport.documents.service import SqlClassificationStore
from crawlreport.documents.storage import DocumentRecord

__all__ = [
    "ClassificationStore",
    "DocumentCategory",
    "DocumentList",
    "DocumentRecord",
    "ListCategory",
    "ReportQuery",
    "SqlClassificationStore",
    "ValidationStatistics",
]
