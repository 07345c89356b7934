"""Factory for building the batch report service from environment configuration.

This module provides ``build_batch_service()`` which assembles the job
registry, classification store, crawl engine client, aggregator and
spreadsheet renderer from a pre-existing session factory and environment
variables.

Usage
-----
Build the service for the API layer::

    from crawlreport.api.factory import build_batch_service

    service, engine_client = build_batch_service(session_factory)

"""

from __future__ import annotations

import typing as typ

from crawlreport.documents import SqlClassificationStore
from crawlreport.engine import CrawlEngineConfig, HeritrixClient
from crawlreport.registry import SqlJobRegistry
from crawlreport.reporting import (
    BatchReportService,
    BatchReportServiceDependencies,
    ReportAggregator,
    ReportAggregatorDependencies,
    ReportingConfig,
    ReportingEventLogger,
    SpreadsheetRenderer,
)

if typ.TYPE_CHECKING:
    from crawlreport.common.db import SessionFactory

__all__ = ["build_batch_service"]


def build_batch_service(
    session_factory: SessionFactory,
) -> tuple[BatchReportService, HeritrixClient]:
    """Build a ``BatchReportService`` from environment configuration.

    Parameters
    ----------
    session_factory
        Async session factory for the job registry and document store.

    Returns
    -------
    tuple[BatchReportService, HeritrixClient]
        The configured service and the crawl engine client it uses. The
        caller owns the client and must close it on shutdown.

    Raises
    ------
    CrawlEngineConfigError
        If the crawl engine settings are missing or invalid.
    ValueError
        If a reporting setting is invalid.

    """
    config = ReportingConfig.from_env()
    event_logger = ReportingEventLogger()

    registry = SqlJobRegistry(session_factory)
    store = SqlClassificationStore(
        session_factory,
        invalid_report_url_template=config.invalid_report_url_template,
    )
    engine_client = HeritrixClient(CrawlEngineConfig.from_env())

    aggregator = ReportAggregator(
        ReportAggregatorDependencies(
            registry=registry, store=store, engine=engine_client
        ),
        event_logger=event_logger,
    )
    renderer = SpreadsheetRenderer(
        config.template_path,
        config.output_dir,
        event_logger=event_logger,
    )
    service = BatchReportService(
        BatchReportServiceDependencies(
            registry=registry,
            store=store,
            aggregator=aggregator,
            renderer=renderer,
        ),
        config=config,
        event_logger=event_logger,
    )
    return service, engine_client
