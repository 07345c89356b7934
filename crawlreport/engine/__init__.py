"""Crawl engine client: live status and saved configuration lookups.

Public API
----------
CrawlEngineClient
    Protocol (port) consumed by the report aggregator.
HeritrixClient
    httpx adapter for the Heritrix 3 REST API.
CrawlEngineConfig
    Connection settings, loadable from ``CRAWLREPORT_ENGINE_*`` variables.
"""

from crawlreport.engine.client import HeritrixClient, parse_seed_urls
from crawlreport.engine.config import CrawlEngineConfig
from crawlreport.engine.errors import (
    CrawlEngineAPIError,
    CrawlEngineConfigError,
    CrawlEngineError,
    CrawlEngineResponseShapeError,
)
from crawlreport.engine.protocol import CrawlEngineClient

__all__ = [
    "CrawlEngineAPIError",
    "CrawlEngineClient",
    "CrawlEngineConfig",
    "CrawlEngineConfigError",
    "CrawlEngineError",
    "CrawlEngineResponseShapeError",
    "HeritrixClient",
    "parse_seed_urls",
]
