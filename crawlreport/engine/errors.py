"""Crawl engine client errors."""

from __future__ import annotations

_CONTENT_PREVIEW_LIMIT = 100


class CrawlEngineError(RuntimeError):
    """Base class for crawl engine client errors."""


class CrawlEngineAPIError(CrawlEngineError):
    """Raised when the crawl engine cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, url: str) -> CrawlEngineAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(
            f"Crawl engine HTTP {status_code} for {url}", status_code=status_code
        )

    @classmethod
    def timeout(cls, url: str) -> CrawlEngineAPIError:
        """Return an error for a request that exceeded the configured timeout."""
        return cls(f"Crawl engine request timed out: {url}")

    @classmethod
    def network_error(cls, detail: str) -> CrawlEngineAPIError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"Crawl engine network error: {detail}")


class CrawlEngineResponseShapeError(CrawlEngineError):
    """Raised when an engine response lacks an expected element."""

    @classmethod
    def missing(cls, field: str) -> CrawlEngineResponseShapeError:
        """Return an error for a missing response element."""
        return cls(f"Crawl engine response missing expected element: {field}")

    @classmethod
    def invalid_xml(cls, content: str) -> CrawlEngineResponseShapeError:
        """Return an error for a body that is not well-formed XML."""
        if len(content) > _CONTENT_PREVIEW_LIMIT:
            content = content[:_CONTENT_PREVIEW_LIMIT] + "..."
        return cls(f"Crawl engine returned malformed XML: {content}")

    @classmethod
    def not_an_integer(cls, field: str, value: str) -> CrawlEngineResponseShapeError:
        """Return an error for a numeric element holding something else."""
        return cls(f"Crawl engine element {field} is not an integer: {value!r}")


class CrawlEngineConfigError(CrawlEngineError):
    """Raised when the crawl engine client configuration is invalid."""

    @classmethod
    def missing_url(cls) -> CrawlEngineConfigError:
        """Return an error when no engine URL is configured."""
        return cls("CRAWLREPORT_ENGINE_URL is required for the crawl engine client")

    @classmethod
    def invalid_timeout(cls, raw: str) -> CrawlEngineConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(
            f"CRAWLREPORT_ENGINE_TIMEOUT_S must be a positive number, got: {raw!r}"
        )
