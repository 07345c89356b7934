"""Error taxonomy surfaced by the reporting core.

Callers distinguish "nothing matched" (an empty result) from "the report
could not be built" (one of these exceptions). The HTTP layer maps each
class to a status code in ``crawlreport.api.errors``.
"""

from __future__ import annotations


class ReportingError(Exception):
    """Base class for errors raised while building or rendering reports."""


class NotFoundError(ReportingError):
    """Raised when a crawl job or batch job identifier is unknown."""


class UpstreamUnavailableError(ReportingError):
    """Raised when the crawl engine or a store cannot answer a query.

    Attributes
    ----------
    upstream
        Which collaborator failed (``"crawl-engine"`` or ``"store"``).

    """

    def __init__(self, message: str, *, upstream: str) -> None:
        """Initialise with a message and the name of the failing collaborator."""
        self.upstream = upstream
        super().__init__(message)

    @classmethod
    def crawl_engine(cls, detail: str) -> UpstreamUnavailableError:
        """Return an error for a failed crawl engine call."""
        return cls(f"Crawl engine unavailable: {detail}", upstream="crawl-engine")

    @classmethod
    def store(cls, operation: str, detail: str) -> UpstreamUnavailableError:
        """Return an error for a failed database read."""
        return cls(f"Store query {operation} failed: {detail}", upstream="store")


class InvalidJobStateError(ReportingError):
    """Raised when a crawl job record cannot be reported on as stored."""

    def __init__(self, job_id: str, reason: str) -> None:
        """Initialise with the job identifier and what is inconsistent."""
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Crawl job {job_id} is in an invalid state: {reason}")


class TemplateUnavailableError(ReportingError):
    """Raised when the spreadsheet template is missing or unreadable."""

    def __init__(self, path: object, reason: str) -> None:
        """Initialise with the template path and failure reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"Spreadsheet template {path} unavailable: {reason}")


class RenderFailedError(ReportingError):
    """Raised when the rendered spreadsheet cannot be written."""

    def __init__(self, job_id: str, reason: str) -> None:
        """Initialise with the job identifier and failure reason."""
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Rendering spreadsheet for job {job_id} failed: {reason}")


__all__ = [
    "InvalidJobStateError",
    "NotFoundError",
    "RenderFailedError",
    "ReportingError",
    "TemplateUnavailableError",
    "UpstreamUnavailableError",
]
