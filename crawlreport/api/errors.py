"""Falcon error handlers for the reporting error taxonomy.

Each handler translates one family of :mod:`crawlreport.errors` exceptions
into an HTTP status with a ``{"title", "description"}`` JSON body. Falcon
dispatches to the handler registered for the most specific class.

Usage
-----
Register every handler on the Falcon app::

    from crawlreport.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from crawlreport.errors import (
    InvalidJobStateError,
    NotFoundError,
    RenderFailedError,
    ReportingError,
    TemplateUnavailableError,
    UpstreamUnavailableError,
)
from crawlreport.logging import get_logger, log_error, log_exception

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = ["error_media", "error_title", "register_error_handlers"]

logger = get_logger(__name__)

_ERROR_TITLES: tuple[tuple[type[ReportingError], str], ...] = (
    (NotFoundError, "Not found"),
    (UpstreamUnavailableError, "Upstream unavailable"),
    (InvalidJobStateError, "Invalid job state"),
    (TemplateUnavailableError, "Template unavailable"),
    (RenderFailedError, "Render failed"),
)


def error_title(error: ReportingError) -> str:
    """Return the human-readable title for ``error``."""
    for error_type, title in _ERROR_TITLES:
        if isinstance(error, error_type):
            return title
    return "Report failed"


def error_media(error: ReportingError) -> dict[str, str]:
    """Return the JSON body describing ``error``."""
    return {"title": error_title(error), "description": str(error)}


async def handle_not_found(
    _req: Request,
    resp: Response,
    ex: NotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NotFoundError`` to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = error_media(ex)


async def handle_upstream_unavailable(
    _req: Request,
    resp: Response,
    ex: UpstreamUnavailableError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``UpstreamUnavailableError`` to an HTTP 503 JSON response."""
    log_error(logger, "Upstream %s unavailable: %s", ex.upstream, ex)
    resp.status = falcon.HTTP_503
    resp.media = error_media(ex)


async def handle_invalid_job_state(
    _req: Request,
    resp: Response,
    ex: InvalidJobStateError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidJobStateError`` to an HTTP 409 JSON response."""
    resp.status = falcon.HTTP_409
    resp.media = error_media(ex)


async def handle_render_error(
    _req: Request,
    resp: Response,
    ex: TemplateUnavailableError | RenderFailedError,
    _params: dict[str, typ.Any],
) -> None:
    """Map spreadsheet failures to an HTTP 500 JSON response."""
    log_exception(logger, ex, "Spreadsheet rendering failed: %s", ex)
    resp.status = falcon.HTTP_500
    resp.media = error_media(ex)


def register_error_handlers(app: App) -> None:
    """Register the reporting error handlers on ``app``."""
    app.add_error_handler(NotFoundError, handle_not_found)
    app.add_error_handler(UpstreamUnavailableError, handle_upstream_unavailable)
    app.add_error_handler(InvalidJobStateError, handle_invalid_job_state)
    app.add_error_handler(TemplateUnavailableError, handle_render_error)
    app.add_error_handler(RenderFailedError, handle_render_error)
