"""Application factory for the crawlreport Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when a batch report service is
supplied, the report endpoints.

Usage
-----
Create a health-only app (no database)::

    app = create_app()

Create a full app with report endpoints::

    from crawlreport.api.app import AppDependencies, create_app

    deps = AppDependencies(batch_service=service, clients=(engine_client,))
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from crawlreport.api.errors import register_error_handlers
from crawlreport.api.health.resources import HealthResource, ReadyResource
from crawlreport.api.middleware import ClientLifespanManager
from crawlreport.documents.models import ListCategory

if typ.TYPE_CHECKING:
    from crawlreport.api.middleware import SupportsAclose
    from crawlreport.reporting.batch import BatchReportService

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    batch_service
        Batch report service backing the report endpoints. When ``None``
        only the health endpoints are registered.
    clients
        Long-lived clients closed when the application shuts down.

    """

    batch_service: BatchReportService | None = None
    clients: tuple[SupportsAclose, ...] = ()


def _add_report_routes(app: falcon.asgi.App, service: BatchReportService) -> None:
    from crawlreport.api.reports.resources import (
        BatchReportResource,
        DocumentListResource,
        SpreadsheetReportResource,
    )

    # Literal segments win over the {batch_id} field in Falcon's router.
    for category in ListCategory:
        app.add_route(
            f"/report/{category.value}_list/{{batch_id}}",
            DocumentListResource(service, category),
        )
    app.add_route(
        "/report/ods_report/{batch_id}/{crawl_job_id}",
        SpreadsheetReportResource(service),
    )
    app.add_route("/report/{batch_id}", BatchReportResource(service))


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a
        batch service, only ``/health`` and ``/ready`` are available and
        ``/ready`` answers 503.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []
    if deps.clients:
        middleware.append(ClientLifespanManager(deps.clients))

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(ready=deps.batch_service is not None))

    if deps.batch_service is not None:
        _add_report_routes(app, deps.batch_service)

    register_error_handlers(app)
    return app
