"""Liveness and readiness probe resources.

These resources are stateless and are registered whether or not the
reporting dependencies are configured.

Usage
-----
Register health endpoints on the Falcon app::

    from crawlreport.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe returning ``{"status": "ready"}``.

    ``ready`` is ``False`` when the service runs without report endpoints
    (no database configured); the probe then answers 503 so the instance
    is kept out of rotation.

    """

    def __init__(self, *, ready: bool = True) -> None:
        """Configure whether the instance can serve report requests."""
        self._ready = ready

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests."""
        if self._ready:
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
            return
        resp.media = {"status": "unavailable"}
        resp.status = HTTPStatus.SERVICE_UNAVAILABLE
