"""Lifespan middleware closing long-lived clients on shutdown.

The crawl engine client owns an ``httpx.AsyncClient`` whose connection pool
outlives individual requests. Falcon calls ``process_shutdown`` once when the
ASGI server stops, which is where the pool is released.

Usage
-----
Register the middleware when creating the Falcon app::

    from crawlreport.api.middleware import ClientLifespanManager

    app = falcon.asgi.App(middleware=[ClientLifespanManager((engine_client,))])

"""

from __future__ import annotations

import typing as typ

from crawlreport.logging import get_logger, log_exception, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = ["ClientLifespanManager", "SupportsAclose"]

logger = get_logger(__name__)


class SupportsAclose(typ.Protocol):
    """Any resource released with ``await resource.aclose()``."""

    async def aclose(self) -> None:
        """Release the resource."""
        ...


class ClientLifespanManager:
    """Falcon middleware closing registered clients when the app shuts down.

    Parameters
    ----------
    clients
        Resources to close, in order. A failure to close one is logged and
        does not prevent the others from closing.

    """

    def __init__(self, clients: cabc.Sequence[SupportsAclose]) -> None:
        """Initialize the middleware with the clients it owns."""
        self._clients = tuple(clients)

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close every registered client."""
        failures: list[Exception] = []
        for client in self._clients:
            try:
                await client.aclose()
            except Exception as exc:  # noqa: BLE001 - close the remaining clients first
                log_exception(
                    logger,
                    exc,
                    "Failed to close %s during shutdown",
                    type(client).__name__,
                )
                failures.append(exc)
        if failures:
            msg = "one or more clients failed to close"
            raise ExceptionGroup(msg, failures)
        log_info(logger, "Closed %d client(s) on shutdown", len(self._clients))
