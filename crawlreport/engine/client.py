"""Heritrix 3 REST client implementing ``CrawlEngineClient``.

The engine exposes each job at ``/engine/job/{job_id}`` as an XML status
document and its Spring configuration at
``/engine/job/{job_id}/jobdir/crawler-beans.cxml``. Seed URLs are the lines
of the ``seeds.textSource.value`` property in that configuration.
"""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as ET

import httpx

from crawlreport.engine.errors import (
    CrawlEngineAPIError,
    CrawlEngineResponseShapeError,
)

if typ.TYPE_CHECKING:
    from crawlreport.engine.config import CrawlEngineConfig

_HTTP_ERROR_STATUS_THRESHOLD = 400
_SEEDS_PROPERTY = "seeds.textSource.value"


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _parse_xml(content: str) -> ET.Element:
    try:
        return ET.fromstring(content)  # noqa: S314 - trusted internal engine
    except ET.ParseError as exc:
        raise CrawlEngineResponseShapeError.invalid_xml(content) from exc


def _find_text(root: ET.Element, *path: str) -> str | None:
    """Return the text of the first element matching ``path`` by local name."""
    current: ET.Element | None = root
    for name in path:
        if current is None:
            return None
        current = next(
            (child for child in current if _local_name(child.tag) == name), None
        )
    if current is None or current.text is None:
        return None
    return current.text


def parse_seed_urls(config: str) -> list[str]:
    """Return the seed URLs declared in a crawler-beans configuration.

    Blank lines and ``#`` comments inside the seeds property are skipped.

    Raises
    ------
    CrawlEngineResponseShapeError
        If the configuration is not XML or declares no seeds property.

    """
    root = _parse_xml(config)
    for element in root.iter():
        if _local_name(element.tag) == "prop" and element.get("key") == _SEEDS_PROPERTY:
            lines = (line.strip() for line in (element.text or "").splitlines())
            return [line for line in lines if line and not line.startswith("#")]
    raise CrawlEngineResponseShapeError.missing(_SEEDS_PROPERTY)


class HeritrixClient:
    """Async client for the Heritrix engine REST API.

    Parameters
    ----------
    config
        Engine location, credentials and timeout.
    http_client
        Optional ``httpx.AsyncClient`` for testing. If not provided, the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: CrawlEngineConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        self._config = config
        self._owns_client = http_client is None
        auth: httpx.Auth | None = None
        if config.username and config.password:
            auth = httpx.DigestAuth(config.username, config.password)
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            verify=config.verify_tls,
            auth=auth,
            headers={"Accept": "application/xml"},
        )

    @property
    def config(self) -> CrawlEngineConfig:
        """Return the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def _get_text(self, url: str) -> str:
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            raise CrawlEngineAPIError.timeout(url) from exc
        except httpx.TransportError as exc:
            raise CrawlEngineAPIError.network_error(str(exc)) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise CrawlEngineAPIError.http_error(response.status_code, url)
        return response.text

    async def _get_job_document(self, job_id: str) -> ET.Element:
        return _parse_xml(await self._get_text(self._config.job_url(job_id)))

    async def get_crawl_urls(self, job_id: str) -> list[str]:
        """Return the seed URLs of the live job configuration."""
        config = await self.get_config(self._config.job_config_url(job_id))
        return self.parse_crawl_urls_from_config(config)

    async def get_status(self, job_id: str) -> str:
        """Return the crawl controller state, or the status description.

        Raises
        ------
        CrawlEngineResponseShapeError
            If the job document carries neither element.

        """
        root = await self._get_job_document(job_id)
        status = _find_text(root, "crawlControllerState")
        if status is None or not status.strip():
            status = _find_text(root, "statusDescription")
        if status is None:
            raise CrawlEngineResponseShapeError.missing("crawlControllerState")
        return status

    async def get_downloaded_count(self, job_id: str) -> int:
        """Return ``uriTotalsReport/downloadedUriCount``.

        Jobs that have not been launched carry no totals report; they have
        downloaded nothing.
        """
        root = await self._get_job_document(job_id)
        raw = _find_text(root, "uriTotalsReport", "downloadedUriCount")
        if raw is None:
            return 0
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise CrawlEngineResponseShapeError.not_an_integer(
                "downloadedUriCount", raw
            ) from exc

    async def get_config(self, url: str) -> str:
        """Fetch the configuration document stored at ``url``."""
        return await self._get_text(url)

    def parse_crawl_urls_from_config(self, config: str) -> list[str]:
        """Extract seed URLs from a crawler-beans configuration."""
        return parse_seed_urls(config)
