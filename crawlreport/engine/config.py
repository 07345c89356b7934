"""Configuration for the crawl engine HTTP client.

Usage
-----
>>> import os
>>> os.environ["CRAWLREPORT_ENGINE_URL"] = "https://heritrix.internal:8443"
>>> CrawlEngineConfig.from_env().timeout_s
20.0

"""

from __future__ import annotations

import dataclasses as dc
import os

from crawlreport.engine.errors import CrawlEngineConfigError

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dc.dataclass(frozen=True, slots=True)
class CrawlEngineConfig:
    """Connection settings for the crawl engine REST API.

    Attributes
    ----------
    base_url
        Engine root, e.g. ``https://localhost:8443``. Job resources live under
        ``{base_url}/engine/job/{job_id}``.
    username, password
        Digest-auth credentials; authentication is disabled unless both are set.
    timeout_s
        Timeout applied to every request. Requests are never retried.
    verify_tls
        Whether to verify the engine's TLS certificate. Heritrix ships with a
        self-signed certificate, so deployments commonly turn this off.

    """

    base_url: str
    username: str | None = None
    password: str | None = None
    timeout_s: float = 20.0
    verify_tls: bool = True

    @property
    def engine_url(self) -> str:
        """Return the URL of the engine resource."""
        return f"{self.base_url.rstrip('/')}/engine"

    def job_url(self, job_id: str) -> str:
        """Return the URL of the job resource for ``job_id``."""
        return f"{self.engine_url}/job/{job_id}"

    def job_config_url(self, job_id: str) -> str:
        """Return the URL of the live configuration of ``job_id``."""
        return f"{self.job_url(job_id)}/jobdir/crawler-beans.cxml"

    @classmethod
    def from_env(cls) -> CrawlEngineConfig:
        """Build configuration from ``CRAWLREPORT_ENGINE_*`` variables.

        Raises
        ------
        CrawlEngineConfigError
            If ``CRAWLREPORT_ENGINE_URL`` is unset or the timeout is invalid.

        """
        base_url = os.environ.get("CRAWLREPORT_ENGINE_URL", "").strip()
        if not base_url:
            raise CrawlEngineConfigError.missing_url()

        raw_timeout = os.environ.get("CRAWLREPORT_ENGINE_TIMEOUT_S", "").strip()
        timeout_s = 20.0
        if raw_timeout:
            try:
                timeout_s = float(raw_timeout)
            except ValueError as exc:
                raise CrawlEngineConfigError.invalid_timeout(raw_timeout) from exc
            if timeout_s <= 0:
                raise CrawlEngineConfigError.invalid_timeout(raw_timeout)

        verify_raw = os.environ.get("CRAWLREPORT_ENGINE_VERIFY_TLS", "").strip()
        return cls(
            base_url=base_url,
            username=os.environ.get("CRAWLREPORT_ENGINE_USER") or None,
            password=os.environ.get("CRAWLREPORT_ENGINE_PASSWORD") or None,
            timeout_s=timeout_s,
            verify_tls=verify_raw.lower() not in _FALSE_VALUES,
        )
