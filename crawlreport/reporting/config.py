"""Configuration for report aggregation and spreadsheet rendering.

Usage
-----
Create a configuration with defaults:

>>> config = ReportingConfig()
>>> config.batch_concurrency
4

Or load from environment variables:

>>> import os
>>> os.environ["CRAWLREPORT_OUTPUT_DIR"] = "/var/lib/crawlreport/reports"
>>> ReportingConfig.from_env().output_dir
PosixPath('/var/lib/crawlreport/reports')

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

DEFAULT_TEMPLATE_PATH = Path("templates/sample_report.xlsx")
DEFAULT_OUTPUT_DIR = Path("reports")


@dc.dataclass(frozen=True, slots=True)
class ReportingConfig:
    """Settings for the reporting core.

    Attributes
    ----------
    template_path
        Spreadsheet template read (never written) by each render.
    output_dir
        Directory receiving rendered spreadsheets, one uniquely named file
        per request.
    batch_concurrency
        Maximum number of batch members processed at the same time.
    invalid_report_url_template
        Optional URL template for the fuller invalid-PDF report; ``{job_id}``
        is substituted.

    """

    template_path: Path = DEFAULT_TEMPLATE_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    batch_concurrency: int = 4
    invalid_report_url_template: str | None = None

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ValueError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_path(env_var: str, default: Path) -> Path:
        raw = os.environ.get(env_var, "").strip()
        return Path(raw) if raw else default

    @classmethod
    def from_env(cls) -> ReportingConfig:
        """Create configuration from environment variables.

        Reads ``CRAWLREPORT_TEMPLATE_PATH``, ``CRAWLREPORT_OUTPUT_DIR``,
        ``CRAWLREPORT_BATCH_CONCURRENCY`` (positive integer) and
        ``CRAWLREPORT_INVALID_PDF_REPORT_URL``.

        Raises
        ------
        ValueError
            If CRAWLREPORT_BATCH_CONCURRENCY is not a positive integer.

        """
        url_template = os.environ.get("CRAWLREPORT_INVALID_PDF_REPORT_URL", "").strip()
        return cls(
            template_path=cls._parse_path(
                "CRAWLREPORT_TEMPLATE_PATH", DEFAULT_TEMPLATE_PATH
            ),
            output_dir=cls._parse_path("CRAWLREPORT_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            batch_concurrency=cls._parse_positive_int(
                "CRAWLREPORT_BATCH_CONCURRENCY", 4
            ),
            invalid_report_url_template=url_template or None,
        )
