"""Behavioural coverage for batch reports served over HTTP.

Usage
-----
Run with pytest::

    pytest tests/features/steps/test_batch_report_steps.py

The steps seed a SQLite database, serve crawl engine answers from an
``httpx.MockTransport`` and render spreadsheets from the default template.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import io
import typing as typ

import falcon.testing
import httpx
import pytest
from openpyxl import load_workbook
from pytest_bdd import given, parsers, scenario, then, when
from sqlalchemy.ext.asyncio import async_sessionmaker

from crawlreport.api.app import AppDependencies, create_app
from crawlreport.documents import (
    DocumentCategory,
    DocumentRecord,
    SqlClassificationStore,
)
from crawlreport.engine import CrawlEngineConfig, HeritrixClient
from crawlreport.registry import BatchJobMember, BatchJobRow, CrawlJob, SqlJobRegistry
from crawlreport.reporting import (
    BatchReportService,
    BatchReportServiceDependencies,
    ReportAggregator,
    ReportAggregatorDependencies,
    SpreadsheetRenderer,
    write_default_template,
)
from tests.helpers.database import create_sqlite_engine
from tests.helpers.fakes import beans_config

if typ.TYPE_CHECKING:
    from pathlib import Path

    from falcon.testing.client import Result
    from sqlalchemy.ext.asyncio import AsyncSession

ENGINE_URL = "https://heritrix.test:8443"
ARCHIVE_URL = "http://archive.example.org/J2/crawler-beans.cxml"
STARTED = dt.datetime(2023, 1, 5, 7, 8, 9, tzinfo=dt.UTC)
DISCOVERED = dt.datetime(2023, 1, 5, 9, 0, tzinfo=dt.UTC)

RUNNING_JOB = """<job>
  <crawlControllerState>RUNNING</crawlControllerState>
  <uriTotalsReport><downloadedUriCount>42</downloadedUriCount></uriTotalsReport>
</job>"""


class BatchContext(typ.TypedDict, total=False):
    """Mutable context shared between steps."""

    session_factory: async_sessionmaker[AsyncSession]
    client: falcon.testing.TestClient
    response: Result


@scenario("../batch_report.feature", "Report every member of a batch")
def test_report_every_member() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../batch_report.feature", "A broken member does not hide the others")
def test_broken_member_is_isolated() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../batch_report.feature", "List Office documents per member")
def test_list_office_documents() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../batch_report.feature", "Download the spreadsheet of one member")
def test_download_spreadsheet() -> None:
    """Wrapper for pytest-bdd scenario."""


@scenario("../batch_report.feature", "Unknown batch")
def test_unknown_batch() -> None:
    """Wrapper for pytest-bdd scenario."""


def _engine_responses(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url == f"{ENGINE_URL}/engine/job/J1":
        return httpx.Response(200, text=RUNNING_JOB)
    if url == f"{ENGINE_URL}/engine/job/J1/jobdir/crawler-beans.cxml":
        return httpx.Response(200, text=beans_config("http://one.example.org/"))
    if url == ARCHIVE_URL:
        return httpx.Response(200, text=beans_config("http://two.example.org/"))
    return httpx.Response(404)


def _office(job_id: str, url: str) -> DocumentRecord:
    return DocumentRecord(
        job_id=job_id,
        url=url,
        category=DocumentCategory.OFFICE.value,
        discovered_at=DISCOVERED,
    )


async def _seed(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session, session.begin():
        session.add_all(
            [
                CrawlJob(
                    id="J1",
                    crawl_url="http://one.example.org/",
                    job_url="",
                    status="RUNNING",
                    start_time=STARTED,
                ),
                CrawlJob(
                    id="J2",
                    crawl_url="http://two.example.org/",
                    job_url=ARCHIVE_URL,
                    start_time=STARTED,
                    finish_time=STARTED + dt.timedelta(hours=6),
                ),
                BatchJobRow(
                    id="weekly",
                    members=[
                        BatchJobMember(crawl_job_id="J1", position=0),
                        BatchJobMember(crawl_job_id="J2", position=1),
                    ],
                ),
                _office("J1", "http://one.example.org/a.doc"),
                _office("J1", "http://one.example.org/b.xls"),
            ]
        )


def _build_client(
    session_factory: async_sessionmaker[AsyncSession], tmp_path: Path
) -> falcon.testing.TestClient:
    registry = SqlJobRegistry(session_factory)
    store = SqlClassificationStore(session_factory)
    engine_client = HeritrixClient(
        CrawlEngineConfig(base_url=ENGINE_URL),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_engine_responses)),
    )
    template = write_default_template(tmp_path / "template.xlsx")
    service = BatchReportService(
        BatchReportServiceDependencies(
            registry=registry,
            store=store,
            aggregator=ReportAggregator(
                ReportAggregatorDependencies(
                    registry=registry, store=store, engine=engine_client
                )
            ),
            renderer=SpreadsheetRenderer(template, tmp_path / "reports"),
        )
    )
    return falcon.testing.TestClient(create_app(AppDependencies(batch_service=service)))


@pytest.fixture
def sqlite_factory(tmp_path: Path) -> typ.Iterator[async_sessionmaker[AsyncSession]]:
    """Provide a seeded-on-demand SQLite session factory usable from sync steps."""
    engine = asyncio.run(create_sqlite_engine(tmp_path / "bdd.db"))
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        asyncio.run(engine.dispose())


@given(
    parsers.parse(
        'a batch "{batch_id}" with a running job "{live_id}" and an archived job '
        '"{archived_id}"'
    ),
    target_fixture="batch_context",
)
def given_batch(
    sqlite_factory: async_sessionmaker[AsyncSession],
    tmp_path: Path,
    batch_id: str,
    live_id: str,
    archived_id: str,
) -> BatchContext:
    """Seed the registry, documents and engine answers for the batch."""
    assert (batch_id, live_id, archived_id) == ("weekly", "J1", "J2")
    asyncio.run(_seed(sqlite_factory))
    return {
        "session_factory": sqlite_factory,
        "client": _build_client(sqlite_factory, tmp_path),
    }


@given(parsers.parse('job "{job_id}" without a status is added to batch "{batch_id}"'))
def given_broken_member(
    batch_context: BatchContext, job_id: str, batch_id: str
) -> None:
    """Append a job that has neither a status nor a finish time."""
    session_factory = batch_context["session_factory"]

    async def _add() -> None:
        async with session_factory() as session, session.begin():
            session.add(
                CrawlJob(
                    id=job_id,
                    crawl_url="http://three.example.org/",
                    job_url="",
                    status=None,
                    start_time=STARTED,
                )
            )
            session.add(
                BatchJobMember(batch_id=batch_id, crawl_job_id=job_id, position=2)
            )

    asyncio.run(_add())


@when(parsers.parse('the batch report for "{batch_id}" is requested'))
def when_batch_report(batch_context: BatchContext, batch_id: str) -> None:
    """Request the JSON batch report."""
    batch_context["response"] = batch_context["client"].simulate_get(
        f"/report/{batch_id}"
    )


@when(parsers.parse('the office listing for "{batch_id}" is requested'))
def when_office_listing(batch_context: BatchContext, batch_id: str) -> None:
    """Request the Office document listing."""
    batch_context["response"] = batch_context["client"].simulate_get(
        f"/report/office_list/{batch_id}"
    )


@when(
    parsers.parse(
        'the spreadsheet for job "{job_id}" of batch "{batch_id}" is requested'
    )
)
def when_spreadsheet(batch_context: BatchContext, job_id: str, batch_id: str) -> None:
    """Request the spreadsheet download."""
    batch_context["response"] = batch_context["client"].simulate_get(
        f"/report/ods_report/{batch_id}/{job_id}"
    )


@then(parsers.parse("the response status is {status:d}"))
def then_status(batch_context: BatchContext, status: int) -> None:
    """Assert the HTTP status code."""
    response = batch_context["response"]
    assert response.status_code == status, response.text


@then(parsers.parse('the report lists jobs "{job_ids}" in order'))
def then_job_order(batch_context: BatchContext, job_ids: str) -> None:
    """Assert member order."""
    expected = [job_id.strip() for job_id in job_ids.split(",")]
    assert [entry["id"] for entry in batch_context["response"].json] == expected


@then(
    parsers.parse(
        'job "{job_id}" is reported as "{status}" with {downloaded:d} downloads'
    )
)
def then_job_status(
    batch_context: BatchContext, job_id: str, status: str, downloaded: int
) -> None:
    """Assert one member's status and downloaded count."""
    entry = next(e for e in batch_context["response"].json if e["id"] == job_id)
    assert entry["status"] == status
    assert entry["downloaded_count"] == downloaded


@then(parsers.parse('member {position:d} carries the error "{title}"'))
def then_member_error(batch_context: BatchContext, position: int, title: str) -> None:
    """Assert that a member is returned as an error element."""
    entry = batch_context["response"].json[position - 1]
    assert entry["error"]["title"] == title


@then(
    parsers.parse('the listing for "{source_url}" contains {count:d} documents')
)
def then_listing_count(
    batch_context: BatchContext, source_url: str, count: int
) -> None:
    """Assert the number of documents listed for one crawled site."""
    listing = next(
        e for e in batch_context["response"].json if e["source_url"] == source_url
    )
    assert len(listing["document_urls"]) == count


@then(parsers.parse("the spreadsheet summary shows {count:d} Office documents"))
def then_spreadsheet_office_count(batch_context: BatchContext, count: int) -> None:
    """Assert the Office count cell of the downloaded spreadsheet."""
    workbook = load_workbook(io.BytesIO(batch_context["response"].content))
    try:
        assert workbook.worksheets[0]["B6"].value == count
    finally:
        workbook.close()
