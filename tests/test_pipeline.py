"""Tests for the bounded detail-fetch pipeline shared by both clients."""

import asyncio
import logging

import pytest

from yuque_sdk.clients.base import BaseYuqueClient
from yuque_sdk.config import ClientConfig
from yuque_sdk.errors import FatalError
from yuque_sdk.models import DocumentDetail, DocumentSummary

pytestmark = pytest.mark.asyncio


class StubClient(BaseYuqueClient):
    """Serves canned details and records how many fetches overlap."""

    def __init__(self, limit: int = 3, formats: dict[str, str] | None = None, fail: str | None = None):
        super().__init__(ClientConfig(login="u", repo="r", limit=limit))
        self.formats = formats or {}
        self.fail = fail
        self.in_flight = 0
        self.max_in_flight = 0
        self.fetched: list[str] = []

    async def get_doc_list(self) -> list[DocumentSummary]:
        return []

    async def get_doc_detail(self, slug: str) -> DocumentDetail:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
            if slug == self.fail:
                raise FatalError(f"cannot fetch {slug}")
            self.fetched.append(slug)
            return DocumentDetail(
                doc_id=slug,
                slug=slug,
                title=slug.upper(),
                format=self.formats.get(slug, "markdown"),
                body=f"body of {slug}",
                updated_at="2024-01-01T00:00:00.000Z",
            )
        finally:
            self.in_flight -= 1

    def prepare_body(self, article: DocumentDetail, body: str) -> str:
        return body.upper()


def _summaries(*slugs: str, fmt: str | None = "markdown") -> list[DocumentSummary]:
    return [DocumentSummary(slug=s, title=s, format=fmt) for s in slugs]


async def test_fetches_only_selected_ids():
    client = StubClient()

    articles = await client.get_doc_detail_list(_summaries("a", "b", "c"), ids=["a", "c", "zzz"])

    assert sorted(a.doc_id for a in articles) == ["a", "c"]
    assert sorted(client.fetched) == ["a", "c"]


async def test_empty_ids_fetches_everything():
    client = StubClient()

    articles = await client.get_doc_detail_list(_summaries("a", "b", "c", "d"))

    assert sorted(a.doc_id for a in articles) == ["a", "b", "c", "d"]


async def test_empty_selection_returns_immediately():
    client = StubClient()
    called = []

    articles = await client.get_doc_detail_list(
        _summaries("a"), ids=["nope"], on_doc_downloaded=lambda *args: called.append(args)
    )

    assert articles == []
    assert client.fetched == []
    assert called == []


async def test_articles_are_normalized():
    client = StubClient()

    [article] = await client.get_doc_detail_list(_summaries("a"))

    assert article.body == "BODY OF A"
    assert article.properties["title"] == "A"
    assert article.properties["urlname"] == "a"
    assert article.updated == 1704067200000


async def test_concurrency_is_bounded_by_limit():
    client = StubClient(limit=2)

    articles = await client.get_doc_detail_list(_summaries(*[f"d{i}" for i in range(7)]))

    assert len(articles) == 7
    assert client.max_in_flight == 2


async def test_callback_receives_progress():
    client = StubClient()
    progress: list[tuple[int, int]] = []

    async def on_doc(doc, completed, total):
        progress.append((completed, total))

    await client.get_doc_detail_list(_summaries("a", "b", "c"), on_doc_downloaded=on_doc)

    assert sorted(progress) == [(1, 3), (2, 3), (3, 3)]


async def test_callback_failure_does_not_stop_pipeline(caplog):
    client = StubClient()

    def on_doc(doc, completed, total):
        if doc.doc_id == "b":
            raise RuntimeError("disk full")

    with caplog.at_level(logging.WARNING):
        articles = await client.get_doc_detail_list(_summaries("a", "b", "c"), on_doc_downloaded=on_doc)

    assert len(articles) == 3
    assert "disk full" in caplog.text


async def test_illegal_format_warns_when_summary_has_no_format(caplog):
    client = StubClient(formats={"sheet": "lakesheet"})

    with caplog.at_level(logging.WARNING):
        articles = await client.get_doc_detail_list(_summaries("sheet", fmt=None))

    assert len(articles) == 1
    assert "lakesheet" in caplog.text


async def test_detail_failure_propagates():
    client = StubClient(limit=1, fail="b")

    with pytest.raises(FatalError, match="cannot fetch b"):
        await client.get_doc_detail_list(_summaries("a", "b", "c"))

    assert "c" not in client.fetched


async def test_failure_leaves_no_pending_workers():
    client = StubClient(limit=3, fail="a")

    with pytest.raises(FatalError):
        await client.get_doc_detail_list(_summaries("a", "b", "c", "d"))

    assert asyncio.all_tasks() == {asyncio.current_task()}
