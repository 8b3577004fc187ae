"""Behaviour shared by the token and password clients."""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import httpx

from yuque_sdk.catalog import Catalog
from yuque_sdk.config import ClientConfig
from yuque_sdk.errors import FatalError
from yuque_sdk.fetcher import HttpTransport
from yuque_sdk.models import DocumentDetail, DocumentSummary
from yuque_sdk.properties import extract_properties, to_epoch_ms

logger = logging.getLogger(__name__)

DocCallback = Callable[[DocumentDetail, int, int], Awaitable[None] | None]


class BaseYuqueClient(ABC):
    """Owns the transport and runs the bounded detail-fetch pipeline."""

    def __init__(
        self,
        config: ClientConfig,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.namespace = config.namespace
        self.catalog = Catalog()
        self.transport = HttpTransport(
            user_agent=config.user_agent,
            timeout_ms=config.timeout_ms,
            mock_transport=mock_transport,
        )

    async def __aenter__(self):
        await self.transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    @abstractmethod
    async def get_doc_list(self) -> list[DocumentSummary]:
        """Fetch the catalog and the flat document list."""

    @abstractmethod
    async def get_doc_detail(self, slug: str) -> DocumentDetail:
        """Fetch one document with its breadcrumb resolved."""

    @abstractmethod
    def prepare_body(self, article: DocumentDetail, body: str) -> str:
        """Apply the mode's format transforms to a body stripped of properties."""

    async def get_doc_detail_list(
        self,
        docs: list[DocumentSummary],
        ids: Iterable[str] = (),
        on_doc_downloaded: DocCallback | None = None,
    ) -> list[DocumentDetail]:
        """Fetch details for ``docs`` (restricted to ``ids`` when given).

        At most ``config.limit`` fetches run at once. Results come back in
        completion order, not input order.
        """
        wanted = set(ids)
        selected = docs
        if wanted:
            selected = []
            for doc in docs:
                if doc.slug in wanted:
                    selected.append(doc)
                else:
                    logger.info("Skipping download: %s", doc.title)

        if not selected:
            logger.info("No documents to download")
            return []

        total = len(selected)
        logger.info("Documents to download: %d", total)

        queue: asyncio.Queue[DocumentSummary] = asyncio.Queue()
        for i, doc in enumerate(selected, start=1):
            queue.put_nowait(doc.model_copy(update={"index": i}))

        completed = 0

        async def worker(buffer: list[DocumentDetail]) -> None:
            nonlocal completed
            while True:
                try:
                    doc = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                logger.info("Downloading %d/%d: %s", doc.index, total, doc.title)
                article = await self._fetch_article(doc)
                buffer.append(article)
                completed += 1
                if on_doc_downloaded is None:
                    continue
                logger.info("Processed %d/%d documents", completed, total)
                try:
                    result = on_doc_downloaded(article, completed, total)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.warning("Callback failed for %s: %s", article.title, e)

        buffers: list[list[DocumentDetail]] = [[] for _ in range(min(self.config.limit, total))]
        tasks = [asyncio.create_task(worker(buffer)) for buffer in buffers]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        articles = [article for buffer in buffers for article in buffer]
        logger.info("Downloaded %d documents", len(articles))
        return articles

    async def _fetch_article(self, doc: DocumentSummary) -> DocumentDetail:
        """Fetch one document and normalize body, properties and timestamp."""
        article = await self.get_doc_detail(doc.slug)
        if not doc.format and article.format in self.config.illegal_formats:
            logger.warning("[%s] uses an unsupported document format: %s", article.title, article.format)

        body, properties = extract_properties(article)
        article.properties = properties
        article.body = self.prepare_body(article, body)
        article.updated = to_epoch_ms(article.updated_at)
        return article


def expect_payload(data: Any) -> dict:
    """Return a JSON envelope carrying ``data``; anything else is fatal."""
    # An expired session is redirected to the HTML login page
    if not isinstance(data, dict) or "data" not in data:
        raise FatalError(
            "Unexpected response from Yuque, the session may have expired",
            hint="Check the token or log in again",
        )
    return data
