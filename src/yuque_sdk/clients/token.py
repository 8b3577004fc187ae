"""Yuque client authenticated with a personal API token."""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from yuque_sdk.catalog import Catalog
from yuque_sdk.checkpoint import CheckpointStore, checkpoint_filename
from yuque_sdk.clients.base import BaseYuqueClient, expect_payload
from yuque_sdk.config import CONFIG_DOCS_URL, TokenClientConfig
from yuque_sdk.errors import ApiError, FatalError, TransportError
from yuque_sdk.models import CatalogEntry, DocumentDetail, DocumentSummary
from yuque_sdk.transforms import normalize_html, normalize_markdown, word_wrap
from yuque_sdk.utils.rate_limiter import RateLimiter
from yuque_sdk.utils.retry import call_with_retry

logger = logging.getLogger(__name__)

FormatExt = Callable[[DocumentDetail], str]


class TokenClient(BaseYuqueClient):
    """Fetches a repository through the v2 open API.

    The document list is paginated and checkpointed to disk after every page,
    so an interrupted run resumes where it stopped.
    """

    config: TokenClientConfig

    def __init__(
        self,
        config: TokenClientConfig,
        format_ext: FormatExt | None = None,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = config.with_env_fallback()
        if not config.token or not config.login or not config.repo:
            raise FatalError(
                "Missing Yuque configuration: token, login and repo are required",
                hint=f"See the configuration docs: {CONFIG_DOCS_URL}",
            )
        super().__init__(config, mock_transport=mock_transport)
        self.base_url = config.base_url.rstrip("/")
        self.format_ext = format_ext or word_wrap
        self.rate_limiter = RateLimiter(config.request_interval, max_concurrent=1)
        self.checkpoints = CheckpointStore(checkpoint_filename(self.namespace, config.cache_path))

    @property
    def request_count(self) -> int:
        return self.rate_limiter.request_count

    async def _send(self, api: str, params: dict[str, Any] | None = None):
        return await self.transport.request(
            f"{self.base_url}/{api}",
            method="GET",
            headers={"X-Auth-Token": self.config.token},
            data=params,
        )

    async def request(self, api: str, params: dict[str, Any] | None = None) -> Any:
        """GET an API path and return its ``data`` member; non-200 is fatal."""
        res = await self._send(api, params)
        if not res.ok:
            message = res.data.get("message") if isinstance(res.data, dict) else None
            if res.status == 404 and message == "book not found":
                raise FatalError(
                    f"Repository {self.namespace} does not exist, check the configuration",
                    hint=f"See the configuration docs: {CONFIG_DOCS_URL}",
                )
            raise FatalError(message or f"HTTP {res.status} for {api}: {res.data}")
        return expect_payload(res.data)["data"]

    async def request_with_retry(self, api: str, params: dict[str, Any] | None = None) -> Any:
        """Paced GET that retries transient failures and returns the whole payload."""

        async def attempt() -> Any:
            async with self.rate_limiter:
                res = await self._send(api, params)
            if not res.ok:
                message = res.data.get("message") if isinstance(res.data, dict) else res.data
                raise ApiError(res.status, str(message))
            return expect_payload(res.data)

        return await call_with_retry(
            attempt,
            max_retries=self.config.max_retries,
            base_delay=self.config.request_interval,
            retry_on=(ApiError, TransportError),
        )

    async def get_toc(self) -> list[CatalogEntry]:
        toc = await self.request(f"repos/{self.namespace}/toc")
        return [CatalogEntry.model_validate(item) for item in toc or []]

    async def get_doc_list(self) -> list[DocumentSummary]:
        """Fetch the catalog, then every document summary page by page."""
        self.catalog = Catalog(await self.get_toc())

        checkpoint = self.checkpoints.load()
        docs: list[DocumentSummary] = list(checkpoint.docs) if checkpoint else []
        total = checkpoint.total if checkpoint else 0
        page_size = self.config.page_size
        self.rate_limiter.reset()

        try:
            while True:
                offset = len(docs)
                logger.info("Fetching document list %d-%d...", offset + 1, offset + page_size)
                try:
                    res = await self.request_with_retry(
                        f"repos/{self.namespace}/docs",
                        {"offset": offset, "limit": page_size},
                    )
                except Exception as e:
                    logger.error("Failed to fetch document list: %s", e)
                    logger.info(
                        "Progress saved: %d documents, the next run continues from #%d",
                        len(docs), len(docs) + 1,
                    )
                    raise

                page = [DocumentSummary.model_validate(item) for item in res.get("data") or []]
                docs.extend(page)
                total = int(res.get("meta", {}).get("total", len(docs)))
                self.checkpoints.save(docs, total)
                logger.info(
                    "Fetched %d/%d document summaries (API calls: %d)",
                    len(docs), total, self.request_count,
                )
                if total <= len(docs):
                    break
                if not page:
                    logger.warning(
                        "Empty page at offset %d although %d documents are reported", offset, total
                    )
                    break
        except Exception:
            self.checkpoints.save(docs, total)
            raise

        self.checkpoints.clear()
        logger.info("Document list complete: %d documents", len(docs))
        return docs

    async def get_doc_detail(self, slug: str) -> DocumentDetail:
        data = await self.request(f"repos/{self.namespace}/docs/{slug}", {"raw": 1})
        article = DocumentDetail.model_validate({**data, "doc_id": data["slug"]})
        entry = self.catalog.find_by_slug(article.slug)
        if entry is not None:
            article.catalog = self.catalog.breadcrumb(entry, entry.depth - 1, article.slug)
        article.body_html = normalize_html(article.body_html)
        return article

    def prepare_body(self, article: DocumentDetail, body: str) -> str:
        article.body_original = article.body
        article.body = normalize_markdown(body)
        return self.format_ext(article)
