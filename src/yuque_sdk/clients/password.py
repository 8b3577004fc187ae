"""Yuque client authenticated with a web session.

The session comes from a browser cookie, an account login, and/or a
repository password entered through the repository's password form.
"""

import logging
import re
from typing import Any

import httpx

from yuque_sdk.catalog import Catalog
from yuque_sdk.clients.base import BaseYuqueClient, expect_payload
from yuque_sdk.config import CONFIG_DOCS_URL, PasswordClientConfig
from yuque_sdk.errors import FatalError
from yuque_sdk.fetcher import HttpResponse
from yuque_sdk.models import CatalogEntry, DocumentDetail, DocumentSummary, Session
from yuque_sdk.scrape import parse_book_state, parse_password_form
from yuque_sdk.utils.crypto import encrypt_password

logger = logging.getLogger(__name__)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 16_6_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Mobile/20G81 YuqueMobileApp/1.0.2 (AppBuild/650 Device/Phone "
    "Locale/zh-cn Theme/light YuqueType/public)"
)


class PasswordClient(BaseYuqueClient):
    """Fetches a repository by reading its web pages and internal JSON API."""

    config: PasswordClientConfig

    def __init__(
        self,
        config: PasswordClientConfig,
        mock_transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = config.with_env_fallback()
        if not config.login or not config.repo:
            raise FatalError("Missing Yuque configuration: login and repo are required")
        if not config.cookie and not config.repo_password and not (
            config.username and config.password
        ):
            raise FatalError(
                "Missing Yuque credentials: username/password, repo password or browser cookie"
            )
        super().__init__(config, mock_transport=mock_transport)
        self.base_url = config.host.rstrip("/")
        self.repo_url = f"{self.base_url}/{self.namespace}"
        self.session = Session()
        self.book_id: int | str | None = None
        self.doc_list: list[DocumentSummary] = []

    async def login(self) -> None:
        """Resolve a session cookie, then unlock the repository if it has a password."""
        if self.config.cookie:
            self.session.merge(re.split(r";\s*", self.config.cookie))
            logger.info("Using browser cookie")
        elif self.config.username and self.config.password:
            await self._login_with_password()
        else:
            logger.info("Skipping account login, using repository password")

        if self.config.repo_password:
            await self.unlock_repo_by_password()

    async def _login_with_password(self) -> None:
        res = await self.transport.request(
            f"{self.base_url}/api/mobile_app/accounts/login?language=zh-cn",
            method="POST",
            data={
                "login": self.config.username,
                "password": encrypt_password(self.config.password or "", self.config.login_public_key),
                "loginType": "password",
            },
            headers={
                "Referer": f"{self.base_url}/login?goto=https%3A%2F%2Fwww.yuque.com%2Fdashboard",
                "Origin": self.base_url,
                "User-Agent": MOBILE_USER_AGENT,
            },
        )
        if not res.ok:
            raise FatalError(f"Yuque login failed: HTTP {res.status} {res.data}")
        self.session.merge(res.set_cookies)
        logger.info("Yuque login succeeded")

    async def _get_repo_page(self) -> HttpResponse:
        res = await self.transport.request(
            self.repo_url,
            method="GET",
            headers={"Cookie": self.session.data or None},
            data_type="text",
        )
        self.session.merge(res.set_cookies)
        return res

    async def unlock_repo_by_password(self) -> None:
        """Submit the repository password form unless the book is already readable."""
        first_page = await self._get_repo_page()
        if parse_book_state(first_page.data).has_book:
            logger.info("Repository is already accessible, no unlock needed")
            return

        form = parse_password_form(first_page.data, self.base_url, self.namespace)
        if form is None:
            raise FatalError(
                "Repository password form not found, the page layout may have changed"
            )

        form_data: dict[str, Any] = dict(form.hidden_fields)
        form_data[form.password_field] = self.config.repo_password
        submit = await self.transport.request(
            form.action,
            method=form.method,
            data=form_data,
            content_type="form",
            data_type="text",
            headers={
                "Cookie": self.session.data or None,
                "Referer": self.repo_url,
                "Origin": self.base_url,
            },
        )
        self.session.merge(submit.set_cookies)

        verify = await self._get_repo_page()
        if not parse_book_state(verify.data).has_book:
            raise FatalError(
                "Repository password rejected",
                hint="Check that YUQUE_REPO_PASSWORD is correct",
            )
        logger.info("Repository password accepted")

    async def request(
        self,
        api: str,
        params: dict[str, Any] | None = None,
        data_type: str = "json",
        raw: bool = False,
    ) -> Any:
        """GET a path under the host with the session cookie.

        With ``raw`` the decoded body is returned as is; otherwise a non-200
        status is fatal and the ``data`` member is returned.
        """
        if self.session.is_empty:
            raise FatalError("Not logged in to Yuque")
        res = await self.transport.request(
            f"{self.base_url}/{api}",
            method="GET",
            headers={"Cookie": self.session.data},
            data=params,
            data_type="text" if data_type == "text" else "json",
        )
        if raw:
            return res.data
        if not res.ok:
            message = res.data.get("message") if isinstance(res.data, dict) else None
            if res.status == 404 and message == "book not found":
                raise FatalError(
                    f"Repository {self.namespace} does not exist, check the configuration",
                    hint=f"See the configuration docs: {CONFIG_DOCS_URL}",
                )
            raise FatalError(message or f"HTTP {res.status} for {api}: {res.data}")
        return expect_payload(res.data)["data"]

    async def get_toc(self) -> list[CatalogEntry]:
        """Read the catalog and book id from the repository page."""
        try:
            html = await self.request(self.namespace, data_type="text", raw=True)
            state = parse_book_state(html or "")
        except FatalError:
            raise
        except Exception as e:
            logger.warning("Failed to read the Yuque catalog, try again later: %s", e)
            raise FatalError(f"Failed to read the Yuque catalog: {e}") from e
        if not state.has_book:
            logger.warning("Failed to read the Yuque catalog, try again later")
            raise FatalError("Yuque repository page has no book data")
        self.book_id = state.book_id
        return state.catalog

    async def get_doc_list(self) -> list[DocumentSummary]:
        self.catalog = Catalog(await self.get_toc())
        data = await self.request("api/docs", {"book_id": self.book_id})
        self.doc_list = [DocumentSummary.model_validate(item) for item in data or []]
        return self.doc_list

    async def get_doc_detail(self, slug: str) -> DocumentDetail:
        body = await self.request(
            f"{self.namespace}/{slug}/markdown",
            {
                "attachment": True,
                "latexcode": self.config.latex_code,
                "anchor": False,
                "linebreak": self.config.linebreak,
            },
            data_type="text",
            raw=True,
        )
        summary = next((d for d in self.doc_list if d.slug == slug), None)
        fields = summary.model_dump(exclude={"index"}) if summary else {"slug": slug}
        article = DocumentDetail.model_validate({**fields, "body": body or "", "doc_id": slug})

        entry = self.catalog.find_by_url(slug)
        if entry is not None:
            article.catalog = self.catalog.breadcrumb(entry, entry.level, slug)
        return article

    def prepare_body(self, article: DocumentDetail, body: str) -> str:
        article.body_original = body
        return body
