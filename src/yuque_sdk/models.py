"""Document model shared by both clients."""

import time

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    """One node of a repository table of contents."""

    model_config = ConfigDict(extra="allow")

    uuid: str
    title: str = ""
    type: str | None = None
    parent_uuid: str | None = None
    depth: int = 0  # API TOC, root entries have depth 1
    level: int = 0  # web TOC, root entries have level 0
    slug: str | None = None
    url: str | None = None
    id: int | str | None = None


class DocumentSummary(BaseModel):
    """Lightweight document listing entry."""

    model_config = ConfigDict(extra="allow")

    slug: str
    title: str = ""
    format: str | None = None
    id: int | str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    index: int | None = None  # 1-based position, progress display only


class BreadcrumbItem(BaseModel):
    """One ancestor in a document's catalog path."""

    title: str
    doc_id: str


class DocumentDetail(BaseModel):
    """A fully fetched document."""

    model_config = ConfigDict(extra="allow")

    doc_id: str
    slug: str
    title: str = ""
    format: str | None = None
    body: str = ""
    body_original: str = ""
    body_html: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    updated: int | None = None  # epoch milliseconds
    properties: dict = Field(default_factory=dict)
    catalog: list[BreadcrumbItem] = Field(default_factory=list)


class Checkpoint(BaseModel):
    """Persisted progress of a paginated document list fetch."""

    model_config = ConfigDict(populate_by_name=True)

    docs: list[DocumentSummary] = Field(default_factory=list, alias="list")
    offset: int = 0
    total: int = 0
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))


class Session(BaseModel):
    """Cookie string accumulated over one client's lifetime."""

    data: str = ""
    time: float = 0.0

    def merge(self, cookies: list[str] | str | None) -> None:
        """Append new cookie pairs; existing data is never dropped."""
        if not cookies:
            return
        if isinstance(cookies, str):
            cookies = [cookies]
        pairs = [c.split(";", 1)[0].strip() for c in cookies]
        addition = "; ".join(p for p in pairs if p)
        if not addition:
            return
        self.data = f"{self.data}; {addition}" if self.data else addition
        self.time = time.time()

    @property
    def is_empty(self) -> bool:
        return not self.data


class BookState(BaseModel):
    """State read from the ``appData`` global of a repository page."""

    has_book: bool = False
    book_id: int | str | None = None
    catalog: list[CatalogEntry] = Field(default_factory=list)


class PasswordForm(BaseModel):
    """Repository password form scraped from a login wall page."""

    action: str
    method: str = "post"
    hidden_fields: dict[str, str] = Field(default_factory=dict)
    password_field: str = "password"
