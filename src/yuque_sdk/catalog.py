"""Table-of-contents lookup and breadcrumb resolution."""

import logging

from yuque_sdk.models import BreadcrumbItem, CatalogEntry

logger = logging.getLogger(__name__)

_MAX_WALK = 64  # Guards against cyclic parent chains in remote data


class Catalog:
    """Ordered catalog entries with an uuid -> position index."""

    def __init__(self, entries: list[CatalogEntry] | None = None):
        self.entries: list[CatalogEntry] = list(entries or [])
        self._by_uuid: dict[str, int] = {}
        for i, entry in enumerate(self.entries):
            self._by_uuid.setdefault(entry.uuid, i)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, uuid: str | None) -> CatalogEntry | None:
        if uuid is None or uuid not in self._by_uuid:
            return None
        return self.entries[self._by_uuid[uuid]]

    def find_by_slug(self, slug: str) -> CatalogEntry | None:
        return next((e for e in self.entries if e.slug == slug), None)

    def find_by_url(self, url: str) -> CatalogEntry | None:
        return next((e for e in self.entries if e.url == url), None)

    def breadcrumb(self, entry: CatalogEntry, levels: int, doc_id: str) -> list[BreadcrumbItem]:
        """Collect up to ``levels`` ancestor titles, ordered root to parent.

        The walk stops early when a parent is missing from the catalog.
        """
        path: list[BreadcrumbItem] = []
        parent_uuid = entry.parent_uuid
        for _ in range(min(levels, _MAX_WALK)):
            current = self.get(parent_uuid)
            if current is None:
                if parent_uuid:
                    logger.debug("Catalog parent %s of %s not found", parent_uuid, entry.uuid)
                break
            path.append(BreadcrumbItem(title=current.title, doc_id=doc_id))
            parent_uuid = current.parent_uuid
        path.reverse()
        return path
