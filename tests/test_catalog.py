"""Tests for catalog lookup and breadcrumb resolution."""

from yuque_sdk.catalog import Catalog
from yuque_sdk.models import CatalogEntry


def _toc() -> list[CatalogEntry]:
    return [
        CatalogEntry(uuid="a", title="Guide", parent_uuid="", depth=1, level=0),
        CatalogEntry(uuid="b", title="Basics", parent_uuid="a", depth=2, level=1),
        CatalogEntry(
            uuid="c", title="Install", parent_uuid="b", depth=3, level=2, slug="install", url="install"
        ),
        CatalogEntry(uuid="d", title="FAQ", parent_uuid="", depth=1, level=0, slug="faq", url="faq"),
    ]


def test_breadcrumb_orders_root_to_parent():
    catalog = Catalog(_toc())
    entry = catalog.find_by_slug("install")

    path = catalog.breadcrumb(entry, entry.depth - 1, "install")

    assert [item.title for item in path] == ["Guide", "Basics"]
    assert all(item.doc_id == "install" for item in path)


def test_breadcrumb_length_follows_level():
    catalog = Catalog(_toc())
    entry = catalog.find_by_url("install")

    path = catalog.breadcrumb(entry, entry.level, "install")

    assert len(path) == entry.level


def test_root_entry_has_empty_breadcrumb():
    catalog = Catalog(_toc())
    entry = catalog.find_by_slug("faq")

    assert catalog.breadcrumb(entry, entry.depth - 1, "faq") == []


def test_breadcrumb_stops_at_missing_parent():
    catalog = Catalog([CatalogEntry(uuid="x", title="Orphan", parent_uuid="gone", depth=3)])

    assert catalog.breadcrumb(catalog.entries[0], 2, "orphan") == []


def test_cyclic_parent_chain_terminates():
    catalog = Catalog(
        [
            CatalogEntry(uuid="a", title="A", parent_uuid="b", depth=1000),
            CatalogEntry(uuid="b", title="B", parent_uuid="a", depth=1000),
        ]
    )

    path = catalog.breadcrumb(catalog.entries[0], 999, "a")

    assert 0 < len(path) <= 64


def test_lookup_misses_return_none():
    catalog = Catalog(_toc())

    assert catalog.find_by_slug("nope") is None
    assert catalog.find_by_url("nope") is None
    assert catalog.get(None) is None
    assert len(catalog) == 4
