"""Tests for the Markdown writer."""

import pytest
import yaml

from yuque_sdk.models import BreadcrumbItem, DocumentDetail
from yuque_sdk.output import MarkdownWriter

pytestmark = pytest.mark.asyncio


def _doc(**overrides) -> DocumentDetail:
    values = {
        "doc_id": "intro",
        "slug": "intro",
        "title": "Intro",
        "body": "# Hello\n",
        "properties": {"title": "Intro", "tags": ["a"]},
        "catalog": [BreadcrumbItem(title="Guide", doc_id="intro"), BreadcrumbItem(title="A/B", doc_id="intro")],
    }
    values.update(overrides)
    return DocumentDetail(**values)


async def test_write_uses_breadcrumb_directories(tmp_path):
    writer = MarkdownWriter(tmp_path)

    path = await writer.write(_doc())

    assert path == tmp_path / "Guide" / "A_B" / "intro.md"
    content = path.read_text(encoding="utf-8")
    assert content.startswith("---\n")
    front_matter = content.split("---\n")[1]
    assert yaml.safe_load(front_matter) == {"title": "Intro", "tags": ["a"]}
    assert content.endswith("# Hello\n")


async def test_write_without_properties(tmp_path):
    writer = MarkdownWriter(tmp_path, include_properties=False)

    path = await writer.write(_doc(catalog=[]))

    assert path == tmp_path / "intro.md"
    assert path.read_text(encoding="utf-8") == "# Hello\n"


async def test_write_index(tmp_path):
    writer = MarkdownWriter(tmp_path)
    await writer.write(_doc(catalog=[]))
    await writer.write(_doc(doc_id="faq", slug="faq", title="FAQ", catalog=[]))

    index = await writer.write_index("user/repo")

    text = index.read_text(encoding="utf-8")
    assert text.startswith("# user/repo")
    assert "> Total documents: 2" in text
    assert "- [FAQ](faq.md)" in text
    assert "- [Intro](intro.md)" in text


async def test_dot_titles_stay_inside_output_dir(tmp_path):
    out = tmp_path / "out"
    writer = MarkdownWriter(out)
    catalog = [
        BreadcrumbItem(title="..", doc_id="x"),
        BreadcrumbItem(title=".", doc_id="x"),
        BreadcrumbItem(title="...", doc_id="x"),
    ]

    path = await writer.write(_doc(doc_id="x", slug="x", catalog=catalog))

    assert path == out / "_" / "_" / "_" / "x.md"
    assert path.resolve().is_relative_to(out.resolve())
    assert not (tmp_path / "x.md").exists()
