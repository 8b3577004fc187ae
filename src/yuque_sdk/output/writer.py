"""Write fetched documents as Markdown files."""

import re
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import yaml

from yuque_sdk.models import DocumentDetail

_UNSAFE_RE = re.compile(r'[\\/:*?"<>|\r\n]')


class MarkdownWriter:
    """Write each document to ``<output_dir>/<breadcrumb...>/<doc_id>.md``."""

    def __init__(self, output_dir: Path, include_properties: bool = True):
        self.output_dir = Path(output_dir)
        self.include_properties = include_properties
        self.written: list[tuple[DocumentDetail, Path]] = []

    async def write(self, doc: DocumentDetail) -> Path:
        """Write one document, creating breadcrumb directories as needed."""
        filepath = self._get_filepath(doc)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        content = doc.body
        if self.include_properties and doc.properties:
            front_matter = yaml.safe_dump(
                doc.properties, allow_unicode=True, sort_keys=False, default_flow_style=False
            )
            content = f"---\n{front_matter}---\n\n{doc.body}"

        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(content)

        self.written.append((doc, filepath))
        return filepath

    async def write_index(self, title: str) -> Path:
        """Write an index file listing every written document."""
        index_path = self.output_dir / "index.md"
        self.output_dir.mkdir(parents=True, exist_ok=True)

        parts = [f"# {title}", "", f"> Total documents: {len(self.written)}", ""]
        for doc, filepath in sorted(self.written, key=lambda item: str(item[1])):
            relative_path = filepath.relative_to(self.output_dir).as_posix()
            parts.append(f"- [{doc.title or doc.doc_id}]({relative_path})")
        parts.append("")

        async with aiofiles.open(index_path, "w", encoding="utf-8") as f:
            await f.write("\n".join(parts))
        return index_path

    def _get_filepath(self, doc: DocumentDetail) -> Path:
        """Map a document's breadcrumb and id to a file path."""
        path = self.output_dir
        for item in doc.catalog:
            path = path / (_safe_name(item.title) or "_")
        return path / f"{_safe_name(doc.doc_id) or 'index'}.md"


def _safe_name(name: str) -> str:
    cleaned = _UNSAFE_RE.sub("_", name).strip()
    # "." and ".." would leave the output directory
    if not cleaned.strip("."):
        return ""
    return cleaned
