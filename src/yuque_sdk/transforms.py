"""Default body normalizers applied after a detail fetch."""

import re

from yuque_sdk.models import DocumentDetail

_LAKE_PREFIX_RE = re.compile(r'\A\s*<!doctype lake>\s*(<meta [^>]*>\s*)*', re.IGNORECASE)
_ANCHOR_RE = re.compile(r'<a name="[^"]*"></a>')
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


def normalize_html(body_html: str | None) -> str | None:
    """Strip the lake doctype and meta prefix from rendered HTML."""
    if not body_html:
        return body_html
    return _LAKE_PREFIX_RE.sub("", body_html)


def normalize_markdown(body: str) -> str:
    """Remove the heading anchors Yuque injects into raw markdown."""
    return _ANCHOR_RE.sub("", body)


def word_wrap(doc: DocumentDetail) -> str:
    """Default format extension: turn inline ``<br />`` into newlines."""
    return _BR_RE.sub("\n", doc.body)
