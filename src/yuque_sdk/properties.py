"""Front-matter properties and timestamp helpers."""

import logging
import re
from datetime import datetime, timezone

import yaml

from yuque_sdk.models import DocumentDetail

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r"\A\s*---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_ANCHOR_RE = re.compile(r'<a name="[^"]*"></a>')


def extract_properties(doc: DocumentDetail) -> tuple[str, dict]:
    """Split a leading YAML block off the body and merge it over defaults.

    Defaults are ``title``, ``urlname``, ``date`` and ``updated`` taken from
    the document itself; keys from the front matter win.
    """
    properties: dict = {
        "title": doc.title,
        "urlname": doc.slug,
        "date": doc.created_at,
        "updated": doc.updated_at,
    }
    body = doc.body or ""
    # Yuque prefixes headings with anchors, which would hide the block
    candidate = _ANCHOR_RE.sub("", body, count=1) if body.lstrip().startswith("<a name=") else body
    match = _FRONT_MATTER_RE.match(candidate)
    if not match:
        return body, properties

    try:
        front_matter = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        logger.warning("Invalid front matter in %s, keeping it in the body", doc.slug)
        return body, properties

    if isinstance(front_matter, dict):
        properties.update(front_matter)
    return candidate[match.end():], properties


def to_epoch_ms(value: str | None) -> int | None:
    """Parse a service update time string into epoch milliseconds.

    Naive values are read as UTC.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Unrecognized update time: %s", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)
