"""On-disk checkpoint for resumable document list fetches."""

import hashlib
import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from yuque_sdk.models import Checkpoint, DocumentSummary

logger = logging.getLogger(__name__)


def checkpoint_filename(namespace: str, cache_path: str | None = None) -> str:
    """Derive a stable per-configuration checkpoint file name.

    ``elog-online.cache.json`` -> ``.yuque.elog-online.cache.<hash>.doc-list-cache.json``
    ``user/repo``              -> ``.yuque.user-repo.<hash>.doc-list-cache.json``
    """
    if cache_path:
        key = cache_path
        stem = Path(cache_path).name
        if stem.endswith(".json"):
            stem = stem[: -len(".json")]
    else:
        key = namespace
        stem = namespace.replace("/", "-")
    stem = re.sub(r"[^\w.-]", "_", stem)
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
    return f".yuque.{stem}.{digest}.doc-list-cache.json"


class CheckpointStore:
    """Load, save and clear one checkpoint file; I/O problems are only logged."""

    def __init__(self, filename: str, directory: Path | None = None):
        self.directory = Path(directory) if directory is not None else None
        self.filename = filename

    @property
    def path(self) -> Path:
        # Relative to the working directory at call time
        return (self.directory or Path.cwd()) / self.filename

    def load(self) -> Checkpoint | None:
        path = self.path
        try:
            if not path.exists():
                return None
            checkpoint = Checkpoint.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Could not load document list checkpoint %s: %s", path, e)
            return None

        if checkpoint.offset != len(checkpoint.docs):
            logger.warning(
                "Checkpoint offset %d does not match %d saved documents, resuming from %d",
                checkpoint.offset, len(checkpoint.docs), len(checkpoint.docs),
            )
            checkpoint.offset = len(checkpoint.docs)
        logger.info(
            "Resuming unfinished document list: %d/%d documents already fetched",
            len(checkpoint.docs), checkpoint.total,
        )
        return checkpoint

    def save(self, docs: list[DocumentSummary], total: int) -> None:
        checkpoint = Checkpoint(docs=docs, offset=len(docs), total=total)
        try:
            payload = checkpoint.model_dump(mode="json", by_alias=True)
            self.path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Could not save document list checkpoint %s: %s", self.path, e)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove document list checkpoint %s: %s", self.path, e)
