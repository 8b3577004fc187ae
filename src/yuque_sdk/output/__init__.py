"""Output writers."""

from yuque_sdk.output.writer import MarkdownWriter

__all__ = [
    "MarkdownWriter",
]
