"""
Parser module for doc-lint.

Provides the Markdown scanner and the anchor/link-target helpers the
rules use to resolve what a link points at.
"""

from doc_lint.parser.anchors import classify_target, normalize_label, slugify
from doc_lint.parser.markdown_scanner import (
    CodeFence,
    Heading,
    Link,
    LinkDefinition,
    MarkdownDocument,
    MarkdownScanner,
    ReferenceUsage,
)

__all__ = [
    "MarkdownScanner",
    "MarkdownDocument",
    "Link",
    "Heading",
    "CodeFence",
    "LinkDefinition",
    "ReferenceUsage",
    "classify_target",
    "normalize_label",
    "slugify",
]
