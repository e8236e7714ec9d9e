"""
Report renderers.

Each renderer turns a LintReport into one output format.
"""

from doc_lint.renderers.base import BaseRenderer
from doc_lint.renderers.console import ConsoleRenderer
from doc_lint.renderers.json_report import JSONRenderer
from doc_lint.renderers.markdown import MarkdownRenderer

# Map output format to renderer class
RENDERERS: dict[str, type[BaseRenderer]] = {
    "text": ConsoleRenderer,
    "json": JSONRenderer,
    "markdown": MarkdownRenderer,
}

__all__ = [
    "BaseRenderer",
    "ConsoleRenderer",
    "JSONRenderer",
    "MarkdownRenderer",
    "RENDERERS",
]
