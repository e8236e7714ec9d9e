"""
doc-lint

Linter for Markdown documentation corpora laid out as a root README index
plus one directory per topic with its own ``Images/`` folder.

Example:
    >>> from doc_lint import LintOrchestrator
    >>> from pathlib import Path
    >>> report = LintOrchestrator(Path(".")).run()
    >>> report.exit_code()
    0
"""

__version__ = "0.1.0"

from doc_lint.config import DocLintConfig, DocLintSettings
from doc_lint.corpus import DocumentCorpus
from doc_lint.orchestrator import LintOrchestrator
from doc_lint.parser import MarkdownDocument, MarkdownScanner
from doc_lint.report import LintReport
from doc_lint.rules import Finding, Severity

__all__ = [
    "DocLintConfig",
    "DocLintSettings",
    "DocumentCorpus",
    "LintOrchestrator",
    "LintReport",
    "MarkdownScanner",
    "MarkdownDocument",
    "Finding",
    "Severity",
    "__version__",
]
