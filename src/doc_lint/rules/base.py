"""
Base classes for lint rules.

A rule looks at the scanned corpus and yields ``Finding`` objects. Rules
never raise for problems in the corpus; an exception from a rule is a bug.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from doc_lint.config import DocLintConfig
from doc_lint.corpus import DocumentCorpus
from doc_lint.parser.markdown_scanner import MarkdownDocument


class Severity(str, Enum):
    """Finding severity, ordered error > warning > info."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"error": 3, "warning": 2, "info": 1}[self.value]

    def at_least(self, threshold: str) -> bool:
        """Whether this severity meets a ``fail_on`` threshold."""
        if threshold == "never":
            return False
        return self.rank >= Severity(threshold).rank


@dataclass(frozen=True)
class Finding:
    """One problem found in the corpus.

    Attributes:
        code: Rule code, e.g. ``DL001``
        rule: Rule name, e.g. ``broken-link``
        severity: Effective severity after overrides
        path: POSIX path relative to the corpus root
        line: 1-based line, or None for file- or corpus-level findings
        column: 1-based column, if known
        message: Human-readable description
    """
    code: str
    rule: str
    severity: Severity
    path: str
    message: str
    line: int | None = None
    column: int | None = None

    @property
    def location(self) -> str:
        if self.line is None:
            return self.path
        if self.column is None:
            return f"{self.path}:{self.line}"
        return f"{self.path}:{self.line}:{self.column}"

    def sort_key(self) -> tuple:
        return (self.path, self.line or 0, self.column or 0, self.code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "rule": self.rule,
            "severity": self.severity.value,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }


class Rule(ABC):
    """Base class for corpus-wide rules.

    Manifesto:
        One rule, one property of the corpus. A rule has a stable code
        for configuration and reports, a readable name, and a default
        severity the configuration may override.

    Architecture:
        ```
        DocumentCorpus ──► Rule.check() ──► Iterator[Finding]
                                 │
                                 └── self.finding(...) applies the
                                     configured severity
        ```

    Tags:
        - rules
        - core_infrastructure
    """

    code: str = ""
    name: str = ""
    description: str = ""
    default_severity: Severity = Severity.WARNING

    def __init__(self, config: DocLintConfig | None = None):
        self.config = config or DocLintConfig()
        self.severity = Severity(
            self.config.severity_for(self.code, self.name, self.default_severity.value)
        )

    @abstractmethod
    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        """Yield findings for the whole corpus."""

    def finding(
        self,
        path: Path | str,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> Finding:
        return Finding(
            code=self.code,
            rule=self.name,
            severity=self.severity,
            path=Path(path).as_posix(),
            message=message,
            line=line,
            column=column,
        )


class DocumentRule(Rule):
    """A rule evaluated independently for each document."""

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        for doc in corpus.documents.values():
            yield from self.check_document(doc, corpus)

    @abstractmethod
    def check_document(
        self, doc: MarkdownDocument, corpus: DocumentCorpus
    ) -> Iterator[Finding]:
        """Yield findings for one document."""
