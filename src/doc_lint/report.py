"""
Lint report.

Collects the findings of one run together with the numbers needed to
summarize it, and decides the exit status.

Example:
    >>> report = orchestrator.run()
    >>> report.counts()
    {'error': 1, 'warning': 3, 'info': 0}
    >>> report.exit_code("error")
    1
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from doc_lint.rules.base import Finding, Severity


@dataclass
class LintReport:
    """Findings and statistics for a lint run.

    Attributes:
        root: Corpus root that was checked
        findings: All findings, in the order rules produced them
        documents_checked: Number of documents scanned
        rules_run: Codes of the rules that ran
        stats: Corpus statistics (see ``LintOrchestrator.get_stats``)
        generated_at: When the report was created
    """

    root: Path
    findings: list[Finding] = field(default_factory=list)
    documents_checked: int = 0
    rules_run: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=datetime.now)

    def counts(self) -> dict[str, int]:
        """Number of findings per severity, always with all three keys."""
        counts = {severity.value: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    def sorted_findings(self) -> list[Finding]:
        return sorted(self.findings, key=Finding.sort_key)

    def by_path(self) -> dict[str, list[Finding]]:
        """Sorted findings grouped by document path."""
        grouped: dict[str, list[Finding]] = {}
        for finding in self.sorted_findings():
            grouped.setdefault(finding.path, []).append(finding)
        return grouped

    def failing(self, fail_on: str = "error") -> list[Finding]:
        return [f for f in self.findings if f.severity.at_least(fail_on)]

    def has_failures(self, fail_on: str = "error") -> bool:
        return bool(self.failing(fail_on))

    def exit_code(self, fail_on: str = "error") -> int:
        return 1 if self.has_failures(fail_on) else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "generated_at": self.generated_at.isoformat(),
            "documents_checked": self.documents_checked,
            "rules_run": list(self.rules_run),
            "counts": self.counts(),
            "findings": [f.to_dict() for f in self.sorted_findings()],
            "stats": self.stats,
        }
