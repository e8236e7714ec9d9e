"""
Lint Orchestrator.

Coordinates a lint run: loading the corpus once, running every enabled
rule against it, and collecting findings and statistics into a report.

Example:
    >>> orchestrator = LintOrchestrator(Path("ios-standards"))
    >>> report = orchestrator.run()
    >>> report.counts()
    {'error': 0, 'warning': 2, 'info': 5}
"""

import time
from collections import Counter
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from doc_lint.config import DocLintConfig
from doc_lint.corpus import DocumentCorpus
from doc_lint.logging import LogContext, get_logger
from doc_lint.report import LintReport
from doc_lint.rules.layout import indexed_paths
from doc_lint.rules.registry import get_rules

logger = get_logger(__name__)


class LintOrchestrator:
    """Orchestrate a lint run over a documentation corpus.

    Manifesto:
        One command checks the whole corpus. The orchestrator knows how
        to load the corpus, pick the rules, and assemble the report. No
        rule reads the filesystem on its own schedule.

    Architecture:
        ```
        LintOrchestrator
              │
              ├──► DocumentCorpus.load()   (once)
              │
              ├──► get_rules(config)
              │         │
              │         ▼
              │    for each rule: rule.check(corpus) ──► findings
              │
              └──► LintReport(findings, stats)
        ```

    Features:
        - Load the corpus once, share across rules and stats
        - Run all enabled rules or a named subset
        - Report corpus statistics and the topic index

    Examples:
        >>> orch = LintOrchestrator(Path("."))
        >>> orch.run(rules=["broken-link", "missing-image"]).exit_code()
        0

    Guardrails:
        - Do NOT rescan the corpus for each rule
          ✅ Load once, share across rules
        - Do NOT stop at the first bad document
          ✅ Unreadable documents become DL000 findings

    Tags:
        - orchestrator
        - coordination
        - core_infrastructure
    """

    def __init__(self, root: Path, config: DocLintConfig | None = None):
        """Initialize the orchestrator.

        Args:
            root: Corpus root directory
            config: Configuration (defaults to ``.doclint.yaml`` in root, if any)
        """
        self.root = Path(root)
        self.config = config if config is not None else DocLintConfig.discover(self.root)
        self.corpus: DocumentCorpus | None = None

    def load_corpus(self) -> DocumentCorpus:
        """Scan the corpus, reusing a previous scan.

        Returns:
            Loaded corpus
        """
        if self.corpus is None:
            self.corpus = DocumentCorpus(self.root, self.config).load()
        return self.corpus

    def run(self, rules: list[str] | None = None) -> LintReport:
        """Run the enabled rules over the corpus.

        Args:
            rules: Restrict to these rule codes or names (all enabled if None)

        Returns:
            LintReport with findings and statistics
        """
        corpus = self.load_corpus()
        selected = get_rules(self.config, only=rules)

        findings = []
        with LogContext(corpus=str(self.root)):
            for rule in selected:
                started = time.perf_counter()
                rule_findings = list(rule.check(corpus))
                findings.extend(rule_findings)
                logger.debug(
                    "rule_finished",
                    rule=rule.code,
                    name=rule.name,
                    findings=len(rule_findings),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            report = LintReport(
                root=self.root,
                findings=findings,
                documents_checked=len(corpus.documents) + len(corpus.unreadable),
                rules_run=[rule.code for rule in selected],
                stats=self.get_stats(),
            )
            counts = report.counts()
            logger.info(
                "lint_finished",
                documents=report.documents_checked,
                rules=len(selected),
                errors=counts["error"],
                warnings=counts["warning"],
                infos=counts["info"],
            )
        return report

    def get_stats(self) -> dict[str, Any]:
        """Statistics about the scanned corpus.

        Returns:
            Statistics dictionary
        """
        corpus = self.load_corpus()

        link_kinds: Counter[str] = Counter()
        domains: Counter[str] = Counter()
        images = headings = fences = 0

        for doc in corpus.documents.values():
            headings += len(doc.headings)
            fences += len(doc.fences)
            for link in doc.links:
                if link.is_image:
                    images += 1
                    continue
                link_kinds[link.kind] += 1
                if link.is_external:
                    host = urlparse(link.path).netloc
                    if host:
                        domains[host.lower()] += 1

        return {
            "documents": len(corpus.documents),
            "unreadable_documents": len(corpus.unreadable),
            "topics": len(corpus.topics),
            "headings": headings,
            "code_fences": fences,
            "links": {
                "relative": link_kinds.get("relative", 0),
                "anchor": link_kinds.get("anchor", 0),
                "external": link_kinds.get("external", 0),
            },
            "images": images,
            "image_files": len(corpus.image_files()),
            "external_domains": dict(domains.most_common()),
        }

    def topic_index(self) -> list[dict[str, Any]]:
        """Topic directories with their document, image count and index status."""
        corpus = self.load_corpus()
        linked = indexed_paths(corpus)

        rows = []
        for topic in corpus.topics:
            indexed = topic.directory in linked or (
                topic.document is not None and topic.document in linked
            )
            rows.append({
                "topic": topic.name,
                "document": topic.document.as_posix() if topic.document else None,
                "images": len(topic.image_files),
                "indexed": indexed,
            })
        return rows
