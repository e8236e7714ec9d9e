"""
Corpus layout rules.

The corpus is navigated from its root ``README.md``: every topic has a
directory, a document named after the directory, and an entry in the
index. These rules check the tree and the index agree.
"""

from collections.abc import Iterator
from pathlib import Path

from doc_lint.corpus import DocumentCorpus
from doc_lint.rules.base import Finding, Rule, Severity
from doc_lint.rules.registry import register_rule


def indexed_paths(corpus: DocumentCorpus) -> set[Path]:
    """Root-relative paths the index document links to."""
    index = corpus.index_document
    if index is None:
        return set()

    paths = set()
    for link in index.relative_links:
        relative = corpus.relative_to_root(corpus.resolve(index, link))
        if relative is not None:
            paths.add(relative)
    return paths


@register_rule
class MissingIndexRule(Rule):
    code = "DL301"
    name = "missing-index"
    description = "Corpus root has no index document"
    default_severity = Severity.ERROR

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        if corpus.index_document is None:
            yield self.finding(
                self.config.index_file,
                f"Corpus root has no {self.config.index_file} indexing the topics",
            )


@register_rule
class TopicNotIndexedRule(Rule):
    """Every topic document is reachable from the index.

    A link to the topic directory itself counts, since GitHub shows the
    directory listing.
    """

    code = "DL302"
    name = "topic-not-indexed"
    description = "Topic document is not linked from the index"
    default_severity = Severity.WARNING

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        if corpus.index_document is None:
            return

        linked = indexed_paths(corpus)
        for topic in corpus.topics:
            if topic.document is None:
                continue
            if topic.document in linked or topic.directory in linked:
                continue
            yield self.finding(
                self.config.index_file,
                f"Topic '{topic.name}' ({topic.document.as_posix()}) is not linked "
                f"from {self.config.index_file}",
            )


@register_rule
class TopicLayoutRule(Rule):
    """A topic directory holds a Markdown document with the same name."""

    code = "DL303"
    name = "topic-layout"
    description = "Topic directory has no Markdown document named after it"
    default_severity = Severity.WARNING

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        for topic in corpus.topics:
            if topic.document is None:
                expected = topic.directory / f"{topic.name}{self.config.markdown_extensions[0]}"
                yield self.finding(
                    topic.directory,
                    f"Topic directory '{topic.name}' has no {expected.as_posix()}",
                )
