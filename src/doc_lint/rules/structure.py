"""
Markdown structure rules: code fences and heading hierarchy.
"""

from collections.abc import Iterator

from doc_lint.corpus import DocumentCorpus
from doc_lint.parser.markdown_scanner import MarkdownDocument
from doc_lint.rules.base import DocumentRule, Finding, Rule, Severity
from doc_lint.rules.registry import register_rule


@register_rule
class UnreadableDocumentRule(Rule):
    """Documents that are not valid UTF-8 cannot be checked at all."""

    code = "DL000"
    name = "unreadable-document"
    description = "Document could not be read as UTF-8"
    default_severity = Severity.ERROR

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        for unreadable in corpus.unreadable:
            cause = unreadable.error.cause or unreadable.error
            yield self.finding(unreadable.path, f"Cannot read document: {cause}")


@register_rule
class UnclosedCodeFenceRule(DocumentRule):
    """Every fenced code block must be closed.

    An unclosed fence swallows the rest of the document into a code block
    on GitHub, so everything after it silently stops rendering.
    """

    code = "DL201"
    name = "unclosed-code-fence"
    description = "Code fence opened and never closed"
    default_severity = Severity.ERROR

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        for fence in doc.unclosed_fences:
            info = f" ({fence.info})" if fence.info else ""
            yield self.finding(
                doc.path,
                f"Code fence '{fence.marker}'{info} is never closed",
                line=fence.start_line,
            )


@register_rule
class HeadingIncrementRule(DocumentRule):
    """Heading levels only go down one step at a time (H2 -> H3, not H2 -> H4)."""

    code = "DL202"
    name = "heading-increment"
    description = "Heading level jumps by more than one"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        previous = None
        for heading in doc.headings:
            if previous is not None and heading.level > previous.level + 1:
                yield self.finding(
                    doc.path,
                    f"Heading level jumps from H{previous.level} to H{heading.level}: "
                    f"'{heading.text}'",
                    line=heading.line,
                )
            previous = heading


@register_rule
class FirstHeadingLevelRule(DocumentRule):
    code = "DL203"
    name = "first-heading-level"
    description = "First heading in a document is not level 1"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        if doc.headings and doc.headings[0].level != 1:
            first = doc.headings[0]
            yield self.finding(
                doc.path,
                f"First heading is H{first.level}, expected H1: '{first.text}'",
                line=first.line,
            )


@register_rule
class MultipleTopLevelRule(DocumentRule):
    code = "DL204"
    name = "multiple-top-level"
    description = "More than one level-1 heading in a document"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        top_level = [h for h in doc.headings if h.level == 1]
        for extra in top_level[1:]:
            yield self.finding(
                doc.path,
                f"Additional H1 '{extra.text}' (first H1 on line {top_level[0].line})",
                line=extra.line,
            )
