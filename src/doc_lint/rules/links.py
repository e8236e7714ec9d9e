"""
Cross-document link rules.

The standards corpus links topics to each other with relative paths and
URL-encoded spaces (``../Code%20Style/Code%20Style.md``). These rules check
that every such link lands on a real file, and on a real heading when it
carries a ``#fragment``.
"""

from collections.abc import Iterator

from doc_lint.corpus import DocumentCorpus
from doc_lint.parser.markdown_scanner import Link, MarkdownDocument
from doc_lint.rules.base import DocumentRule, Finding, Severity
from doc_lint.rules.registry import register_rule


def _describe(link: Link) -> str:
    return link.target.strip()


@register_rule
class BrokenLinkRule(DocumentRule):
    """Relative links must point at an existing file or directory.

    Features:
        - ``%20`` and other escapes decoded before the lookup
        - Leading ``/`` resolves against the corpus root
        - Case mismatches reported as such (they work on macOS, not on GitHub)
    """

    code = "DL001"
    name = "broken-link"
    description = "Relative link target does not exist"
    default_severity = Severity.ERROR

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        for link in doc.relative_links:
            if link.is_image:
                continue
            target = corpus.resolve(doc, link)
            if corpus.exists(target):
                continue

            if corpus.exists_ignoring_case(target):
                message = f"Link target '{_describe(link)}' differs in case from the file on disk"
            else:
                message = f"Link target '{_describe(link)}' does not exist"
            yield self.finding(doc.path, message, line=link.line, column=link.column)


@register_rule
class MissingAnchorRule(DocumentRule):
    """``#fragment`` links must match a heading or HTML anchor.

    Same-document anchors are checked against the document's own
    headings; cross-document anchors only when the target is a Markdown
    document inside the corpus.
    """

    code = "DL002"
    name = "missing-anchor"
    description = "Link fragment does not match any heading in the target document"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        if not self.config.check_anchors:
            return

        for link in doc.anchor_links:
            if link.fragment:
                yield from self._check_fragment(doc, link, doc)

        for link in doc.relative_links:
            if not link.fragment:
                continue
            target = corpus.resolve(doc, link)
            if not corpus.exists(target):
                continue
            target_doc = corpus.document_at(target)
            if target_doc is not None:
                yield from self._check_fragment(doc, link, target_doc)

    def _check_fragment(
        self, doc: MarkdownDocument, link: Link, target_doc: MarkdownDocument
    ) -> Iterator[Finding]:
        slugs = target_doc.anchor_slugs
        if link.fragment in slugs:
            return

        if link.fragment.lower() in slugs:
            message = (
                f"Anchor '#{link.fragment}' should be lowercase "
                f"('#{link.fragment.lower()}')"
            )
        else:
            message = (
                f"Anchor '#{link.fragment}' not found in "
                f"{target_doc.path.as_posix()}"
            )
        yield self.finding(doc.path, message, line=link.line, column=link.column)


@register_rule
class UnencodedSpaceRule(DocumentRule):
    """Link destinations must encode spaces as ``%20``.

    GitHub does not render ``[Code Style](Code Style/Code Style.md)`` as a
    link at all.
    """

    code = "DL003"
    name = "unencoded-space"
    description = "Link destination contains a raw space instead of %20"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        for link in doc.links:
            if not link.raw_whitespace:
                continue
            encoded = link.target.strip().replace(" ", "%20")
            yield self.finding(
                doc.path,
                f"Link destination '{link.target.strip()}' contains spaces; use '{encoded}'",
                line=link.line,
                column=link.column,
            )


@register_rule
class UndefinedReferenceRule(DocumentRule):
    """Reference-style links need a matching ``[label]: target`` definition."""

    code = "DL004"
    name = "undefined-reference"
    description = "Reference-style link uses a label with no definition"
    default_severity = Severity.ERROR

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        for ref in doc.undefined_references:
            yield self.finding(
                doc.path,
                f"No definition for reference label '[{ref.label}]'",
                line=ref.line,
                column=ref.column,
            )
