"""
Image rules.

Each topic keeps its screenshots and diagrams in ``<Topic>/Images/`` and
embeds them by relative path. These rules check the embeds resolve, that
they stay inside the topic's own image folder, and flag images nobody
embeds any more.
"""

from collections.abc import Iterator
from pathlib import Path

from doc_lint.corpus import DocumentCorpus
from doc_lint.parser.markdown_scanner import MarkdownDocument
from doc_lint.rules.base import DocumentRule, Finding, Rule, Severity
from doc_lint.rules.registry import register_rule


@register_rule
class MissingImageRule(DocumentRule):
    """Embedded images must exist."""

    code = "DL101"
    name = "missing-image"
    description = "Embedded image file does not exist"
    default_severity = Severity.ERROR

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        for image in doc.images:
            if not image.is_relative:
                continue
            target = corpus.resolve(doc, image)
            if corpus.exists(target):
                continue

            if corpus.exists_ignoring_case(target):
                message = f"Image '{image.target.strip()}' differs in case from the file on disk"
            else:
                message = f"Image '{image.target.strip()}' does not exist"
            yield self.finding(doc.path, message, line=image.line, column=image.column)


@register_rule
class ImageOutsideFolderRule(DocumentRule):
    """Topic documents embed images from their own ``Images/`` folder.

    Root-level documents (the index) are exempt: they do not own a folder.
    """

    code = "DL102"
    name = "image-outside-folder"
    description = "Topic document embeds an image from outside its Images/ folder"
    default_severity = Severity.WARNING

    def check_document(self, doc: MarkdownDocument, corpus: DocumentCorpus) -> Iterator[Finding]:
        topic = corpus.topic_for(doc.path)
        if topic is None:
            return

        expected = topic.directory / self.config.images_dir
        for image in doc.images:
            if not image.is_relative:
                continue
            relative = corpus.relative_to_root(corpus.resolve(doc, image))
            if relative is not None and relative.parts[: len(expected.parts)] == expected.parts:
                continue
            yield self.finding(
                doc.path,
                f"Image '{image.target.strip()}' is not inside '{expected.as_posix()}/'",
                line=image.line,
                column=image.column,
            )


@register_rule
class UnreferencedImageRule(Rule):
    """Images in an ``Images/`` folder should be used by some document."""

    code = "DL103"
    name = "unreferenced-image"
    description = "Image in an Images/ folder is not referenced by any document"
    default_severity = Severity.INFO

    def check(self, corpus: DocumentCorpus) -> Iterator[Finding]:
        referenced: set[Path] = set()
        for doc in corpus.documents.values():
            # Plain links to a full-size screenshot count as references too
            for link in doc.relative_links:
                relative = corpus.relative_to_root(corpus.resolve(doc, link))
                if relative is not None:
                    referenced.add(relative)

        for image in corpus.image_files():
            if image not in referenced:
                yield self.finding(image, "Image is not referenced by any document")
