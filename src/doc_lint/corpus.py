"""
Documentation corpus loader.

Walks a corpus root, scans every Markdown document once, and answers the
questions rules ask about the tree: where does a link point, does that
file exist with exactly that spelling, which topic does a document belong
to, which images sit in ``Images/`` folders.

Example:
    >>> corpus = DocumentCorpus(Path("ios-standards")).load()
    >>> corpus.index_document.path
    PosixPath('README.md')
    >>> [t.name for t in corpus.topics][:2]
    ['Accessibility', 'Architecture']
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from doc_lint.config import DocLintConfig
from doc_lint.errors import CorpusError, DocumentReadError
from doc_lint.logging import get_logger
from doc_lint.parser.markdown_scanner import Link, MarkdownDocument, MarkdownScanner

logger = get_logger(__name__)


@dataclass
class Topic:
    """A top-level topic directory.

    Attributes:
        name: Directory name, e.g. ``Code Style``
        directory: Path relative to the corpus root
        document: Relative path of ``<name>/<name>.md`` if present
        images_dir: Relative path of the topic's image folder if present
        image_files: Relative paths of images inside ``images_dir``
    """
    name: str
    directory: Path
    document: Path | None = None
    images_dir: Path | None = None
    image_files: list[Path] = field(default_factory=list)


@dataclass
class UnreadableDocument:
    path: Path
    error: DocumentReadError


class DocumentCorpus:
    """A scanned tree of Markdown documents.

    Manifesto:
        Scan each document exactly once. Rules run against the in-memory
        corpus, never against the filesystem directly, except to ask
        whether a link target exists.

    Architecture:
        ```
        root/
          README.md ─────────────► index_document
          Code Style/
            Code Style.md ───────► Topic.document
            Images/*.png ────────► Topic.image_files
          Testing/ ...
              │
              ▼
        documents: {relative path: MarkdownDocument}
        ```

    Features:
        - Sorted, deterministic walk with skip patterns
        - Unreadable documents collected instead of aborting
        - Exact-case existence checks (GitHub is case-sensitive)
        - Link resolution relative to the linking document, or to the
          corpus root for ``/``-prefixed paths

    Guardrails:
        - Do NOT trust ``Path.exists()`` on macOS for case
          ✅ Compare each path component against the directory listing

    Tags:
        - corpus
        - filesystem
        - core_infrastructure
    """

    def __init__(self, root: Path, config: DocLintConfig | None = None):
        self.root = Path(root)
        self.config = config or DocLintConfig()
        self.scanner = MarkdownScanner()

        self.documents: dict[Path, MarkdownDocument] = {}
        self.unreadable: list[UnreadableDocument] = []
        self.topics: list[Topic] = []
        self._listing_cache: dict[Path, set[str]] = {}

    def load(self) -> "DocumentCorpus":
        """Scan every Markdown document under the root.

        Returns:
            self, for chaining

        Raises:
            CorpusError: If the root does not exist or is not a directory
        """
        if not self.root.exists():
            raise CorpusError(f"Corpus root does not exist: {self.root}").with_context(
                path=str(self.root)
            )
        if not self.root.is_dir():
            raise CorpusError(f"Corpus root is not a directory: {self.root}").with_context(
                path=str(self.root)
            )

        self.documents = {}
        self.unreadable = []
        self._listing_cache = {}

        for relative in self._walk_files():
            if not self.config.is_markdown(relative):
                continue
            try:
                doc = self.scanner.scan_file(self.root / relative)
            except DocumentReadError as e:
                logger.warning("document_unreadable", path=relative.as_posix(), error=str(e))
                self.unreadable.append(UnreadableDocument(path=relative, error=e))
                continue
            doc.path = relative
            self.documents[relative] = doc

        self.topics = self._discover_topics()

        logger.info(
            "corpus_loaded",
            root=str(self.root),
            documents=len(self.documents),
            unreadable=len(self.unreadable),
            topics=len(self.topics),
        )
        return self

    def _walk_files(self) -> list[Path]:
        """All non-skipped files under the root, relative and sorted."""
        results = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            current = Path(dirpath).relative_to(self.root)
            dirnames[:] = sorted(
                d for d in dirnames if not self.config.should_skip(current / d)
            )
            for name in sorted(filenames):
                relative = current / name
                if not self.config.should_skip(relative):
                    results.append(relative)
        return results

    def _discover_topics(self) -> list[Topic]:
        topics = []
        for entry in sorted(self.root.iterdir(), key=lambda p: p.name):
            if not entry.is_dir() or self.config.should_skip(Path(entry.name)):
                continue

            directory = Path(entry.name)
            images_dir = directory / self.config.images_dir
            has_images = (self.root / images_dir).is_dir()
            has_docs = any(path.parts[0] == entry.name for path in self.documents) or any(
                u.path.parts[0] == entry.name for u in self.unreadable
            )
            if not has_docs and not has_images:
                continue

            topic = Topic(name=entry.name, directory=directory)

            for suffix in self.config.markdown_extensions:
                candidate = directory / f"{entry.name}{suffix}"
                if candidate in self.documents:
                    topic.document = candidate
                    break

            if has_images:
                topic.images_dir = images_dir
                topic.image_files = [
                    images_dir / path.relative_to(self.root / images_dir)
                    for path in sorted((self.root / images_dir).rglob("*"))
                    if path.is_file() and self.config.is_image(path)
                ]

            topics.append(topic)
        return topics

    @property
    def index_document(self) -> MarkdownDocument | None:
        return self.documents.get(Path(self.config.index_file))

    def topic_for(self, relative: Path) -> Topic | None:
        """Return the topic a document or image belongs to, if any."""
        parts = Path(relative).parts
        if len(parts) < 2:
            return None
        for topic in self.topics:
            if topic.name == parts[0]:
                return topic
        return None

    def image_files(self) -> list[Path]:
        """Every image inside any topic's image folder, relative to the root."""
        return [image for topic in self.topics for image in topic.image_files]

    def resolve(self, document: MarkdownDocument, link: Link) -> Path:
        """Absolute, normalized filesystem path a relative link points at.

        Args:
            document: Document containing the link (path relative to root)
            link: A link with ``kind == "relative"``

        Returns:
            Normalized absolute path (symlinks not resolved)
        """
        if link.path.startswith("/"):
            target = self.root / link.path.lstrip("/")
        else:
            target = self.root / document.path.parent / link.path
        return Path(os.path.normpath(os.path.abspath(target)))

    def relative_to_root(self, path: Path) -> Path | None:
        """Path relative to the corpus root, or None if it lies outside."""
        root = Path(os.path.normpath(os.path.abspath(self.root)))
        try:
            return Path(path).relative_to(root)
        except ValueError:
            return None

    def document_at(self, path: Path) -> MarkdownDocument | None:
        """Scanned document for an absolute path, if it is part of the corpus."""
        relative = self.relative_to_root(path)
        if relative is None:
            return None
        return self.documents.get(relative)

    def exists(self, path: Path) -> bool:
        """Whether ``path`` exists, matching case exactly inside the root."""
        relative = self.relative_to_root(path)
        if relative is None:
            return Path(path).exists()
        return self._exists_exact_case(relative)

    def exists_ignoring_case(self, path: Path) -> bool:
        return Path(path).exists() or self._exists_casefolded(path)

    def _exists_exact_case(self, relative: Path) -> bool:
        current = Path(os.path.normpath(os.path.abspath(self.root)))
        for part in relative.parts:
            if part not in self._listing(current):
                return False
            current = current / part
        return True

    def _exists_casefolded(self, path: Path) -> bool:
        relative = self.relative_to_root(path)
        if relative is None:
            return False
        current = Path(os.path.normpath(os.path.abspath(self.root)))
        for part in relative.parts:
            matches = [name for name in self._listing(current) if name.lower() == part.lower()]
            if not matches:
                return False
            current = current / matches[0]
        return True

    def _listing(self, directory: Path) -> set[str]:
        if directory not in self._listing_cache:
            try:
                self._listing_cache[directory] = set(os.listdir(directory))
            except OSError:
                self._listing_cache[directory] = set()
        return self._listing_cache[directory]

    def __len__(self) -> int:
        return len(self.documents)
