"""Tests for the corpus loader."""

from pathlib import Path

import pytest

from doc_lint.config import DocLintConfig
from doc_lint.corpus import DocumentCorpus
from doc_lint.errors import CorpusError


# =============================================================================
# Loading
# =============================================================================

class TestCorpusLoad:
    """Tests for walking and scanning the corpus."""

    def test_loads_documents(self, standards_corpus):
        """Test every Markdown document is scanned with a root-relative path."""
        corpus = DocumentCorpus(standards_corpus).load()

        assert sorted(p.as_posix() for p in corpus.documents) == [
            "Accessibility/Accessibility.md",
            "Code Style/Code Style.md",
            "README.md",
            "Testing/Testing.md",
        ]
        assert len(corpus) == 4
        assert corpus.documents[Path("README.md")].path == Path("README.md")

    def test_index_document(self, standards_corpus):
        """Test the root README is the index."""
        corpus = DocumentCorpus(standards_corpus).load()

        assert corpus.index_document is not None
        assert corpus.index_document.headings[0].text == "iOS Standards"

    def test_missing_root(self, tmp_path):
        """Test CorpusError for a root that does not exist."""
        with pytest.raises(CorpusError) as exc_info:
            DocumentCorpus(tmp_path / "nope").load()

        assert exc_info.value.context.path == str(tmp_path / "nope")

    def test_root_is_file(self, tmp_path):
        """Test CorpusError for a root that is a file."""
        path = tmp_path / "README.md"
        path.write_text("# Hi\n")

        with pytest.raises(CorpusError):
            DocumentCorpus(path).load()

    def test_skip_patterns(self, make_corpus):
        """Test skipped directories are neither scanned nor topics."""
        root = make_corpus({
            "README.md": "# Docs\n",
            ".github/PULL_REQUEST_TEMPLATE.md": "# PR\n",
            "node_modules/pkg/README.md": "# Pkg\n",
            "Topic/Topic.md": "# Topic\n",
        })

        corpus = DocumentCorpus(root).load()

        assert sorted(p.as_posix() for p in corpus.documents) == ["README.md", "Topic/Topic.md"]
        assert [t.name for t in corpus.topics] == ["Topic"]

    def test_custom_extensions(self, make_corpus):
        """Test markdown_extensions controls which files are documents."""
        root = make_corpus({
            "README.md": "# Docs\n",
            "notes.txt": "[x](missing.md)\n",
            "guide.markdown": "# Guide\n",
        })

        corpus = DocumentCorpus(root, DocLintConfig(markdown_extensions=["md"])).load()

        assert [p.as_posix() for p in corpus.documents] == ["README.md"]

    def test_unreadable_document_collected(self, make_corpus):
        """Test non-UTF-8 documents are collected, not fatal."""
        root = make_corpus({
            "README.md": "# Docs\n",
            "Topic/Topic.md": "# Caf\xe9\n".encode("latin-1"),
        })

        corpus = DocumentCorpus(root).load()

        assert Path("Topic/Topic.md") not in corpus.documents
        assert [u.path for u in corpus.unreadable] == [Path("Topic/Topic.md")]
        # Still a topic: the directory holds a document, just not a readable one
        assert [t.name for t in corpus.topics] == ["Topic"]


# =============================================================================
# Topics
# =============================================================================

class TestTopics:
    """Tests for topic discovery."""

    def test_topics(self, standards_corpus):
        """Test topic documents and image folders are found."""
        corpus = DocumentCorpus(standards_corpus).load()

        topics = {t.name: t for t in corpus.topics}
        assert list(topics) == ["Accessibility", "Code Style", "Testing"]
        assert topics["Code Style"].document == Path("Code Style/Code Style.md")
        assert topics["Code Style"].images_dir is None
        assert topics["Accessibility"].image_files == [Path("Accessibility/Images/rotor.png")]

    def test_topic_without_document(self, make_corpus, png_bytes):
        """Test an images-only directory is a topic with no document."""
        root = make_corpus({
            "README.md": "# Docs\n",
            "Shared/Images/logo.png": png_bytes,
            "Shared/Images/notes.txt": "not an image",
            "empty/.keep": "",
        })

        corpus = DocumentCorpus(root).load()

        assert [t.name for t in corpus.topics] == ["Shared"]
        shared = corpus.topics[0]
        assert shared.document is None
        assert shared.image_files == [Path("Shared/Images/logo.png")]

    def test_nested_images(self, make_corpus, png_bytes):
        """Test images in subfolders of Images/ belong to the topic."""
        root = make_corpus({
            "Topic/Topic.md": "# Topic\n",
            "Topic/Images/ios/a.png": png_bytes,
        })

        corpus = DocumentCorpus(root).load()

        assert corpus.image_files() == [Path("Topic/Images/ios/a.png")]

    def test_topic_for(self, standards_corpus):
        """Test documents and images map to their topic; root files do not."""
        corpus = DocumentCorpus(standards_corpus).load()

        assert corpus.topic_for(Path("Testing/Testing.md")).name == "Testing"
        assert corpus.topic_for(Path("Testing/Images/first.png")).name == "Testing"
        assert corpus.topic_for(Path("README.md")) is None


# =============================================================================
# Resolution and Existence
# =============================================================================

class TestResolve:
    """Tests for link resolution and exact-case existence."""

    @pytest.fixture
    def corpus(self, standards_corpus):
        return DocumentCorpus(standards_corpus).load()

    def link_from(self, corpus, doc_path, target):
        doc = corpus.documents[Path(doc_path)]
        for link in doc.links:
            if link.target == target:
                return doc, link
        raise AssertionError(f"{target} not in {doc_path}")

    def test_resolve_relative(self, corpus, standards_corpus):
        """Test ../ and %20 are resolved against the linking document."""
        doc, link = self.link_from(
            corpus, "Accessibility/Accessibility.md", "../Code%20Style/Code%20Style.md#naming"
        )

        target = corpus.resolve(doc, link)

        assert corpus.relative_to_root(target) == Path("Code Style/Code Style.md")
        assert corpus.exists(target)
        assert corpus.document_at(target).headings[0].text == "Code Style"

    def test_exists_is_case_sensitive(self, corpus, standards_corpus):
        """Test a differently-cased path does not exist but matches ignoring case."""
        wrong = standards_corpus / "testing" / "Testing.md"

        assert not corpus.exists(wrong)
        assert corpus.exists_ignoring_case(wrong)

    def test_exists_directory(self, corpus, standards_corpus):
        """Test directories count as existing."""
        assert corpus.exists(standards_corpus / "Testing")

    def test_outside_root(self, corpus, tmp_path):
        """Test paths outside the root fall back to the filesystem."""
        outside = tmp_path / "outside.md"
        outside.write_text("# Outside\n")

        assert corpus.relative_to_root(outside) is None
        assert corpus.exists(outside)
        assert corpus.document_at(outside) is None
