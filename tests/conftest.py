"""
Shared pytest fixtures for doc-lint tests.

This module provides:
- A clean sample standards corpus (root README + topic directories)
- A ``make_corpus`` factory for building small corpora per test
- Quiet, deterministic logging
"""

import sys
from pathlib import Path

import pytest

# Ensure doc_lint package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from doc_lint.logging import clear_context, configure_logging


# Not a real PNG; only existence matters to the linter
PNG_BYTES = b"\x89PNG\r\n\x1a\n"


def write_corpus(root: Path, files: dict[str, str | bytes]) -> Path:
    """Write a mapping of relative path -> content under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep structlog output off stdout and below WARNING during tests."""
    configure_logging(level="WARNING", json_format=True)
    yield
    clear_context()


# =============================================================================
# Corpora
# =============================================================================


CLEAN_CORPUS = {
    "README.md": (
        "# iOS Standards\n"
        "\n"
        "## Topics\n"
        "\n"
        "- [Accessibility](Accessibility/Accessibility.md)\n"
        "- [Code Style](Code%20Style/Code%20Style.md)\n"
        "- [Testing](Testing/Testing.md#first-principles)\n"
    ),
    "Accessibility/Accessibility.md": (
        "# Accessibility\n"
        "\n"
        "## VoiceOver\n"
        "\n"
        "![VoiceOver rotor](Images/rotor.png)\n"
        "\n"
        "See the [naming rules](../Code%20Style/Code%20Style.md#naming) and\n"
        "[WCAG](https://www.w3.org/WAI/standards-guidelines/wcag/).\n"
    ),
    "Accessibility/Images/rotor.png": PNG_BYTES,
    "Code Style/Code Style.md": (
        "# Code Style\n"
        "\n"
        "## Naming\n"
        "\n"
        "Use `[weak self]` in escaping closures.\n"
        "\n"
        "```swift\n"
        "let text = \"[not a link](missing.md)\"\n"
        "```\n"
        "\n"
        "## Formatting\n"
        "\n"
        "### Line Length\n"
        "\n"
        "Back to [Naming](#naming).\n"
    ),
    "Testing/Testing.md": (
        "# Testing\n"
        "\n"
        "## FIRST Principles\n"
        "\n"
        "<img src=\"Images/first.png\" width=\"300\">\n"
        "\n"
        "Branch with [Gitflow][gitflow].\n"
        "\n"
        "[gitflow]: https://nvie.com/posts/a-successful-git-branching-model/\n"
    ),
    "Testing/Images/first.png": PNG_BYTES,
}


@pytest.fixture
def standards_corpus(tmp_path):
    """A small standards corpus with no problems at all."""
    return write_corpus(tmp_path / "standards", CLEAN_CORPUS)


@pytest.fixture
def make_corpus(tmp_path):
    """Factory writing a corpus from a dict of relative path -> content."""
    counter = {"n": 0}

    def _make(files: dict[str, str | bytes]) -> Path:
        counter["n"] += 1
        return write_corpus(tmp_path / f"corpus{counter['n']}", files)

    return _make


@pytest.fixture
def png_bytes():
    return PNG_BYTES


MESSY_CORPUS = {
    "README.md": (
        "# Standards\n"
        "\n"
        "- [Architecture](Architecture/Architecture.md)\n"
        "- [Networking](Networking/Networking.md)\n"
    ),
    "Architecture/Architecture.md": (
        "# Architecture\n"
        "\n"
        "#### Layers\n"
        "\n"
        "![Diagram](Images/layers.png)\n"
        "\n"
        "```swift\n"
        "struct Layer {}\n"
    ),
    "Architecture/Images/old.png": PNG_BYTES,
    "Testing/Testing.md": "# Testing\n",
}


@pytest.fixture
def messy_corpus(tmp_path):
    """A corpus with one error, warning or info finding from six rules.

    DL001 Networking link, DL101 layers.png, DL201 swift fence,
    DL202 H1 -> H4, DL302 Testing not indexed, DL103 old.png.
    """
    return write_corpus(tmp_path / "messy", MESSY_CORPUS)
