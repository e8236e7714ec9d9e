"""Tests for the lint rules."""

import pytest

from doc_lint.config import DocLintConfig
from doc_lint.errors import InvalidConfigError
from doc_lint.orchestrator import LintOrchestrator
from doc_lint.rules import Severity
from doc_lint.rules.registry import get_rule_class, get_rules, list_rules


def run_rule(root, code, **config):
    """Run a single rule over a corpus and return its findings."""
    report = LintOrchestrator(root, config=DocLintConfig(**config)).run(rules=[code])
    return report.sorted_findings()


# =============================================================================
# Registry Tests
# =============================================================================

class TestRegistry:
    """Tests for rule registration and lookup."""

    def test_all_rules_registered(self):
        """Test every built-in rule is available, ordered by code."""
        codes = [cls.code for cls in list_rules()]

        assert codes == [
            "DL000", "DL001", "DL002", "DL003", "DL004",
            "DL101", "DL102", "DL103",
            "DL201", "DL202", "DL203", "DL204",
            "DL301", "DL302", "DL303",
        ]

    def test_lookup_by_code_and_name(self):
        """Test rules resolve by code or by name."""
        assert get_rule_class("DL001") is get_rule_class("broken-link")

    def test_unknown_rule(self):
        """Test unknown rules raise KeyError listing the available codes."""
        with pytest.raises(KeyError, match="not found"):
            get_rule_class("no-such-rule")

    def test_get_rules_skips_disabled(self):
        """Test disabled rules are not instantiated, by code or name."""
        config = DocLintConfig(disabled_rules=["DL103", "heading-increment"])

        codes = [rule.code for rule in get_rules(config)]

        assert "DL103" not in codes
        assert "DL202" not in codes
        assert "DL001" in codes

    def test_severity_override(self):
        """Test configured severities replace the default."""
        config = DocLintConfig(severity_overrides={"unreferenced-image": "error"})

        (rule,) = get_rules(config, only=["DL103"])

        assert rule.severity is Severity.ERROR

    @pytest.mark.parametrize("config", [
        {"disabled_rules": ["no-such-rule"]},
        {"severity_overrides": {"DL999": "error"}},
    ])
    def test_unknown_configured_rule(self, config):
        """Test disabling or overriding an unregistered rule is a config error."""
        with pytest.raises(InvalidConfigError, match="Unknown rule"):
            get_rules(DocLintConfig(**config))


# =============================================================================
# Link Rules
# =============================================================================

class TestBrokenLink:
    """DL001 broken-link."""

    def test_missing_target(self, make_corpus):
        """Test links to missing files are reported with position."""
        root = make_corpus({
            "README.md": "# Docs\n[A](A/A.md)\nSee [B](B/B.md).\n",
            "A/A.md": "# A\n",
        })

        findings = run_rule(root, "DL001")

        assert len(findings) == 1
        finding = findings[0]
        assert finding.path == "README.md"
        assert finding.line == 3
        assert finding.column == 5
        assert finding.severity is Severity.ERROR
        assert finding.message == "Link target 'B/B.md' does not exist"

    def test_case_mismatch(self, make_corpus):
        """Test links differing only in case are reported as such."""
        root = make_corpus({
            "README.md": "[A](a/A.md)\n",
            "A/A.md": "# A\n",
        })

        findings = run_rule(root, "DL001")

        assert [f.message for f in findings] == [
            "Link target 'a/A.md' differs in case from the file on disk"
        ]

    def test_valid_links(self, make_corpus):
        """Test directories, root-absolute paths, encoded spaces and anchors."""
        root = make_corpus({
            "README.md": (
                "[Dir](Code%20Style/)\n"
                "[Top](#top)\n"
                "[Web](https://swift.org)\n"
                "![Missing image is another rule](Images/none.png)\n"
            ),
            "Code Style/Code Style.md": "[Home](/README.md) [Up](../README.md)\n",
        })

        assert run_rule(root, "DL001") == []


class TestMissingAnchor:
    """DL002 missing-anchor."""

    @pytest.fixture
    def root(self, make_corpus):
        return make_corpus({
            "README.md": (
                "# Intro\n"
                "[Ok](T/T.md#setup)\n"
                "[Bad](T/T.md#nope)\n"
                "[Case](T/T.md#Setup)\n"
                "[Self](#intro)\n"
                "[Missing](#zzz)\n"
                "[Gone](Gone/Gone.md#x)\n"
            ),
            "T/T.md": "# T\n\n## Setup\n",
        })

    def test_anchor_findings(self, root):
        """Test unknown and wrongly-cased fragments, in and across documents."""
        findings = run_rule(root, "DL002")

        assert [(f.line, f.message) for f in findings] == [
            (3, "Anchor '#nope' not found in T/T.md"),
            (4, "Anchor '#Setup' should be lowercase ('#setup')"),
            (6, "Anchor '#zzz' not found in README.md"),
        ]
        assert all(f.severity is Severity.WARNING for f in findings)

    def test_disabled_by_config(self, root):
        """Test check_anchors: false turns the rule off."""
        assert run_rule(root, "DL002", check_anchors=False) == []

    def test_html_anchor_target(self, make_corpus):
        """Test fragments may point at explicit HTML anchors."""
        root = make_corpus({
            "README.md": '<a id="legacy"></a>\n\n[Legacy](#legacy)\n',
        })

        assert run_rule(root, "DL002") == []

    def test_heading_with_inline_anchor(self, make_corpus):
        """Test a heading wrapping an HTML anchor answers to its text slug and the anchor id."""
        root = make_corpus({
            "README.md": "[Start](T/T.md#getting-started) [Top](T/T.md#top)\n",
            "T/T.md": (
                '## <a id="top"></a>Getting Started\n'
                "\n"
                "[Again](#getting-started)\n"
            ),
        })

        assert run_rule(root, "DL002") == []


class TestUnencodedSpace:
    """DL003 unencoded-space."""

    def test_raw_space(self, make_corpus):
        """Test destinations with raw spaces get the encoded suggestion."""
        root = make_corpus({
            "README.md": "- [Tools](Tools and Utilities/Tools.md)\n- [Ok](Code%20Style/Code%20Style.md)\n",
        })

        findings = run_rule(root, "DL003")

        assert len(findings) == 1
        assert findings[0].line == 1
        assert findings[0].column == 3
        assert findings[0].message == (
            "Link destination 'Tools and Utilities/Tools.md' contains spaces; "
            "use 'Tools%20and%20Utilities/Tools.md'"
        )


class TestUndefinedReference:
    """DL004 undefined-reference."""

    def test_undefined_label(self, make_corpus):
        """Test reference links without a definition."""
        root = make_corpus({
            "README.md": "Read [the guide][guide] and [SwiftLint][].\n\n[swiftlint]: https://github.com/realm/SwiftLint\n",
        })

        findings = run_rule(root, "DL004")

        assert [f.message for f in findings] == ["No definition for reference label '[guide]'"]
        assert findings[0].column == 6


# =============================================================================
# Image Rules
# =============================================================================

class TestMissingImage:
    """DL101 missing-image."""

    def test_missing_and_case(self, make_corpus, png_bytes):
        """Test missing images and case mismatches."""
        root = make_corpus({
            "A/A.md": (
                "# A\n"
                "![Missing](Images/missing.png)\n"
                "![Shot](Images/Shot.png)\n"
                "![Ok](Images/shot.png)\n"
                "![Web](https://example.com/logo.png)\n"
            ),
            "A/Images/shot.png": png_bytes,
        })

        findings = run_rule(root, "DL101")

        assert [(f.path, f.line, f.message) for f in findings] == [
            ("A/A.md", 2, "Image 'Images/missing.png' does not exist"),
            ("A/A.md", 3, "Image 'Images/Shot.png' differs in case from the file on disk"),
        ]

    def test_html_image(self, make_corpus):
        """Test <img src> embeds are checked too."""
        root = make_corpus({
            "A/A.md": '<img src="Images/gone.png" width="200">\n',
        })

        findings = run_rule(root, "DL101")

        assert len(findings) == 1
        assert findings[0].message == "Image 'Images/gone.png' does not exist"


class TestImageOutsideFolder:
    """DL102 image-outside-folder."""

    def test_foreign_image(self, make_corpus, png_bytes):
        """Test topic documents embedding another topic's image."""
        root = make_corpus({
            "README.md": "![Logo](A/Images/a.png)\n",
            "A/A.md": "![Own](Images/a.png)\n![Nested](Images/ios/b.png)\n",
            "A/Images/a.png": png_bytes,
            "A/Images/ios/b.png": png_bytes,
            "B/B.md": "![Borrowed](../A/Images/a.png)\n",
        })

        findings = run_rule(root, "DL102")

        assert [(f.path, f.message) for f in findings] == [
            ("B/B.md", "Image '../A/Images/a.png' is not inside 'B/Images/'"),
        ]


class TestUnreferencedImage:
    """DL103 unreferenced-image."""

    def test_unreferenced(self, make_corpus, png_bytes):
        """Test images no document embeds or links to."""
        root = make_corpus({
            "A/A.md": "![Used](Images/used.png)\n[Full size](Images/big.png)\n",
            "A/Images/used.png": png_bytes,
            "A/Images/big.png": png_bytes,
            "A/Images/unused.png": png_bytes,
        })

        findings = run_rule(root, "DL103")

        assert len(findings) == 1
        finding = findings[0]
        assert finding.path == "A/Images/unused.png"
        assert finding.line is None
        assert finding.severity is Severity.INFO
        assert finding.message == "Image is not referenced by any document"

    def test_referenced_from_other_topic(self, make_corpus, png_bytes):
        """Test a reference from anywhere in the corpus counts."""
        root = make_corpus({
            "README.md": "![Shared](A/Images/a.png)\n",
            "A/Images/a.png": png_bytes,
        })

        assert run_rule(root, "DL103") == []


# =============================================================================
# Structure Rules
# =============================================================================

class TestUnreadableDocument:
    """DL000 unreadable-document."""

    def test_non_utf8(self, make_corpus):
        """Test undecodable documents become findings."""
        root = make_corpus({
            "README.md": "# Docs\n",
            "A/A.md": "# Caf\xe9\n".encode("latin-1"),
        })

        findings = run_rule(root, "DL000")

        assert len(findings) == 1
        assert findings[0].path == "A/A.md"
        assert findings[0].message.startswith("Cannot read document:")
        assert findings[0].severity is Severity.ERROR


class TestUnclosedCodeFence:
    """DL201 unclosed-code-fence."""

    def test_unclosed(self, make_corpus):
        """Test the fence is reported at its opening line."""
        root = make_corpus({
            "A.md": "# A\n\n```swift\nlet a = 1\n",
            "B.md": "# B\n\n~~~\ntext\n",
            "C.md": "# C\n\n```\nclosed\n```\n",
        })

        findings = run_rule(root, "DL201")

        assert [(f.path, f.line, f.message) for f in findings] == [
            ("A.md", 3, "Code fence '```' (swift) is never closed"),
            ("B.md", 3, "Code fence '~~~' is never closed"),
        ]


class TestHeadingRules:
    """DL202 heading-increment, DL203 first-heading-level, DL204 multiple-top-level."""

    def test_heading_jump(self, make_corpus):
        """Test skipping a level is reported; going back up is not."""
        root = make_corpus({
            "A.md": "# A\n## B\n#### D\n## E\n### F\n",
        })

        findings = run_rule(root, "DL202")

        assert [(f.line, f.message) for f in findings] == [
            (3, "Heading level jumps from H2 to H4: 'D'"),
        ]

    def test_first_heading_level(self, make_corpus):
        """Test documents must start with an H1."""
        root = make_corpus({
            "A.md": "Intro text\n\n## Start\n\n# Later\n",
            "B.md": "No headings at all.\n",
        })

        findings = run_rule(root, "DL203")

        assert [(f.path, f.line, f.message) for f in findings] == [
            ("A.md", 3, "First heading is H2, expected H1: 'Start'"),
        ]

    def test_multiple_top_level(self, make_corpus):
        """Test each additional H1 is reported."""
        root = make_corpus({
            "A.md": "# A\n\ntext\n\nB\n===\n",
        })

        findings = run_rule(root, "DL204")

        assert [(f.line, f.message) for f in findings] == [
            (5, "Additional H1 'B' (first H1 on line 1)"),
        ]


# =============================================================================
# Layout Rules
# =============================================================================

class TestLayoutRules:
    """DL301 missing-index, DL302 topic-not-indexed, DL303 topic-layout."""

    def test_missing_index(self, make_corpus):
        """Test a corpus without a root README."""
        root = make_corpus({"A/A.md": "# A\n"})

        findings = run_rule(root, "DL301")

        assert [(f.path, f.message) for f in findings] == [
            ("README.md", "Corpus root has no README.md indexing the topics"),
        ]

    def test_custom_index_file(self, make_corpus):
        """Test index_file is configurable."""
        root = make_corpus({"index.md": "# Docs\n"})

        assert run_rule(root, "DL301", index_file="index.md") == []

    def test_topic_not_indexed(self, make_corpus):
        """Test topics missing from the index; directory links count."""
        root = make_corpus({
            "README.md": "- [A](A/A.md)\n- [B](B/)\n",
            "A/A.md": "# A\n",
            "B/B.md": "# B\n",
            "C/C.md": "# C\n",
        })

        findings = run_rule(root, "DL302")

        assert [(f.path, f.message) for f in findings] == [
            ("README.md", "Topic 'C' (C/C.md) is not linked from README.md"),
        ]

    def test_topic_not_indexed_without_index(self, make_corpus):
        """Test no topic findings when the index itself is missing."""
        root = make_corpus({"A/A.md": "# A\n"})

        assert run_rule(root, "DL302") == []

    def test_topic_layout(self, make_corpus, png_bytes):
        """Test topic directories without a same-named document."""
        root = make_corpus({
            "README.md": "# Docs\n",
            "Misc/notes.md": "# Notes\n",
            "Shared/Images/logo.png": png_bytes,
            "Good/Good.md": "# Good\n",
        })

        findings = run_rule(root, "DL303")

        assert [(f.path, f.message) for f in findings] == [
            ("Misc", "Topic directory 'Misc' has no Misc/Misc.md"),
            ("Shared", "Topic directory 'Shared' has no Shared/Shared.md"),
        ]
