"""
Markdown scanner for documentation corpora.

Reads a Markdown document line by line and records the parts a link
checker cares about: links, images, headings, code fences and explicit
HTML anchors, each with its line number. It does not render Markdown.

Example:
    >>> scanner = MarkdownScanner()
    >>> doc = scanner.scan("# Testing\\n\\n![FIRST](Images/first.png)\\n", Path("Testing/Testing.md"))
    >>> doc.headings[0].slug
    'testing'
    >>> doc.images[0].path
    'Images/first.png'
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

from doc_lint.errors import DocumentReadError
from doc_lint.parser.anchors import (
    LINK_KIND_ANCHOR,
    LINK_KIND_EXTERNAL,
    LINK_KIND_RELATIVE,
    classify_target,
    normalize_label,
    slugify,
    unique_slug,
)


@dataclass
class Link:
    """A link or image reference found in a document.

    Attributes:
        target: Destination as written in the source
        text: Link text, or alt text for images
        line: 1-based line number
        column: 1-based column of the opening bracket or tag
        is_image: Whether this is an embedded image
        reference: Label, when written as a reference-style link
        raw_whitespace: Destination contains an unencoded space
        html: Came from an ``<img>`` or ``<a>`` tag
        kind: ``external``, ``anchor`` or ``relative`` (derived)
        path: URL-decoded path without query or fragment (derived)
        fragment: Decoded text after ``#``, if any (derived)
    """

    target: str
    text: str
    line: int
    column: int = 1
    is_image: bool = False
    reference: str | None = None
    raw_whitespace: bool = False
    html: bool = False
    kind: str = field(init=False)
    path: str = field(init=False)
    fragment: str | None = field(init=False)

    def __post_init__(self):
        self.kind, self.path, self.fragment = classify_target(self.target)

    @property
    def is_external(self) -> bool:
        return self.kind == LINK_KIND_EXTERNAL

    @property
    def is_relative(self) -> bool:
        return self.kind == LINK_KIND_RELATIVE


@dataclass
class Heading:
    """An ATX or Setext heading."""
    level: int
    text: str
    line: int
    slug: str = ""


@dataclass
class CodeFence:
    """A fenced code block. ``end_line`` is None when never closed."""
    marker: str
    info: str
    start_line: int
    end_line: int | None = None

    @property
    def is_closed(self) -> bool:
        return self.end_line is not None


@dataclass
class LinkDefinition:
    """A ``[label]: target`` reference definition."""
    label: str
    target: str
    line: int


@dataclass
class ReferenceUsage:
    """A reference-style link ``[text][label]`` waiting for its definition."""
    label: str
    text: str
    line: int
    column: int
    is_image: bool = False


@dataclass
class MarkdownDocument:
    """Everything the scanner found in one Markdown document."""

    path: Path
    links: list[Link] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)
    fences: list[CodeFence] = field(default_factory=list)
    definitions: dict[str, LinkDefinition] = field(default_factory=dict)
    references: list[ReferenceUsage] = field(default_factory=list)
    anchors: set[str] = field(default_factory=set)
    line_count: int = 0

    @property
    def images(self) -> list[Link]:
        return [link for link in self.links if link.is_image]

    @property
    def relative_links(self) -> list[Link]:
        return [link for link in self.links if link.kind == LINK_KIND_RELATIVE]

    @property
    def external_links(self) -> list[Link]:
        return [link for link in self.links if link.kind == LINK_KIND_EXTERNAL]

    @property
    def anchor_links(self) -> list[Link]:
        return [link for link in self.links if link.kind == LINK_KIND_ANCHOR]

    @property
    def anchor_slugs(self) -> set[str]:
        """All fragment names a link into this document may target."""
        return {h.slug for h in self.headings} | self.anchors

    @property
    def undefined_references(self) -> list[ReferenceUsage]:
        return [
            ref for ref in self.references
            if normalize_label(ref.label) not in self.definitions
        ]

    @property
    def unclosed_fences(self) -> list[CodeFence]:
        return [fence for fence in self.fences if not fence.is_closed]


class MarkdownScanner:
    """Scan Markdown text for links, images, headings and fences.

    Manifesto:
        The corpus is prose written for humans on GitHub. The scanner
        only needs to be right about the things a broken-link report
        depends on, and must never report a link that lives inside a
        code sample.

    Architecture:
        ```
        text.splitlines()
              │
              ▼
        for each line ──► inside fence? ──► only look for closing fence
              │
              ├──► strip HTML comments, blank inline code spans
              ├──► fence opener ──► CodeFence
              ├──► ATX / Setext ──► Heading (+ unique slug)
              ├──► [label]: dest ──► LinkDefinition
              └──► inline / loose / reference / autolink / HTML ──► Link
              │
              ▼
        resolve ReferenceUsage against definitions ──► Link
        ```

    Features:
        - Inline links and images, including images nested in link text
        - Reference links ``[text][label]`` and collapsed ``[label][]``
        - Autolinks ``<https://...>`` and ``<img src>`` / ``<a href>`` tags
        - Destinations with raw spaces (not rendered by GitHub) are kept
          and flagged so they can be reported
        - GitHub-style heading slugs with duplicate suffixes

    Guardrails:
        - Do NOT report links inside fenced code blocks
          ✅ Fence state is checked before any other pattern
        - Do NOT treat shortcut references ``[label]`` as links
          ✅ Too ambiguous in prose; only explicit forms are matched

    Tags:
        - parser
        - markdown
        - links
        - core_infrastructure
    """

    FENCE_OPEN_RE = re.compile(r"^(\s*)(`{3,}|~{3,})(.*)$")
    ATX_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
    SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
    DEFINITION_RE = re.compile(
        r"^ {0,3}\[(?P<label>[^\[\]]+)\]:[ \t]*(?P<dest><[^<>\n]*>|\S+)"
    )
    BLOCK_START_RE = re.compile(r"^(?:[-*+]\s|\d+[.)]\s|>)")
    INLINE_CODE_RE = re.compile(r"(?<!`)(`+)(?!`)(.+?)(?<!`)\1(?!`)")

    _TEXT = r"(?P<text>(?:[^\[\]]|\[[^\[\]]*\])*)"
    INLINE_LINK_RE = re.compile(
        r"(?P<bang>!?)\[" + _TEXT + r"\]"
        r"\(\s*(?P<dest><[^<>\n]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)"
        r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^()]*\)))?\s*\)"
    )
    LOOSE_LINK_RE = re.compile(
        r"(?P<bang>!?)\[" + _TEXT + r"\]"
        r"\((?P<dest>[^()<>\"'\s][^()<>\"']*?\s[^()<>\"']*?)\)"
    )
    REFERENCE_LINK_RE = re.compile(
        r"(?P<bang>!?)\[" + _TEXT + r"\]\[(?P<label>[^\[\]]*)\]"
    )
    AUTOLINK_RE = re.compile(r"<(?P<dest>[a-zA-Z][a-zA-Z0-9+.\-]{1,31}:[^\s<>]*)>")
    HTML_IMG_RE = re.compile(
        r"<img\b[^>]*?\bsrc\s*=\s*([\"'])(?P<dest>.*?)\1", re.IGNORECASE
    )
    HTML_A_RE = re.compile(
        r"<a\b[^>]*?\bhref\s*=\s*([\"'])(?P<dest>.*?)\1", re.IGNORECASE
    )
    HTML_ANCHOR_RE = re.compile(
        r"<[a-zA-Z][^>]*?\b(?:id|name)\s*=\s*([\"'])(?P<id>.*?)\1", re.IGNORECASE
    )

    def scan_file(self, path: Path) -> MarkdownDocument:
        """Read and scan a Markdown file.

        Args:
            path: Path to the document

        Returns:
            Scanned document

        Raises:
            DocumentReadError: If the file cannot be read as UTF-8
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(
                f"Cannot read {path}: {e}", cause=e
            ).with_context(path=str(path)) from e
        return self.scan(text, Path(path))

    def scan(self, text: str, path: Path) -> MarkdownDocument:
        """Scan Markdown text.

        Args:
            text: Document contents
            path: Path recorded on the result (not read)

        Returns:
            MarkdownDocument with links, headings, fences and anchors
        """
        doc = MarkdownDocument(path=Path(path))
        lines = text.splitlines()
        doc.line_count = len(lines)

        seen_slugs: dict[str, int] = {}
        open_fence: CodeFence | None = None
        in_comment = False
        paragraph: list[tuple[int, str]] = []

        for line_no, raw in enumerate(lines, start=1):
            if open_fence is not None:
                if self._closes_fence(raw, open_fence.marker):
                    open_fence.end_line = line_no
                    open_fence = None
                continue

            line, in_comment = self._strip_comments(raw, in_comment)

            fence_match = self.FENCE_OPEN_RE.match(line)
            if fence_match and not (
                fence_match.group(2)[0] == "`" and "`" in fence_match.group(3)
            ):
                open_fence = CodeFence(
                    marker=fence_match.group(2),
                    info=fence_match.group(3).strip(),
                    start_line=line_no,
                )
                doc.fences.append(open_fence)
                paragraph = []
                continue

            if not line.strip():
                paragraph = []
                continue

            setext = self.SETEXT_UNDERLINE_RE.match(line)
            if setext and not self._is_setext_paragraph(paragraph):
                # Thematic break, or an underline after a list item or quote
                paragraph = []
                continue
            if setext:
                level = 1 if setext.group(1)[0] == "=" else 2
                heading_text = " ".join(part for _, part in paragraph)
                self._add_heading(doc, level, heading_text, paragraph[0][0], seen_slugs)
                paragraph = []
                continue

            atx = self.ATX_HEADING_RE.match(line)
            if atx:
                self._add_heading(doc, len(atx.group(1)), atx.group(2) or "", line_no, seen_slugs)
                paragraph = []
            else:
                definition = self.DEFINITION_RE.match(line)
                if definition:
                    label = definition.group("label")
                    doc.definitions.setdefault(
                        normalize_label(label),
                        LinkDefinition(label=label, target=definition.group("dest"), line=line_no),
                    )
                    paragraph = []
                    continue
                paragraph.append((line_no, line.strip()))

            self._scan_inline(doc, line, line_no)

        self._resolve_references(doc)
        return doc

    def _is_setext_paragraph(self, paragraph: list[tuple[int, str]]) -> bool:
        if not paragraph:
            return False
        return not self.BLOCK_START_RE.match(paragraph[0][1])

    def _closes_fence(self, line: str, marker: str) -> bool:
        stripped = line.strip()
        return (
            len(stripped) >= len(marker)
            and set(stripped) == {marker[0]}
        )

    def _strip_comments(self, line: str, in_comment: bool) -> tuple[str, bool]:
        """Remove HTML comment text from a line, tracking multi-line comments."""
        result = []
        pos = 0
        while pos <= len(line):
            if in_comment:
                end = line.find("-->", pos)
                if end == -1:
                    return "".join(result), True
                pos = end + 3
                in_comment = False
            else:
                start = line.find("<!--", pos)
                if start == -1:
                    result.append(line[pos:])
                    break
                result.append(line[pos:start])
                pos = start + 4
                in_comment = True
        return "".join(result), in_comment

    def _add_heading(
        self,
        doc: MarkdownDocument,
        level: int,
        text: str,
        line_no: int,
        seen_slugs: dict[str, int],
    ) -> None:
        text = text.strip()
        slug = unique_slug(slugify(text), seen_slugs)
        doc.headings.append(Heading(level=level, text=text, line=line_no, slug=slug))

    def _blank_inline_code(self, line: str) -> str:
        """Replace inline code spans with spaces, keeping column positions."""
        return self.INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)

    def _scan_inline(self, doc: MarkdownDocument, line: str, line_no: int) -> None:
        line = self._blank_inline_code(line)

        for match in self.HTML_ANCHOR_RE.finditer(line):
            doc.anchors.add(match.group("id"))

        taken: list[tuple[int, int]] = []

        self._scan_inline_links(doc, line, line_no, 0, taken)

        for match in self.LOOSE_LINK_RE.finditer(line):
            if self._overlaps(match.span(), taken):
                continue
            taken.append(match.span())
            doc.links.append(Link(
                target=match.group("dest"),
                text=match.group("text"),
                line=line_no,
                column=match.start() + 1,
                is_image=bool(match.group("bang")),
                raw_whitespace=True,
            ))

        for match in self.REFERENCE_LINK_RE.finditer(line):
            if self._overlaps(match.span(), taken):
                continue
            taken.append(match.span())
            text = match.group("text")
            doc.references.append(ReferenceUsage(
                label=match.group("label") or text,
                text=text,
                line=line_no,
                column=match.start() + 1,
                is_image=bool(match.group("bang")),
            ))

        for match in self.AUTOLINK_RE.finditer(line):
            if self._overlaps(match.span(), taken):
                continue
            taken.append(match.span())
            doc.links.append(Link(
                target=match.group("dest"),
                text=match.group("dest"),
                line=line_no,
                column=match.start() + 1,
            ))

        for regex, is_image in ((self.HTML_IMG_RE, True), (self.HTML_A_RE, False)):
            for match in regex.finditer(line):
                doc.links.append(Link(
                    target=match.group("dest"),
                    text="",
                    line=line_no,
                    column=match.start() + 1,
                    is_image=is_image,
                    html=True,
                ))

    def _scan_inline_links(
        self,
        doc: MarkdownDocument,
        text: str,
        line_no: int,
        offset: int,
        taken: list[tuple[int, int]],
    ) -> None:
        for match in self.INLINE_LINK_RE.finditer(text):
            start, end = match.span()
            taken.append((start + offset, end + offset))
            link_text = match.group("text")
            doc.links.append(Link(
                target=match.group("dest"),
                text=link_text,
                line=line_no,
                column=start + offset + 1,
                is_image=bool(match.group("bang")),
            ))
            # [![badge](img.png)](target) carries an image inside the text
            if "](" in link_text:
                self._scan_inline_links(
                    doc, link_text, line_no, offset + match.start("text"), []
                )

    @staticmethod
    def _overlaps(span: tuple[int, int], taken: list[tuple[int, int]]) -> bool:
        return any(span[0] < end and start < span[1] for start, end in taken)

    def _resolve_references(self, doc: MarkdownDocument) -> None:
        for ref in doc.references:
            definition = doc.definitions.get(normalize_label(ref.label))
            if definition is None:
                continue
            doc.links.append(Link(
                target=definition.target,
                text=ref.text,
                line=ref.line,
                column=ref.column,
                is_image=ref.is_image,
                reference=ref.label,
            ))
