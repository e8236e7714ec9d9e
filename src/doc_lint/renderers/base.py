"""
Base renderer for lint reports.

Provides common functionality for all report renderers, including
template loading for the template-driven formats.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from doc_lint.report import LintReport


class BaseRenderer(ABC):
    """Base class for report renderers.

    Manifesto:
        The report is data; renderers decide how it looks. Each renderer
        turns one ``LintReport`` into one output format. Templates handle
        layout, renderers assemble the data the template needs.

    Architecture:
        ```
        LintReport ──► Renderer._get_context()
                             │
                             ▼
                     Jinja2 Template (markdown)
                     rich Table (console)
                     json.dumps (json)
                             │
                             ▼
                        str output
        ```

    Tags:
        - renderer
        - template
        - jinja2
    """

    # Output format this renderer produces
    format_name: str = ""

    # Template file name (template-driven renderers only)
    template_name: str = ""

    def __init__(self, report: LintReport, template_dir: Path | None = None):
        """Initialize the renderer.

        Args:
            report: Report to render
            template_dir: Directory containing templates
        """
        self.report = report

        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"
        self.template_dir = Path(template_dir)

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["md_escape"] = self._md_escape_filter

    @abstractmethod
    def render(self) -> str:
        """Render the report.

        Returns:
            Rendered report as string
        """

    def _get_template(self, template_name: str | None = None):
        name = template_name or self.template_name
        return self.env.get_template(name)

    def _get_context(self) -> dict[str, Any]:
        """Common template variables."""
        return {
            "root": self.report.root,
            "generated_at": self.report.generated_at,
            "documents_checked": self.report.documents_checked,
            "rules_run": self.report.rules_run,
            "counts": self.report.counts(),
            "findings": self.report.sorted_findings(),
            "by_path": self.report.by_path(),
            "stats": self.report.stats,
        }

    @staticmethod
    def _md_escape_filter(value: Any) -> str:
        """Jinja2 filter escaping text for a Markdown table cell."""
        return str(value).replace("|", "\\|").replace("\n", " ")
