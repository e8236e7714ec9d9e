"""
Markdown report renderer.

Produces a report that can be committed next to the corpus or posted as a
pull request comment.
"""

from doc_lint.renderers.base import BaseRenderer


class MarkdownRenderer(BaseRenderer):
    """Render a lint report as Markdown.

    Features:
        - Severity summary table
        - One section per document with a findings table
        - Pipe characters in messages escaped for table cells
    """

    format_name = "markdown"
    template_name = "report.md.j2"

    def render(self) -> str:
        template = self._get_template()
        return template.render(**self._get_context())
