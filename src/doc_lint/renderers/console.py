"""
Console report renderer (rich).
"""

import io

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doc_lint.renderers.base import BaseRenderer

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "yellow",
    "info": "cyan",
}

SEVERITY_ICONS = {
    "error": "❌",
    "warning": "⚠️ ",
    "info": "ℹ️ ",
}


class ConsoleRenderer(BaseRenderer):
    """Render a lint report as rich tables, one per document.

    ``print_to`` writes to a live console (colors when it is a terminal);
    ``render`` returns the same layout as plain text for ``--output``.
    """

    format_name = "text"

    def print_to(self, console: Console) -> None:
        report = self.report
        console.print(f"\n[bold blue]📚 Documentation Lint[/bold blue] {escape(str(report.root))}\n")

        for path, findings in report.by_path().items():
            table = Table(title=f"[bold]{escape(path)}[/bold]", title_justify="left", expand=False)
            table.add_column("Line", justify="right", style="dim")
            table.add_column("Severity")
            table.add_column("Rule", style="cyan")
            table.add_column("Message")

            for finding in findings:
                severity = finding.severity.value
                table.add_row(
                    str(finding.line) if finding.line is not None else "-",
                    f"[{SEVERITY_STYLES[severity]}]{severity}[/{SEVERITY_STYLES[severity]}]",
                    f"{finding.code} {finding.rule}",
                    escape(finding.message),
                )

            console.print(table)
            console.print()

        counts = report.counts()
        if not report.findings:
            console.print(
                f"[bold green]✅ No problems found in {report.documents_checked} documents[/bold green]"
            )
        else:
            summary = ", ".join(
                f"{SEVERITY_ICONS[severity]}{count} {severity}" for severity, count in counts.items()
            )
            console.print(f"[bold]Summary:[/bold] {summary}")
            console.print(
                f"{report.documents_checked} documents checked, {len(report.rules_run)} rules run"
            )

    def render(self) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None, force_terminal=False)
        self.print_to(console)
        return buffer.getvalue()
