"""
CLI for doc-lint.

Provides the command-line interface for checking a documentation corpus,
inspecting single documents, and listing rules.

Usage:
    doclint check
    doclint check path/to/ios-standards --format json --output report.json
    doclint check --disable unreferenced-image --fail-on warning
    doclint stats --json
    doclint rules
    doclint links "Code Style/Code Style.md"
    doclint index
"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doc_lint import __version__
from doc_lint.config import FAIL_ON_LEVELS, DocLintConfig, DocLintSettings
from doc_lint.errors import DocLintError
from doc_lint.logging import configure_logging, get_logger
from doc_lint.orchestrator import LintOrchestrator
from doc_lint.parser.markdown_scanner import MarkdownScanner
from doc_lint.renderers import RENDERERS, ConsoleRenderer
from doc_lint.rules.registry import list_rules

console = Console()
logger = get_logger(__name__)

ROOT_ARGUMENT = click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)


def _load_config(root: Path, config_path: Path | None) -> DocLintConfig:
    if config_path is None:
        config_path = DocLintSettings().config_file
    if config_path is not None:
        return DocLintConfig.from_yaml(config_path)
    return DocLintConfig.discover(root)


def _fail(ctx: click.Context, error: DocLintError) -> None:
    logger.error("doclint_failed", **error.to_dict())
    click.echo(f"Error: {error.message}", err=True)
    ctx.exit(2)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for diagnostics on stderr (default: DOCLINT_LOG_LEVEL or WARNING).",
)
@click.option(
    "--log-json/--log-console",
    default=None,
    help="Force JSON or console log output (default: JSON unless stderr is a terminal).",
)
def cli(log_level: str | None, log_json: bool | None):
    """Documentation corpus linter.

    Checks a tree of Markdown documents: relative links and images resolve,
    code fences are closed, headings nest properly, and every topic is
    reachable from the root README.
    """
    settings = DocLintSettings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=log_json if log_json is not None else settings.log_json,
    )


@cli.command()
@ROOT_ARGUMENT
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: ROOT/.doclint.yaml).",
)
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(list(RENDERERS)),
    default="text",
    help="Report format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--disable", "-d",
    multiple=True,
    help="Rule code or name to skip (repeatable).",
)
@click.option(
    "--rule", "-r", "only_rules",
    multiple=True,
    help="Only run this rule code or name (repeatable).",
)
@click.option(
    "--fail-on",
    type=click.Choice(list(FAIL_ON_LEVELS)),
    default=None,
    help="Lowest severity that makes the command exit 1 (default from config: error).",
)
@click.pass_context
def check(
    ctx: click.Context,
    root: Path,
    config_path: Path | None,
    output_format: str,
    output: Path | None,
    disable: tuple,
    only_rules: tuple,
    fail_on: str | None,
):
    """Check a documentation corpus.

    Examples:
        doclint check
        doclint check docs/ --format markdown --output LINT.md
        doclint check -r broken-link -r missing-image
    """
    try:
        config = _load_config(root, config_path)
        config.disabled_rules = list(config.disabled_rules) + list(disable)

        orchestrator = LintOrchestrator(root, config=config)
        try:
            report = orchestrator.run(rules=list(only_rules) or None)
        except KeyError as e:
            raise click.BadParameter(str(e.args[0]), param_hint="--rule") from e
    except DocLintError as e:
        _fail(ctx, e)
        return

    threshold = fail_on or config.fail_on
    renderer = RENDERERS[output_format](report)

    if output is None and isinstance(renderer, ConsoleRenderer):
        renderer.print_to(console)
    else:
        content = renderer.render()
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(content, encoding="utf-8")
            click.echo(f"Report written to {output}", err=True)
        else:
            click.echo(content)

    ctx.exit(report.exit_code(threshold))


@cli.command()
@ROOT_ARGUMENT
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Output as JSON.",
)
@click.pass_context
def stats(ctx: click.Context, root: Path, as_json: bool):
    """Show statistics about the corpus.

    Displays counts of documents, topics, headings, links and images.
    """
    try:
        orchestrator = LintOrchestrator(root, config=_load_config(root, None))
        corpus_stats = orchestrator.get_stats()
    except DocLintError as e:
        _fail(ctx, e)
        return

    if as_json:
        click.echo(json.dumps(corpus_stats, indent=2))
        return

    console.print("\n[bold blue]📊 Corpus Statistics[/bold blue]\n")

    table = Table(title="Corpus")
    table.add_column("Item", style="cyan")
    table.add_column("Count", justify="right")
    for key in ("documents", "unreadable_documents", "topics", "headings", "code_fences", "images", "image_files"):
        table.add_row(key.replace("_", " "), str(corpus_stats[key]))
    for kind, count in corpus_stats["links"].items():
        table.add_row(f"{kind} links", str(count))
    console.print(table)

    domains = corpus_stats["external_domains"]
    if domains:
        console.print()
        shown = list(domains.items())[:10]
        console.print(
            "[bold]External domains:[/bold] "
            + ", ".join(f"{escape(host)} ({count})" for host, count in shown),
            end="",
        )
        if len(domains) > 10:
            console.print(f" ... and {len(domains) - 10} more")
        else:
            console.print()


@cli.command()
def rules():
    """List the available rules and their default severities."""
    table = Table(title="Rules")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Description")

    for rule_class in list_rules():
        table.add_row(
            rule_class.code,
            rule_class.name,
            rule_class.default_severity.value,
            rule_class.description,
        )

    console.print(table)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def links(ctx: click.Context, file_path: Path):
    """Show headings, code fences, links and images found in one document.

    Useful for seeing exactly what the scanner extracts from a file.
    """
    try:
        doc = MarkdownScanner().scan_file(file_path)
    except DocLintError as e:
        _fail(ctx, e)
        return

    console.print(f"\n[bold blue]📄 {escape(str(file_path))}[/bold blue]\n")

    console.print(f"[bold]Headings ({len(doc.headings)}):[/bold]")
    for heading in doc.headings:
        console.print(f"  {heading.line:>4}  {'#' * heading.level} {escape(heading.text)}  [dim]#{escape(heading.slug)}[/dim]")
    console.print()

    console.print(f"[bold]Code fences ({len(doc.fences)}):[/bold]")
    for fence in doc.fences:
        end = fence.end_line if fence.is_closed else "[red]unclosed[/red]"
        console.print(f"  {fence.start_line:>4}-{end}  {escape(fence.info) or '-'}")
    console.print()

    console.print(f"[bold]Links and images ({len(doc.links)}):[/bold]")
    for link in sorted(doc.links, key=lambda item: (item.line, item.column)):
        icon = "🖼 " if link.is_image else "🔗"
        console.print(f"  {link.line:>4}  {icon} [cyan]{link.kind}[/cyan]  {escape(link.target)}")

    if doc.undefined_references:
        console.print()
        console.print(f"[bold red]Undefined references ({len(doc.undefined_references)}):[/bold red]")
        for ref in doc.undefined_references:
            console.print(f"  {ref.line:>4}  {escape('[' + ref.label + ']')}")


@cli.command()
@ROOT_ARGUMENT
@click.pass_context
def index(ctx: click.Context, root: Path):
    """Show topic directories and whether the root README links to them."""
    try:
        orchestrator = LintOrchestrator(root, config=_load_config(root, None))
        rows = orchestrator.topic_index()
        has_index = orchestrator.load_corpus().index_document is not None
    except DocLintError as e:
        _fail(ctx, e)
        return

    table = Table(title=f"Topics ({orchestrator.config.index_file})")
    table.add_column("Topic", style="cyan")
    table.add_column("Document")
    table.add_column("Images", justify="right")
    table.add_column("Indexed", justify="center")

    for row in rows:
        table.add_row(
            escape(row["topic"]),
            escape(row["document"]) if row["document"] else "[yellow]missing[/yellow]",
            str(row["images"]),
            "✅" if row["indexed"] else "❌",
        )

    console.print(table)
    if not has_index:
        console.print(f"[bold red]No {orchestrator.config.index_file} at corpus root[/bold red]")

    indexed = sum(1 for row in rows if row["indexed"])
    console.print(f"[bold]Indexed: {indexed}/{len(rows)} topics[/bold]")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
