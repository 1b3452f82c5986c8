"""Rich terminal rendering for validation, lint and plugin summaries."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from skillkit.corpus.catalog import PluginInfo
from skillkit.schemas.reports import CheckResult, LintReport, ValidationReport
from skillkit.schemas.rules import Status

_MARKERS = {
    Status.PASS: "[green]✓[/]",
    Status.FAIL: "[red]✗[/]",
    Status.WARN: "[yellow]![/]",
    Status.SKIP: "[dim]-[/]",
}


def _result_line(result: CheckResult) -> str:
    line = f"  {_MARKERS[result.status]} {escape(result.label)}"
    if result.file:
        line += f" [dim]{escape(result.file)}[/]"
    if result.detail:
        line += f" [dim]({escape(result.detail)})[/]"
    return line


def print_validation_report(console: Console, report: ValidationReport) -> None:
    console.print(Panel(f"[bold]{escape(report.title)}[/bold]", style="blue"))
    current = None
    for result in report.results:
        if result.section != current:
            current = result.section
            console.print(f"\n[bold cyan]{escape(current)}[/]")
        console.print(_result_line(result))
        if result.hint and result.status in (Status.FAIL, Status.WARN):
            console.print(f"    [dim]→ {escape(result.hint)}[/]")

    console.print("")
    summary = f"[green]{report.passed} passed[/], [red]{report.failed} failed[/], [yellow]{report.warnings} warnings[/]"
    style = "green" if report.ok else "red"
    console.print(Panel(summary, title="PASS" if report.ok else "FAIL", style=style))


def print_validation_summary(console: Console, reports: list[ValidationReport], skipped: list[str]) -> None:
    """Summary table for ``validate --all``."""
    table = Table(title="Validation summary")
    table.add_column("Validator")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Warnings", justify="right", style="yellow")
    table.add_column("Result")
    for report in reports:
        table.add_row(
            report.validator,
            str(report.passed),
            str(report.failed),
            str(report.warnings),
            "[green]✓ pass[/]" if report.ok else "[red]✗ fail[/]",
        )
    for name in skipped:
        table.add_row(name, "", "", "", "[dim]not applicable[/]")
    console.print(table)


def print_lint_report(console: Console, report: LintReport, *, strict: bool = False) -> None:
    console.print(Panel(f"[bold]Lint: {escape(report.root)}[/bold]", style="blue"))
    console.print(f"  Skills checked: {report.skills_checked}")
    console.print(f"  Agents checked: {report.agents_checked}\n")
    for issue in report.issues:
        marker = "[red]✗[/]" if issue.severity == "error" else "[yellow]![/]"
        console.print(f"  {marker} {escape(issue.path)} [dim]{issue.code}[/] {escape(issue.message)}")
    if report.issues:
        console.print("")

    passed = report.passes(strict=strict)
    summary = f"[red]{len(report.errors)} errors[/], [yellow]{len(report.warnings)} warnings[/]"
    console.print(Panel(summary, title="PASS" if passed else "FAIL", style="green" if passed else "red"))


def print_plugin_info(console: Console, info: PluginInfo) -> None:
    console.print(Panel(f"[bold]{escape(info.name or '(unnamed plugin)')}[/bold]", style="blue"))
    console.print(f"  Root:        {escape(info.root)}")
    if info.has_manifest:
        console.print(f"  Version:     {escape(info.version or '(none)')}")
        console.print(f"  Description: {escape(info.description or '(none)')}")
        if info.manifest_error:
            console.print(f"  [red]Manifest error:[/] {escape(info.manifest_error)}")
    else:
        console.print("  [yellow]No .claude-plugin/plugin.json found[/]")
    console.print(f"  Skills:      {info.skills}")
    console.print(f"  Commands:    {info.commands}")
    console.print(f"  Docs:        {info.docs}")
    console.print(f"  Agents:      {len(info.agents)}")
    for name in info.agents:
        console.print(f"    - {name}")
