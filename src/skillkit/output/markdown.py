"""Markdown report builder — renders validation and lint reports for ``--report``."""

from __future__ import annotations

from skillkit.schemas.reports import LintReport, ValidationReport
from skillkit.schemas.rules import Status

_STATUS_ICON = {
    Status.PASS: "✅",
    Status.FAIL: "❌",
    Status.WARN: "⚠️",
    Status.SKIP: "⏭️",
}


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def render_validation_report(report: ValidationReport) -> str:
    """Render one validator run into a Markdown string."""
    sections: list[str] = []

    sections.append(f"# {report.title}\n")
    sections.append(f"*Generated: {report.generated_at}*\n")
    sections.append(f"- **Validator:** {report.validator}")
    sections.append(f"- **Project:** {report.project_path}")
    sections.append(f"- **Result:** {'PASS' if report.ok else 'FAIL'}")
    sections.append("")

    current = None
    for result in report.results:
        if result.section != current:
            if current is not None:
                sections.append("")
            current = result.section
            sections.append(f"## {current}\n")
            sections.append("| | Check | Details |")
            sections.append("|---|-------|---------|")
        detail = result.detail
        if result.file:
            detail = f"`{result.file}` {detail}".strip()
        if result.hint and result.status in (Status.FAIL, Status.WARN):
            detail = f"{detail} ({result.hint})" if detail else result.hint
        sections.append(
            f"| {_STATUS_ICON[result.status]} | {_escape_cell(result.label)} | {_escape_cell(detail)} |"
        )
    if current is not None:
        sections.append("")

    sections.append("## Summary\n")
    sections.append(f"- Passed: {report.passed}")
    sections.append(f"- Failed: {report.failed}")
    sections.append(f"- Warnings: {report.warnings}")
    sections.append("")
    return "\n".join(sections)


def render_lint_report(report: LintReport) -> str:
    """Render a corpus lint run into a Markdown string."""
    sections: list[str] = []

    sections.append("# Plugin Lint Report\n")
    sections.append(f"*Generated: {report.generated_at}*\n")
    sections.append(f"- **Root:** {report.root}")
    sections.append(f"- **Skills checked:** {report.skills_checked}")
    sections.append(f"- **Agents checked:** {report.agents_checked}")
    sections.append(f"- **Errors:** {len(report.errors)}")
    sections.append(f"- **Warnings:** {len(report.warnings)}")
    sections.append("")

    if not report.issues:
        sections.append("No issues found.\n")
        return "\n".join(sections)

    by_path: dict[str, list] = {}
    for issue in report.issues:
        by_path.setdefault(issue.path, []).append(issue)

    sections.append("## Issues\n")
    for path in sorted(by_path):
        sections.append(f"### `{path}`\n")
        for issue in by_path[path]:
            icon = "❌" if issue.severity == "error" else "⚠️"
            sections.append(f"- {icon} **{issue.code}**: {issue.message}")
        sections.append("")
    return "\n".join(sections)
