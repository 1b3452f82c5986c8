"""Typer CLI — ``skillkit lint``, ``validate``, ``generate`` and friends."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from skillkit.config import resolve_config
from skillkit.schemas.config import SkillkitConfig

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="skillkit",
    help="Lint, validate and scaffold frontend skill plugins.",
    no_args_is_help=True,
)
list_app = typer.Typer(help="List built-in and configured validators or generators.", no_args_is_help=True)
config_app = typer.Typer(help="Inspect skillkit.yml.", no_args_is_help=True)
app.add_typer(list_app, name="list")
app.add_typer(config_app, name="config")

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("skillkit").setLevel(level)


def _fail(message: str, exc: Exception | None = None) -> typer.Exit:
    if exc is None:
        console.print(f"[red]{message}[/]")
    else:
        console.print(f"[red]{message}:[/] {escape(str(exc))}")
    return typer.Exit(code=1)


def _config(ctx: typer.Context) -> SkillkitConfig:
    """Resolve the effective config once per invocation."""
    state = ctx.ensure_object(dict)
    if "config" not in state:
        try:
            state["config"] = resolve_config(state.get("config_path"))
        except (ValueError, OSError) as exc:
            raise _fail("Config validation failed", exc)
    return state["config"]


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", envvar="SKILLKIT_CONFIG", help="Path to skillkit.yml"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _setup_logging(verbose)
    ctx.ensure_object(dict)["config_path"] = config


# ------------------------------------------------------------------
# Plugin corpus
# ------------------------------------------------------------------

@app.command()
def info(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Plugin root (default: plugin_root from config)."),
) -> None:
    """Summarise a plugin: manifest, agents and document counts."""
    from skillkit.corpus.catalog import describe_plugin
    from skillkit.output.terminal import print_plugin_info

    root = root or Path(_config(ctx).plugin_root)
    try:
        plugin = describe_plugin(root)
    except ValueError as exc:
        raise _fail("Cannot read plugin", exc)
    print_plugin_info(console, plugin)


@app.command()
def lint(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Plugin root (default: plugin_root from config)."),
    strict: bool = typer.Option(False, "--strict", help="Fail on warnings as well as errors."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    report_path: Optional[Path] = typer.Option(None, "--report", help="Also write a Markdown report to this path."),
) -> None:
    """Check every skill, agent and command document of a plugin.

    Exits with code 1 when errors are found (or any issue with --strict).

    Example:

        skillkit lint ./my-plugin --strict
    """
    from skillkit.corpus.lint import lint_corpus
    from skillkit.corpus.loader import PluginCorpus
    from skillkit.output.markdown import render_lint_report
    from skillkit.output.terminal import print_lint_report

    cfg = _config(ctx)
    root = root or Path(cfg.plugin_root)
    strict = strict or cfg.lint.strict
    try:
        corpus = PluginCorpus.load(root)
    except ValueError as exc:
        raise _fail("Cannot read plugin", exc)
    report = lint_corpus(corpus, cfg.lint)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        print_lint_report(console, report, strict=strict)
    if report_path:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(render_lint_report(report))
        if not as_json:
            console.print(f"[green]Markdown report written to:[/] {report_path}")

    if not report.passes(strict=strict):
        raise typer.Exit(code=1)


@app.command()
def catalog(
    ctx: typer.Context,
    root: Optional[Path] = typer.Argument(None, help="Plugin root (default: plugin_root from config)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the catalog JSON here instead of stdout."),
) -> None:
    """Export agents and their bonded skills as JSON."""
    from skillkit.corpus.catalog import build_catalog
    from skillkit.corpus.loader import PluginCorpus

    root = root or Path(_config(ctx).plugin_root)
    try:
        corpus = PluginCorpus.load(root)
    except ValueError as exc:
        raise _fail("Cannot read plugin", exc)
    data = build_catalog(corpus).model_dump_json(indent=2)

    if output is None:
        typer.echo(data)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(data + "\n")
    console.print(f"[green]Catalog written to:[/] {output}")


# ------------------------------------------------------------------
# Project validators
# ------------------------------------------------------------------

@app.command()
def validate(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Validator to run (see `skillkit list validators`)."),
    path: Optional[Path] = typer.Argument(None, help="Project directory (default: current directory)."),
    run_all: bool = typer.Option(False, "--all", help="Run every validator that applies to the project."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    report_path: Optional[Path] = typer.Option(None, "--report", help="Also write a Markdown report to this path."),
) -> None:
    """Check a frontend project against best-practice rules.

    Examples:

        skillkit validate react ./my-app

        skillkit validate --all ./my-app
    """
    cfg = _config(ctx)
    if run_all:
        # With --all the single positional argument is the project path
        if name is not None and path is None:
            path = Path(name)
        elif name is not None:
            raise _fail("Pass either a validator name or --all, not both")
        _validate_all(cfg, path or Path("."), as_json=as_json, report_path=report_path)
        return
    if name is None:
        raise _fail("Missing validator name (or use --all)")
    _validate_one(cfg, name, path or Path("."), as_json=as_json, report_path=report_path)


def _validate_one(
    cfg: SkillkitConfig,
    name: str,
    path: Path,
    *,
    as_json: bool,
    report_path: Path | None,
) -> None:
    from skillkit.checks.engine import run_validator
    from skillkit.checks.registry import load_validator
    from skillkit.output.markdown import render_validation_report
    from skillkit.output.terminal import print_validation_report

    try:
        rule_set = load_validator(name, cfg.validators.extra_paths)
        report = run_validator(rule_set, path)
    except ValueError as exc:
        raise _fail("Validation failed to run", exc)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        print_validation_report(console, report)
    if report_path:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(render_validation_report(report))
        if not as_json:
            console.print(f"[green]Markdown report written to:[/] {report_path}")

    if not report.ok:
        raise typer.Exit(code=report.exit_code)


def _validate_all(
    cfg: SkillkitConfig,
    path: Path,
    *,
    as_json: bool,
    report_path: Path | None,
) -> None:
    from skillkit.checks.engine import applies_to, run_validator
    from skillkit.checks.registry import available_validators, load_validator
    from skillkit.output.markdown import render_validation_report
    from skillkit.output.terminal import print_validation_summary
    from skillkit.shared.progress import ValidationProgress
    from skillkit.shared.project_tree import ProjectTree

    try:
        tree = ProjectTree(path)
    except ValueError as exc:
        raise _fail("Cannot read project", exc)

    names = available_validators(cfg.validators.extra_paths, cfg.validators.disabled)
    reports = []
    skipped: list[str] = []
    errors: list[str] = []

    def run(name: str) -> None:
        rule_set = load_validator(name, cfg.validators.extra_paths)
        if not applies_to(rule_set, tree):
            skipped.append(name)
            return
        reports.append(run_validator(rule_set, tree.root))

    if as_json:
        for name in names:
            try:
                run(name)
            except ValueError as exc:
                errors.append(f"{name}: {exc}")
        typer.echo(json.dumps([r.model_dump(mode="json") for r in reports], indent=2))
    else:
        with ValidationProgress(console) as progress:
            progress.print_phase(f"Validating {tree.root}")
            for name in names:
                progress.start(name)
                try:
                    before = len(reports)
                    run(name)
                except ValueError as exc:
                    errors.append(f"{name}: {exc}")
                    progress.fail(name, "could not load rules")
                    continue
                if len(reports) > before:
                    r = reports[-1]
                    progress.finish(name, ok=r.ok, summary=f"{r.passed} passed, {r.failed} failed, {r.warnings} warnings")
                else:
                    progress.finish(name, ok=True, summary="not applicable")
        print_validation_summary(console, reports, skipped)
        for err in errors:
            console.print(f"[red]{escape(err)}[/]")

    if report_path:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text("\n".join(render_validation_report(r) for r in reports))
        if not as_json:
            console.print(f"[green]Markdown report written to:[/] {report_path}")

    if not reports and not as_json:
        console.print("[yellow]No validator applies to this project.[/]")
    if errors or any(not r.ok for r in reports):
        raise typer.Exit(code=1)


# ------------------------------------------------------------------
# Scaffolding
# ------------------------------------------------------------------

@app.command()
def generate(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Generator to run (see `skillkit list generators`)."),
    output_dir: Optional[Path] = typer.Argument(None, help="Where to write files (default: output_directory from config)."),
    target: Optional[str] = typer.Option(None, "--name", "-n", help="Name of the thing to generate, e.g. UserProfile."),
    variant: Optional[str] = typer.Option(None, "--variant", help="Generator variant."),
    assignments: list[str] = typer.Option([], "--set", help="Template option as key=value (repeatable)."),
    force: bool = typer.Option(False, "--force", help="Overwrite files that already exist."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be written without touching disk."),
) -> None:
    """Scaffold files from a generator template.

    Examples:

        skillkit generate component src/components --name UserCard --variant memo

        skillkit generate zustand-store src/stores --name cart --set persist=true
    """
    from skillkit.errors import GeneratorError
    from skillkit.generators.engine import parse_assignments, render, write
    from skillkit.generators.registry import load_generator

    cfg = _config(ctx)
    out = output_dir or Path(cfg.output_directory)

    # skillkit.yml may pin a variant or name per generator; the rest are options
    configured = dict(cfg.generators.defaults.get(name, {}))
    variant = variant or configured.pop("variant", None)
    target = target or configured.pop("name", None)
    configured.pop("variant", None)
    configured.pop("name", None)
    if target is not None:
        target = str(target)
    if variant is not None:
        variant = str(variant)

    try:
        gen = load_generator(name, cfg.generators.extra_paths)
        options = {**configured, **parse_assignments(assignments)}
        files = render(gen, name=target, variant=variant, options=options)
    except GeneratorError as exc:
        raise _fail("Generation failed", exc)

    if dry_run:
        console.print(f"[yellow]DRY-RUN: {len(files)} file(s) would be written to {out}[/]\n")
        for rel in files:
            exists = (out / rel).exists()
            note = " [dim](exists, would be skipped)[/]" if exists and not force else ""
            console.print(f"  {rel}{note}")
        return

    try:
        result = write(files, out, force=force)
    except OSError as exc:
        raise _fail("Generation failed", exc)
    for rel in result.written:
        console.print(f"  [green]✓[/] {out / rel}")
    for rel in result.skipped:
        console.print(f"  [yellow]![/] {out / rel} [dim](exists, use --force to overwrite)[/]")
    console.print(f"\n[green]{len(result.written)} file(s) written[/], {len(result.skipped)} skipped")


# ------------------------------------------------------------------
# list / config
# ------------------------------------------------------------------

@list_app.command("validators")
def list_validators(ctx: typer.Context) -> None:
    """Show every validator with its skill and check count."""
    from skillkit.checks.registry import discover, load_rule_file

    cfg = _config(ctx)
    table = Table(title="Validators")
    table.add_column("Name", style="cyan")
    table.add_column("Skill")
    table.add_column("Checks", justify="right")
    table.add_column("Title")
    disabled = set(cfg.validators.disabled)
    for name, rule_file in discover(cfg.validators.extra_paths).items():
        try:
            rule_set = load_rule_file(rule_file)
        except ValueError as exc:
            table.add_row(name, "", "", f"[red]{escape(str(exc))}[/]")
            continue
        title = rule_set.title + (" [dim](disabled)[/]" if name in disabled else "")
        table.add_row(name, rule_set.skill, str(rule_set.check_count), title)
    console.print(table)


@list_app.command("generators")
def list_generators(ctx: typer.Context) -> None:
    """Show every generator with its variants."""
    from skillkit.generators.registry import discover, load_generator_dir

    cfg = _config(ctx)
    table = Table(title="Generators")
    table.add_column("Name", style="cyan")
    table.add_column("Skill")
    table.add_column("Variants")
    table.add_column("Description")
    for name, directory in discover(cfg.generators.extra_paths).items():
        try:
            gen = load_generator_dir(directory)
        except ValueError as exc:
            table.add_row(name, "", "", f"[red]{escape(str(exc))}[/]")
            continue
        table.add_row(name, gen.skill, ", ".join(gen.variants) or "-", gen.description)
    console.print(table)


@config_app.command("check")
def config_check(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to skillkit.yml"),
) -> None:
    """Validate a configuration file without running anything."""
    from skillkit.config import load_config

    config = config or ctx.ensure_object(dict).get("config_path")
    if config is None:
        raise _fail("No config file given (use --config)")
    try:
        cfg = load_config(config)
    except (ValueError, OSError) as exc:
        raise _fail("Config validation failed", exc)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Plugin root:        {cfg.plugin_root}")
    console.print(f"  Output dir:         {cfg.output_directory}")
    console.print(f"  Required sections:  {len(cfg.lint.required_sections)}")
    for section in cfg.lint.required_sections:
        console.print(f"    - {section}")
    console.print(f"  Strict lint:        {cfg.lint.strict}")
    if cfg.validators.extra_paths:
        console.print(f"  Extra validators:   {cfg.validators.extra_paths}")
    if cfg.validators.disabled:
        console.print(f"  Disabled:           {cfg.validators.disabled}")
    if cfg.generators.extra_paths:
        console.print(f"  Extra generators:   {cfg.generators.extra_paths}")
    if cfg.generators.defaults:
        console.print(f"  Generator defaults: {', '.join(cfg.generators.defaults)}")
