"""Rich progress display for multi-validator runs."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class ValidationProgress:
    """Tracks each validator of a ``validate --all`` run using Rich."""

    def __init__(self, console: Console = console) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "ValidationProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start(self, name: str) -> None:
        """Register and start tracking a validator."""
        tid = self._progress.add_task(f"[cyan]{name}[/]", total=None)
        self._task_ids[name] = tid

    def finish(self, name: str, *, ok: bool, summary: str = "") -> None:
        """Mark a validator as complete, green when it had no failures."""
        if name not in self._task_ids:
            return
        marker = "[green]✓" if ok else "[red]✗"
        text = f"{marker} {name}[/]"
        if summary:
            text += f" [dim]{summary}[/]"
        self._progress.update(self._task_ids[name], description=text, completed=True)

    def fail(self, name: str, error: str) -> None:
        """Mark a validator that could not run at all."""
        if name in self._task_ids:
            self._progress.update(
                self._task_ids[name],
                description=f"[red]✗ {name}: {error}[/]",
                completed=True,
            )

    def print_phase(self, label: str) -> None:
        """Print a phase header outside the progress display."""
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))
