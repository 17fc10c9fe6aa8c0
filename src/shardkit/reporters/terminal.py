"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from shardkit.sharding.planner import ShardPlan

console = Console()

_MAX_FILES_PER_SHARD_DISPLAY = 10


class CLIReporter:
    """Rich terminal output reporter for shard plans."""

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_shard_plan(self, plan: ShardPlan) -> None:
        """Print a table of shards and the files of the selected shard."""
        table = Table(title=f"Shards ({plan.algorithm})", show_lines=False)
        table.add_column("Shard", justify="right", style="cyan")
        table.add_column("Files", justify="right")
        if plan.weighted:
            table.add_column("Weight", justify="right")
        table.add_column("Test files")

        for shard in plan.shards:
            shown = shard.files[:_MAX_FILES_PER_SHARD_DISPLAY]
            listing = "\n".join(shown)
            hidden = len(shard.files) - len(shown)
            if hidden > 0:
                listing += f"\n[dim]… and {hidden} more[/dim]"

            marker = " *" if shard.index == plan.shard_number else ""
            row = [f"{shard.index}{marker}", str(len(shard.files))]
            if plan.weighted:
                row.append(f"{shard.weight:g}")
            row.append(listing)
            table.add_row(*row)

        self.console.print(table)

        selected = plan.selected_files
        body = "\n".join(selected) if selected else "[dim](no test files)[/dim]"
        self.console.print(
            Panel(
                body,
                title=f"Shard {plan.shard_number} of {plan.total_shards}",
                border_style="cyan",
                padding=(0, 2),
            )
        )


reporter = CLIReporter()
