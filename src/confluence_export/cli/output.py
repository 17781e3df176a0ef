"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, spinners, a progress bar for page export, and the
final export summary. Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List, Sequence

from rich.console import Console
from rich.live import Live
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.spinner import Spinner
from rich.tree import Tree

from ..page_tree.models import PageNode


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> with handler.spinner("Listing pages..."):
        ...     pass
        >>> handler.success("Export completed")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs."""
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    @contextmanager
    def progress_bar(self, description: str = "Exporting pages") -> Iterator[Progress]:
        """Display progress bar for multi-item operations.

        Example:
            >>> with handler.progress_bar() as progress:
            ...     task = progress.add_task("Exporting pages", total=None)
            ...     progress.update(task, advance=1)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
        )
        with progress:
            yield progress

    def print_tree(self, forest: Sequence[PageNode], space_key: str) -> None:
        """Display the reconstructed hierarchy (only if verbosity >= 2)."""
        if self.verbosity < 2:
            return
        tree = Tree(f"[bold]{space_key}[/bold]")
        seen = set()
        stack: List = [(tree, node) for node in reversed(forest)]
        while stack:
            branch, node = stack.pop()
            if node.page_id in seen:
                continue
            seen.add(node.page_id)
            sub = branch.add(f"{node.title} [dim]({node.page_id})[/dim]")
            stack.extend((sub, child) for child in reversed(node.children))
        self.console.print(tree)

    def print_summary(
        self,
        root_count: int = 0,
        page_count: int = 0,
        pages_written: int = 0,
        attachments_written: int = 0,
        attachments_skipped: int = 0,
        reassigned_count: int = 0,
    ) -> None:
        """Display export summary with color coding."""
        self.console.print("\n[bold]Export Summary:[/bold]")
        self.console.print(f"  Pages found: {page_count} ({root_count} top-level)")

        if pages_written > 0:
            self.console.print(f"  [green]↓[/green] Pages written: {pages_written}")

        if attachments_written > 0:
            self.console.print(f"  [blue]📎[/blue] Attachments: {attachments_written}")

        if attachments_skipped > 0:
            self.console.print(f"  [yellow]⊘[/yellow] Attachments skipped: {attachments_skipped}")

        if reassigned_count > 0:
            self.console.print(
                f"  [yellow]⚠[/yellow] Pages listed under several parents: {reassigned_count}"
            )

        if page_count == 0:
            self.console.print("\n[yellow]Space has no pages[/yellow]")
        elif attachments_skipped > 0:
            self.console.print("\n[yellow]Export completed with skipped attachments[/yellow]")
        else:
            self.console.print("\n[green]Export completed successfully[/green]")
