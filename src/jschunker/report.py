"""Rich console summary of a chunking run."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .pipeline import PipelineResult


def render_summary(result: PipelineResult, console: Optional[Console] = None) -> None:
    """Print a table of chunks followed by any per-file failures."""
    console = console or Console()

    table = Table(title="Chunks", show_lines=False)
    table.add_column("Order", justify="right")
    table.add_column("Id")
    table.add_column("Size", justify="right")
    table.add_column("Depends on")
    table.add_column("Exports")

    for chunk in sorted(result.chunks, key=lambda c: c.order):
        exports = ", ".join(chunk.exports[:5])
        if len(chunk.exports) > 5:
            exports += f" (+{len(chunk.exports) - 5})"
        table.add_row(
            str(chunk.order),
            chunk.id,
            f"{chunk.size:,}",
            ", ".join(chunk.dependencies) or "-",
            exports or "-",
        )

    console.print(table)
    console.print(
        f"[bold]Total:[/bold] {result.total_size:,} bytes in {len(result.chunks)} chunk(s)"
        f" from {result.segment_count} segment(s)"
    )

    for failure in result.failures:
        console.print(f"[bold red]✗ {escape(failure.path)}:[/bold red] {escape(failure.error)}")
