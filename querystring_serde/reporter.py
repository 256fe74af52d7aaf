from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from querystring_serde.domain.types import Schema
from querystring_serde.pipeline import DecodeSummary


def _format_bytes(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    mem_mb = value / (1024 * 1024)
    return f"{mem_mb:.2f}"


def print_schema(schema: Schema, console: Optional[Console] = None) -> None:
    """
    Render a bound schema as a rich table, one row per column in output order.
    """
    console = console or Console()

    table = Table(title="Bound Schema", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")

    for position, column in enumerate(schema.columns):
        table.add_row(str(position), column.name, column.type.value)

    console.print(table)


def print_summary(summary: DecodeSummary, console: Optional[Console] = None) -> None:
    """
    Render a decode summary as a rich table.

    Skipped lines are highlighted so partial runs stand out.
    """
    console = console or Console(stderr=True)

    table = Table(
        title="Decode Summary",
        box=box.ROUNDED,
        caption=f"input: {summary['input']}"
        + (f" │ output: {summary['output']}" if summary["output"] else ""),
    )

    table.add_column("Records", justify="right", style="magenta")
    table.add_column("Skipped", justify="right", style="red" if summary["skipped"] else "dim")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (records/s)", justify="right", style="bold green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")

    cpu = summary["cpu_percent"]
    table.add_row(
        f"{summary['records']:,}",
        f"{summary['skipped']:,}",
        f"{summary['duration_seconds']:.3f}",
        f"{summary['throughput_records_per_sec']:,.2f}",
        _format_bytes(summary["peak_rss_bytes"]),
        f"{cpu:.1f}" if cpu is not None else "N/A",
    )

    console.print(table)
