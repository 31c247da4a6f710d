#!/usr/bin/env python3
"""
Demonstration script for the document registry.

Runs a full reconciliation pass against a Milvus instance, then keeps the
collection in sync with the directory while you create, edit, rename and
delete files in it.

Usage:
    python examples/sync_and_watch_demo.py [--doc-root PATH] [--duration SECONDS]
"""

import asyncio
import time
from pathlib import Path

import click
from rag_doc_sync import RegistryConfig
from rag_doc_sync.factory import configure_logging, create_registry
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def create_status_table(status: dict) -> Table:
    """Create a rich table for registry statistics."""
    table = Table(title="📊 Registry Statistics", show_header=True)
    table.add_column("Metric", style="cyan", width=20)
    table.add_column("Value", style="white", width=10)

    stats = status["processing_stats"]
    table.add_row("Events processed", str(stats["events_processed"]))
    table.add_row("Ingested", str(stats["operations"]["ingested"]))
    table.add_row("Forgotten", str(stats["operations"]["forgotten"]))
    table.add_row("Failed", str(stats["operations"]["failed"]))
    table.add_row("Pending events", str(status["pending_events"]))
    return table


async def run_demo(doc_root: Path, duration: int, reset: bool) -> None:
    config = RegistryConfig(doc_root=doc_root, reset_store=reset)
    configure_logging(config)

    console.print(
        Panel.fit(
            f"📁 Documents: [cyan]{doc_root}[/cyan]\n"
            f"🗄️  Collection: [cyan]{config.milvus_collection}[/cyan] at {config.milvus_host}:{config.milvus_port}\n"
            f"⏱️  Duration: [yellow]{duration}s[/yellow]",
            title="Document Registry Demo",
            border_style="blue",
        )
    )

    registry = await create_registry(config)
    try:
        report = await registry.sync()
        console.print(
            f"✅ Initial sync: [green]{report.ingested}[/green] ingested, "
            f"[red]{report.forgotten}[/red] forgotten, [dim]{report.skipped} skipped[/dim]"
        )

        await registry.watch()
        console.print("👀 Watching for changes, edit some files...")

        start_time = time.monotonic()
        while time.monotonic() - start_time < duration:
            await asyncio.sleep(5)
            console.print(create_status_table(registry.get_status()))
    finally:
        await registry.stop()
        await registry.store.cleanup()

    console.print(create_status_table(registry.get_status()))


@click.command()
@click.option(
    "--doc-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("./docs"),
    show_default=True,
    help="Directory to keep in sync",
)
@click.option("--duration", type=int, default=60, show_default=True, help="Seconds to keep watching")
@click.option("--reset", is_flag=True, help="Drop the collection before the initial sync")
def main(doc_root: Path, duration: int, reset: bool) -> None:
    """Sync a directory into Milvus and watch it for changes."""
    try:
        asyncio.run(run_demo(doc_root, duration, reset))
    except KeyboardInterrupt:
        console.print("\n⏹️  Demo interrupted")


if __name__ == "__main__":
    main()
