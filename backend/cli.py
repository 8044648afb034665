"""
Merchant CLI.

Command-line interface for common operations against the data directory.
"""

import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from shared.config.constants import ExportFormat
from shared.config.settings import settings
from shared.utils.exceptions import AppException

app = typer.Typer(
    name="merchant",
    help="Restaurant merchant backend CLI",
    add_completion=False,
)
console = Console()


def _store():
    from shared.infrastructure.store import get_entity_store

    return get_entity_store()


def _fail(error: AppException) -> None:
    console.print(f"[red]✗ {error.detail}[/red]")
    raise typer.Exit(1)


# =============================================================================
# Data Commands
# =============================================================================

@app.command()
def seed(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing collections"),
):
    """Write the sample menu, inventory and statistics."""
    from merchant_api.seed import seed as seed_store

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    console.print(f"[blue]Seeding data directory: {settings.data_dir}[/blue]")
    try:
        written = seed_store(_store(), overwrite=force)
    except AppException as e:
        _fail(e)

    if written:
        console.print(f"[green]✓ Seeded {', '.join(written)}[/green]")
    else:
        console.print("[yellow]All collections already present (use --force to overwrite)[/yellow]")


@app.command()
def sync_inventory():
    """Create missing inventory records and copy dish stock onto them."""
    from merchant_api.services.domain import InventoryService

    try:
        result = InventoryService(_store()).synchronize_inventory()
    except AppException as e:
        _fail(e)

    console.print(f"[green]✓ {result['message']}[/green] ({result['total']} records)")


# =============================================================================
# Inventory Commands
# =============================================================================

@app.command()
def inventory_summary():
    """Show inventory totals."""
    from merchant_api.services.domain import InventoryService

    try:
        summary = InventoryService(_store()).get_inventory_summary()
    except AppException as e:
        _fail(e)

    table = Table(title="Inventory Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Items", str(summary["total_items"]))
    table.add_row("Total Stock", str(summary["total_stock"]))
    table.add_row("Low Stock", str(summary["low_stock_items"]))
    table.add_row("Out of Stock", str(summary["out_of_stock_items"]))
    table.add_row(f"Expiring ({settings.expiring_soon_days}d)", str(summary["expiring_items"]))
    table.add_row("Total Value", f"{summary['total_value']:.2f}")
    table.add_row("Average Stock / Item", f"{summary['average_stock_per_item']:.2f}")

    console.print(table)


@app.command()
def low_stock(
    threshold: Optional[int] = typer.Option(None, "--threshold", "-t", min=0, help="Override every alert threshold"),
):
    """List dishes at or below their alert threshold."""
    from merchant_api.services.domain import InventoryService

    try:
        rows = InventoryService(_store()).get_low_stock_dishes(threshold)
    except AppException as e:
        _fail(e)

    if not rows:
        console.print("[green]✓ No dishes low on stock[/green]")
        return

    table = Table(title="Low Stock Dishes")
    table.add_column("Dish", style="cyan")
    table.add_column("Name")
    table.add_column("Stock", style="yellow", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("Supplier")

    for row in rows:
        stock_style = "red" if row["stock"] == 0 else "yellow"
        table.add_row(
            row["dish_id"],
            row["dish_name"],
            f"[{stock_style}]{row['stock']}[/{stock_style}]",
            str(threshold if threshold is not None else row["alert_threshold"]),
            row["supplier"] or "-",
        )

    console.print(table)


# =============================================================================
# Report Commands
# =============================================================================

@app.command()
def export_report(
    report_type: str = typer.Argument(..., help="sales, inventory, reviews or promotions"),
    export_format: str = typer.Option(ExportFormat.JSON, "--format", "-f", help="json or csv"),
):
    """Export a report into the reports directory."""
    from merchant_api.services.reports import ReportService

    try:
        result = ReportService(_store()).export_report(report_type, export_format)
    except AppException as e:
        _fail(e)

    console.print(
        f"[green]✓ Exported {result.record_count} record(s) to {result.file_path}[/green]"
    )


@app.command()
def version():
    """Show version information."""
    table = Table(title="Merchant Backend Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
