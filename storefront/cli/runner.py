# storefront/cli/runner.py

"""Headless operator commands that reuse the storefront services."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from storefront.config.settings import Settings
from storefront.filters.bulk_import import BulkImportError, parse_bulk_payload
from storefront.models.notification import Notification
from storefront.models.product import Product, format_price
from storefront.services.advisor import APOLOGY
from storefront.services.normalizer import product_to_row
from storefront.services.router import SetCategory
from storefront.services.storefront import Storefront

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_SEVERITY_STYLE = {
    "information": "green",
    "warning": "yellow",
    "error": "red",
}


def _print_notifications(notifications: list[Notification]) -> None:
    for note in notifications:
        style = _SEVERITY_STYLE.get(note.severity, "white")
        _err.print(f"[{style}]{escape(note.message)}[/{style}]")


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    currency = Settings.CURRENCY_LABEL
    table = Table(
        title=f"{Settings.BRAND_NAME} Catalog",
        show_lines=True,
        title_style="bold magenta",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=40)
    table.add_column("Category")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Sale", justify="center")
    table.add_column("Rating", justify="center")

    for idx, p in enumerate(products, 1):
        table.add_row(
            str(idx),
            p.id,
            p.name,
            f"{p.category} / {p.subcategory}" if p.subcategory else p.category,
            f"{currency} {format_price(p.price)}",
            f"-{p.discount_percent}%" if p.on_sale else "",
            f"{p.rating:.1f}",
        )

    Console().print(table)


async def cli_list(
    category: str | None,
    query: str | None,
    output_format: str,
) -> int:
    """Print the catalog, optionally filtered; returns an exit code."""
    storefront = Storefront()
    if category and category not in Settings.CATEGORIES:
        valid = ", ".join(Settings.CATEGORIES)
        _err.print(f"[red]Unknown category: {category}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    result = await storefront.load()
    _print_notifications(storefront.drain_notifications())
    if result.error_kind == "missing_schema":
        _err.print(
            "[yellow]Products table missing; showing the default "
            "collection. Run with --health for setup SQL.[/yellow]"
        )

    if query:
        storefront.search(query)
    if category:
        storefront.dispatch(SetCategory(category))
    products = storefront.visible_products()

    if not products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(products)} of {result.count} products "
        f"(source: {result.source})[/green]"
    )
    if output_format == "table":
        _print_table(products)
    else:
        json.dump(
            [product_to_row(p) for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    return 0


async def cli_import(path: str) -> int:
    """Bulk-import a JSON array of products from *path*."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Cannot read import file %s: %s", path, exc)
        _err.print(f"[red]Cannot read {escape(path)}: {escape(str(exc))}[/red]")
        return 1

    try:
        drafts = parse_bulk_payload(text)
    except BulkImportError as exc:
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    storefront = Storefront()
    added = await storefront.catalog.bulk_add(drafts)
    notifications = storefront.drain_notifications()
    _print_notifications(notifications)
    _err.print(f"[green]✓ Added {len(added)} products.[/green]")
    return 1 if notifications else 0


async def cli_ask(question: str) -> int:
    """Stream one advisor answer to stdout."""
    storefront = Storefront()
    await storefront.load()
    _print_notifications(storefront.drain_notifications())

    printed = 0
    async for cumulative in storefront.advisor.send(
        question, storefront.catalog.products
    ):
        sys.stdout.write(cumulative[printed:])
        sys.stdout.flush()
        printed = len(cumulative)
    sys.stdout.write("\n")

    reply = storefront.advisor.transcript[-1].text
    return 0 if printed and reply != APOLOGY else 1


async def run_health_check() -> int:
    """Probe the gateway table and bucket; returns 1 if anything is wrong."""
    from storefront.services.health_checker import HealthChecker

    _err.print("[bold]Running catalog gateway health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Gateway Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Target", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim", overflow="fold")

    any_bad = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "missing":
            status = "[yellow]⚠️  MISSING[/yellow]"
            any_bad = True
        elif r.status == "denied":
            status = "[red]⛔ DENIED[/red]"
            any_bad = True
        else:
            status = "[red]❌ DOWN[/red]"
            any_bad = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.target, status, latency, escape(r.message))

    Console().print(table)
    return 1 if any_bad else 0
