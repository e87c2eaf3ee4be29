"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Las tablas se reutilizan en `check`, `bulk` y `search`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AggregatedResult, BulkReport, RegistrarQuote, SearchResult


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (se omite en modos JSON/no interactivos)."""

    title = Text("domain-scout", style="bold cyan")
    subtitle = Text("Registrar prices • Availability • Bulk checks", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _money(value: float | None, currency: str | None = None) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f} {currency or ''}".strip()


def _quote_row(quote: RegistrarQuote) -> tuple[str, ...]:
    if not quote.configured:
        status = "[yellow]not configured[/yellow]"
    elif quote.error:
        status = "[red]error[/red]"
    elif quote.available:
        status = "[green]available[/green]"
    else:
        status = "[dim]taken[/dim]"
    return (
        quote.registrar,
        status,
        _money(quote.price, quote.currency),
        _money(quote.renewal_price, quote.currency),
        _money(quote.promo_price, quote.currency),
        quote.error or "",
    )


def build_quotes_table(result: AggregatedResult) -> Table:
    title = f"{result.domain}: " + ("available" if result.available else "not available")
    if result.best_offer:
        title += f" (best: {result.best_offer.registrar} {_money(result.best_offer.price, result.best_offer.currency)})"
    table = Table(title=title)
    table.add_column("Registrar", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Price", justify="right")
    table.add_column("Renewal", justify="right")
    table.add_column("Promo", justify="right")
    table.add_column("Error", style="red")
    for quote in result.quotes:
        table.add_row(*_quote_row(quote))
    return table


def build_bulk_table(report: BulkReport) -> Table:
    table = Table(
        title=f"{report.processed}/{report.total} domains in {report.duration_ms} ms",
    )
    table.add_column("Domain", style="cyan", no_wrap=True)
    table.add_column("Available")
    table.add_column("Best price", justify="right")
    table.add_column("Registrar", style="magenta")
    for result in report.results:
        best = result.best_offer
        table.add_row(
            result.domain,
            "[green]yes[/green]" if result.available else "[dim]no[/dim]",
            _money(best.price, best.currency) if best else "-",
            best.registrar if best else "-",
        )
    return table


def build_suggestions_table(result: SearchResult) -> Table:
    table = Table(title=f"{result.total_results} suggestions in {result.search_time:.2f}s")
    table.add_column("Domain", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Confidence", justify="right")
    table.add_column("Available")
    table.add_column("Best price", justify="right")
    table.add_column("Reasoning", style="dim")
    for s in result.suggestions:
        if s.available is None:
            available = "[dim]?[/dim]"
        else:
            available = "[green]yes[/green]" if s.available else "[dim]no[/dim]"
        best = s.best_offer
        table.add_row(
            s.domain,
            s.category.value,
            f"{s.confidence:.2f}",
            available,
            f"{_money(best.price, best.currency)} @ {best.registrar}" if best else "-",
            s.reasoning,
        )
    return table


def build_insights_panel(result: SearchResult) -> Panel:
    return Panel(Text(result.ai_insights), title=Text("Insights", style="bold yellow"), border_style="yellow")
