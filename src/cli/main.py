"""Command line interface (Typer).

Commands:
- `check DOMAIN`       compare registrar prices for one domain
- `bulk [FILE]`        price every domain found in a file, text or list
- `search KEYWORD...`  AI (or heuristic) name suggestions, priced
- `serve`              run the HTTP API
- `doctor ...`         diagnostics and interactive setup
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from adapters.ai_suggester import OpenAISuggester
from adapters.json_exporter import export_report_json
from adapters.report_exporter import export_report_html
from adapters.uploads import decode_upload
from api.app import build_aggregator, create_app
from cli import doctor
from cli.ui_components import (
    build_bulk_table,
    build_insights_panel,
    build_quotes_table,
    build_suggestions_table,
    print_banner,
)
from core.config import get_settings
from core.domain.errors import InputError
from core.domain.models import SearchQuery
from core.logging import configure_logging
from core.services.bulk_pipeline import BulkHooks, BulkInput, BulkPipeline
from core.services.search import SearchService

app = typer.Typer(no_args_is_help=True, help="Compare domain registrar prices and availability.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _fail(message: str) -> NoReturn:
    _console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=2)


def _print_json(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
) -> None:
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_logs=json_logs or settings.log_json,
    )


@app.command()
def check(
    domain: str = typer.Argument(..., help="Domain to price, e.g. example.com"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Compare every registrar's quote for one domain."""

    aggregator = build_aggregator(get_settings())
    try:
        result = asyncio.run(aggregator.compare_prices(domain))
    except InputError as exc:
        _fail(str(exc))

    if as_json:
        _print_json(result.to_wire())
        return
    _console.print(build_quotes_table(result))


def _bulk_input(file: Path | None, text: str | None, domains: list[str] | None) -> BulkInput | None:
    if domains:
        return domains
    if file is not None:
        return decode_upload(file.read_bytes(), filename=file.name)
    if text:
        return text
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return None


@app.command()
def bulk(
    file: Path | None = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Text/CSV/HTML file with domains (stdin when omitted).",
    ),
    text: str | None = typer.Option(None, "--text", "-t", help="Free text to scan for domains."),
    domains: list[str] | None = typer.Option(None, "--domain", "-d", help="Explicit domain (repeatable)."),
    json_out: Path | None = typer.Option(None, "--json-out", help="Write the report as JSON."),
    html_out: Path | None = typer.Option(None, "--html-out", help="Write the report as HTML."),
    chunk_size: int | None = typer.Option(None, "--chunk-size", min=1, max=64),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner, no table."),
) -> None:
    """Price every domain found in the input."""

    settings = get_settings()
    pipeline = BulkPipeline(
        build_aggregator(settings),
        chunk_size=chunk_size or settings.bulk_chunk_size,
        max_domains=settings.bulk_max_domains,
    )
    raw = _bulk_input(file, text, domains)

    if not quiet:
        print_banner(_console)

    with Progress(
        TextColumn("[cyan]pricing"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=_console,
        transient=True,
        disable=quiet,
    ) as progress:
        task_id = progress.add_task("bulk", total=None)
        hooks = BulkHooks(
            started=lambda total: progress.update(task_id, total=total),
            chunk_done=lambda done, total: progress.update(task_id, completed=done),
        )
        try:
            report = asyncio.run(pipeline.process_bulk(raw, hooks=hooks))
        except InputError as exc:
            _fail(str(exc))

    if json_out:
        path = export_report_json(report=report, output_path=json_out)
        _console.print(f"[green]JSON report:[/green] {path}")
    if html_out:
        path = export_report_html(report=report, output_path=html_out)
        _console.print(f"[green]HTML report:[/green] {path}")
    if not quiet:
        _console.print(build_bulk_table(report))


@app.command()
def search(
    keywords: list[str] = typer.Argument(..., help="Keywords describing the brand."),
    tld: list[str] | None = typer.Option(None, "--tld", help="Preferred TLD (repeatable)."),
    exclude: list[str] | None = typer.Option(None, "--exclude", help="Word to avoid (repeatable)."),
    budget: float | None = typer.Option(None, "--budget", min=0),
    max_length: int | None = typer.Option(None, "--max-length", min=1),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
) -> None:
    """Suggest domain names for KEYWORDS and price each one."""

    settings = get_settings()
    service = SearchService(build_aggregator(settings), OpenAISuggester(settings))
    query = SearchQuery(
        keywords=keywords,
        preferred_tlds=tld or None,
        exclude_words=exclude or None,
        budget=budget,
        max_length=max_length,
    )
    try:
        result = asyncio.run(service.search(query))
    except InputError as exc:
        _fail(str(exc))

    if as_json:
        _print_json(result.to_wire())
        return
    _console.print(build_suggestions_table(result))
    _console.print(build_insights_panel(result))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port", min=1, max=65535),
) -> None:
    """Run the HTTP API with uvicorn."""

    import uvicorn  # noqa: PLC0415

    uvicorn.run(create_app(settings=get_settings()), host=host, port=port, log_config=None)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
