"""Exportación HTML de reportes bulk.

Por qué vive en adapters:
- El render HTML es un detalle de infraestructura (Jinja2).
- El Core solo conoce el agregado `BulkReport`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.domain.models import BulkReport

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["money"] = lambda value: "-" if value is None else f"{value:,.2f}"
    return env


def render_report_html(*, report: BulkReport) -> str:
    """Renderiza una página HTML autocontenida para `report`."""

    generated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
    available = [r for r in report.results if r.available]
    priced = [r for r in available if r.best_offer is not None]
    cheapest = min(priced, key=lambda r: r.best_offer.price) if priced else None

    template = _get_env().get_template("report.html")
    return template.render(
        report=report,
        generated_at=generated_at,
        available_count=len(available),
        unavailable_count=len(report.results) - len(available),
        cheapest=cheapest,
    )


def export_report_html(*, report: BulkReport, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_report_html(report=report), encoding="utf-8")
    return output_path
