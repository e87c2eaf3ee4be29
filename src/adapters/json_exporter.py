"""Exportación JSON del reporte bulk.

Por qué JSON:
- Interoperabilidad con hojas de cálculo/scripts que post-procesan precios.
- Misma forma camelCase que el objeto `data` de la API HTTP.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import BulkReport


def export_report_json(*, report: BulkReport, output_path: Path) -> Path:
    """Exporta `report` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.to_wire()
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
