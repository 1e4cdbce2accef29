from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from purchaseops.aggregate import compute_totals
from purchaseops.config import ga4_property_path
from purchaseops.resolver import fetch_purchase_rows


@dataclass(frozen=True)
class ReportInputs:
    start_date: str
    end_date: str
    property_id: str | None = None


def build_purchase_report(client: Any, inputs: ReportInputs) -> dict[str, Any]:
    """Rows, totals and row count for the date range, shaped for the JSON API."""
    property_path = ga4_property_path(inputs.property_id)
    purchases = fetch_purchase_rows(client, property_path, inputs.start_date, inputs.end_date)
    rows = [p.to_dict() for p in purchases]
    totals = compute_totals(rows)
    return {
        "rows": rows,
        "totals": totals.to_dict(),
        "rowCount": len(rows),
    }
