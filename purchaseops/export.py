from __future__ import annotations

import csv
import io
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from purchaseops.columns import COLUMNS
from purchaseops.util import stringify
from purchaseops.view import ClientViewState

logger = logging.getLogger(__name__)

# Spreadsheet tools need the BOM to pick UTF-8 for Hebrew headers.
BOM = "\ufeff"


def export_filename(start_date: str, end_date: str) -> str:
    return f"purchases_{start_date}_to_{end_date}.csv"


def export_csv(rows: Sequence[Mapping[str, Any]]) -> str | None:
    """Serialize rows with every field quoted; None when there is nothing to export."""
    if not rows:
        return None
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([c.label for c in COLUMNS])
    for row in rows:
        writer.writerow([stringify(row.get(c.key)) for c in COLUMNS])
    return BOM + buf.getvalue().rstrip("\n")


def write_export(state: ClientViewState, out_dir: str | Path = ".") -> Path | None:
    """Write the current filtered and sorted view to disk."""
    content = export_csv(state.filtered_rows)
    if content is None:
        logger.info("Nothing to export")
        return None
    path = Path(out_dir) / export_filename(state.start_date, state.end_date)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
    logger.info("Exported %d rows to %s", len(state.filtered_rows), path)
    return path
