"""Plain-text export of a sheet."""

from __future__ import annotations

import csv
import io

from .cells import CellFormatter, DEFAULT_FORMATTER
from .models import SheetData


def sheet_to_csv_text(sheet: SheetData, *, formatter: CellFormatter = DEFAULT_FORMATTER) -> str:
    """Render ``sheet`` as CSV; cells holding commas, quotes or newlines are quoted."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in sheet.data:
        writer.writerow([formatter(cell) for cell in row])
    return buffer.getvalue()


__all__ = ["sheet_to_csv_text"]
