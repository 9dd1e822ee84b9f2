"""Edit overlay projection: base rows plus sparse user edits."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Mapping, Sequence

from .models import EditedRowData, Row, SheetData, edit_key


def project_edits(
    rows: Sequence[Sequence[Any]] | None,
    sheet_id: int | str,
    edits: EditedRowData | None,
) -> List[Row]:
    """Return the effective rows of a sheet.

    ``rows`` are data rows (header excluded). A cell is replaced when the
    overlay entry for its row holds a non-null value under its column index;
    ``""`` and ``0`` replace the cell, ``None`` keeps the original. Rows are
    never added or removed.
    """

    if not isinstance(rows, (list, tuple)):
        return []
    overlay = edits or {}
    effective: List[Row] = []
    for row_index, row in enumerate(rows):
        cells = list(row) if isinstance(row, (list, tuple)) else []
        row_edits = overlay.get(edit_key(sheet_id, row_index))
        if not isinstance(row_edits, Mapping) or not row_edits:
            effective.append(cells)
            continue
        effective.append(
            [
                cell if row_edits.get(str(col)) is None else row_edits[str(col)]
                for col, cell in enumerate(cells)
            ]
        )
    return effective


def apply_edits_to_sheet(sheet: SheetData, sheet_id: int | str, edits: EditedRowData | None) -> SheetData:
    """Return a copy of ``sheet`` whose data rows carry the overlay values."""

    if not edits or not sheet.data:
        return sheet
    return replace(sheet, data=[sheet.header, *project_edits(sheet.rows, sheet_id, edits)])


__all__ = ["apply_edits_to_sheet", "project_edits"]
