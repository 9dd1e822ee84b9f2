"""Split one sheet into several by the values of a column."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from .cells import CellFormatter, DEFAULT_FORMATTER
from .models import EditedRowData, Row, SheetData
from .naming import ExistingSheets, generate_unique_sheet_name
from .overlay import project_edits

LOGGER = logging.getLogger(__name__)


def _column_text(row: Sequence[Any], column_index: int, formatter: CellFormatter) -> str:
    if 0 <= column_index < len(row):
        return formatter(row[column_index])
    return ""


def column_unique_values(
    rows: Sequence[Sequence[Any]],
    column_index: int,
    sheet_id: int | str,
    edits: EditedRowData | None = None,
    *,
    formatter: CellFormatter = DEFAULT_FORMATTER,
) -> List[str]:
    """Distinct non-empty texts of a column in order of first appearance."""

    effective = project_edits(rows, sheet_id, edits)
    seen: Dict[str, None] = {}
    for row in effective:
        value = _column_text(row, column_index, formatter)
        if value:
            seen.setdefault(value, None)
    return list(seen)


def split_sheet_by_column(
    sheet: SheetData,
    column_index: int,
    sheet_id: int | str,
    edits: EditedRowData | None = None,
    existing_sheets: ExistingSheets | None = None,
    *,
    formatter: CellFormatter = DEFAULT_FORMATTER,
) -> List[SheetData]:
    """Return one sheet per distinct non-empty value of ``column_index``.

    Every output keeps the original header row. Rows whose split cell is blank
    belong to no output. Names are ``{sheet.name}_{value}`` made unique
    against ``existing_sheets`` and the names already produced by this split.
    """

    header = sheet.header
    effective = project_edits(sheet.rows, sheet_id, edits)

    groups: Dict[str, List[Row]] = {}
    for row in effective:
        value = _column_text(row, column_index, formatter)
        if not value:
            continue
        groups.setdefault(value, []).append(row)

    outputs: List[SheetData] = []
    taken: List[SheetData | str] = list(existing_sheets or ())
    for value, rows in groups.items():
        name = generate_unique_sheet_name(f"{sheet.name}_{value}", taken)
        taken.append(name)
        outputs.append(SheetData.from_rows(name, header, rows))

    dropped = len(effective) - sum(len(rows) for rows in groups.values())
    LOGGER.info(
        "Split sheet %s by column %s into %s sheets (%s blank rows skipped)",
        sheet.name,
        column_index,
        len(outputs),
        dropped,
    )
    return outputs


__all__ = ["column_unique_values", "split_sheet_by_column"]
