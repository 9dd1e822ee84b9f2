"""Workbook encoding of SheetData values."""

# Module responsibilities:
# - Write SheetData values into a fresh openpyxl workbook, keeping names and cell values.
# - Re-apply merged ranges and column widths, and fill cells flagged by comparison reports.

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from openpyxl import Workbook
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from sheetflow.core.errors import WorkbookError
from sheetflow.services.table_ops.cells import format_cell_value
from sheetflow.services.table_ops.merge_index import normalize_merge_range
from sheetflow.services.table_ops.models import SheetData
from sheetflow.services.table_ops.naming import generate_unique_sheet_name

from .utils.log import get_logger

logger = get_logger("excel_writer")

HIGHLIGHT_FILL = PatternFill(start_color="FFFFF2CC", end_color="FFFFF2CC", fill_type="solid")
MAX_TITLE_LENGTH = 31
_INVALID_TITLE_CHARS = re.compile(r"[\\/*?:\[\]]")
_SCALARS = (str, int, float, bool, Decimal, datetime, date, time)


def safe_sheet_title(name: str) -> str:
    """Excel compatible sheet title: no ``\\ / * ? : [ ]`` and at most 31 chars."""

    cleaned = _INVALID_TITLE_CHARS.sub("_", str(name)).strip() or "Sheet"
    return cleaned[:MAX_TITLE_LENGTH]


def _cell_for_excel(value: Any) -> Any:
    if value is None or isinstance(value, _SCALARS):
        return value
    return format_cell_value(value)


def _apply_properties(ws: Worksheet, sheet: SheetData) -> None:
    props = sheet.properties if isinstance(sheet.properties, Mapping) else {}

    for raw in sheet.merges:
        merge = normalize_merge_range(raw)
        if merge is None or (merge.top == merge.bottom and merge.left == merge.right):
            continue
        ws.merge_cells(
            start_row=merge.top,
            start_column=merge.left,
            end_row=merge.bottom,
            end_column=merge.right,
        )

    columns = props.get("columns")
    if isinstance(columns, (list, tuple)):
        for idx, column in enumerate(columns, start=1):
            if not isinstance(column, Mapping):
                continue
            dimension = ws.column_dimensions[get_column_letter(idx)]
            if column.get("width"):
                dimension.width = column["width"]
            if column.get("hidden"):
                dimension.hidden = True

    if props.get("highlight_changes"):
        for position in props.get("highlights") or ():
            ws.cell(row=int(position["row"]), column=int(position["col"])).fill = HIGHLIGHT_FILL


def write_workbook(sheets: Iterable[SheetData], out_path: Path) -> Path:
    """Write ``sheets`` into a new workbook at ``out_path``.

    Titles are made Excel safe and unique within the workbook.

    Raises:
        WorkbookError: When no sheet is given or the file cannot be saved.
    """

    sheets = list(sheets)
    if not sheets:
        raise WorkbookError("没有可导出的工作表")

    wb = Workbook()
    wb.remove(wb.active)
    written: List[str] = []
    for sheet in sheets:
        title = generate_unique_sheet_name(safe_sheet_title(sheet.name), written)
        if len(title) > MAX_TITLE_LENGTH:
            title = generate_unique_sheet_name(title[: MAX_TITLE_LENGTH - 4], written)
        ws = wb.create_sheet(title=title)
        for row in sheet.data:
            ws.append([_cell_for_excel(cell) for cell in row])
        _apply_properties(ws, sheet)
        written.append(title)

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        wb.save(out_path)
    except OSError as exc:
        raise WorkbookError(f"无法保存工作簿 {out_path}: {exc}") from exc

    logger.info("Workbook written", extra={"output": str(out_path), "sheets": written})
    return out_path
