"""Workbook decoding into SheetData."""

# Module responsibilities:
# - Decode every worksheet of an .xlsx workbook into SheetData values with openpyxl.
# - Report merged ranges as one-based inclusive descriptors under properties["merges"].

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from sheetflow.core.errors import WorkbookError
from sheetflow.services.table_ops.models import SheetData

from .utils.log import get_logger

logger = get_logger("excel_reader")


def _trim_trailing_blank_rows(rows: List[List[Any]]) -> List[List[Any]]:
    end = len(rows)
    while end > 0 and all(cell is None for cell in rows[end - 1]):
        end -= 1
    return rows[:end]


def _column_properties(ws: Worksheet) -> List[Dict[str, Any]]:
    columns: List[Dict[str, Any]] = []
    for idx in range(1, ws.max_column + 1):
        dimension = ws.column_dimensions.get(get_column_letter(idx))
        columns.append(
            {
                "width": dimension.width if dimension is not None else None,
                "hidden": bool(dimension.hidden) if dimension is not None else False,
            }
        )
    return columns


def _merge_descriptors(ws: Worksheet) -> List[Dict[str, int]]:
    return [
        {
            "top": merged.min_row,
            "left": merged.min_col,
            "bottom": merged.max_row,
            "right": merged.max_col,
        }
        for merged in ws.merged_cells.ranges
    ]


def sheet_from_worksheet(ws: Worksheet) -> SheetData:
    """Convert one openpyxl worksheet into a SheetData value."""

    rows = _trim_trailing_blank_rows([list(row) for row in ws.iter_rows(values_only=True)])
    properties = {
        "merges": _merge_descriptors(ws),
        "row_count": ws.max_row,
        "column_count": ws.max_column,
        "columns": _column_properties(ws),
    }
    return SheetData(name=ws.title, data=rows, properties=properties)


def read_workbook(path: Path, sheets: Optional[List[str]] = None) -> List[SheetData]:
    """Load the worksheets of an Excel workbook.

    Args:
        path: Path to the workbook.
        sheets: Optional worksheet names to keep; defaults to all, in workbook order.

    Returns:
        One SheetData per worksheet; formulas are replaced by their cached values.

    Raises:
        FileNotFoundError: When the Excel file does not exist.
        WorkbookError: When openpyxl cannot parse the file or a requested sheet is missing.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Source workbook not found: {path}")

    logger.info("Reading Excel workbook", extra={"path": str(path), "sheets": sheets})

    try:
        wb = load_workbook(path, data_only=True)
    except (InvalidFileException, KeyError, OSError) as exc:
        logger.error("Failed to read Excel workbook", extra={"error": str(exc)})
        raise WorkbookError(f"无法读取工作簿 {path}: {exc}") from exc

    try:
        names = sheets or wb.sheetnames
        missing = [name for name in names if name not in wb.sheetnames]
        if missing:
            raise WorkbookError(f"工作表不存在: {', '.join(missing)}")
        result = [sheet_from_worksheet(wb[name]) for name in names]
    finally:
        wb.close()

    logger.info(
        "Excel workbook loaded",
        extra={"sheets": [sheet.name for sheet in result], "rows": [sheet.total_rows for sheet in result]},
    )
    return result


def read_sheet(path: Path, sheet: Optional[str] = None) -> SheetData:
    """Load a single worksheet by name, or the first one when ``sheet`` is None."""

    if sheet is None:
        return read_workbook(path)[0]
    return read_workbook(path, [sheet])[0]
