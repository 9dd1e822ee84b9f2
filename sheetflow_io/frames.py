"""pandas interop for SheetData."""

# Module responsibilities:
# - Convert SheetData to DataFrames (header row -> columns) and back.
# - Normalize pandas missing values to None so the engine sees empty cells.

from __future__ import annotations

from typing import Any, List

import pandas as pd

from sheetflow.services.table_ops.alignment import default_column_label
from sheetflow.services.table_ops.models import SheetData


def _column_names(header: List[Any], width: int) -> List[str]:
    names: List[str] = []
    for idx in range(width):
        raw = header[idx] if idx < len(header) else None
        name = str(raw) if raw not in (None, "") else default_column_label(idx)
        while name in names:
            name = f"{name}_{idx + 1}"
        names.append(name)
    return names


def sheet_to_frame(sheet: SheetData) -> pd.DataFrame:
    """Return the data rows of ``sheet`` as a DataFrame keyed by header text.

    Blank or duplicate headers get ``列{n}`` style names.
    """

    width = sheet.total_cols
    columns = _column_names(sheet.header, width)
    rows = [row + [None] * (width - len(row)) for row in sheet.rows]
    return pd.DataFrame(rows, columns=columns)


def _to_python(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item"):
        return value.item()
    return value


def frame_to_sheet(frame: pd.DataFrame, name: str) -> SheetData:
    """Build a SheetData from ``frame``; NaN/NaT become None."""

    header = [str(column) for column in frame.columns]
    rows = [[_to_python(value) for value in record] for record in frame.itertuples(index=False, name=None)]
    return SheetData.from_rows(name, header, rows)
