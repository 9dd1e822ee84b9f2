"""Stack several sheets into one over the union of their column names."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from sheetflow.core.errors import MergeInputError

from .models import MergeAnalysis, Row, SheetData
from .naming import ExistingSheets, generate_unique_sheet_name

LOGGER = logging.getLogger(__name__)


def analyze_sheets_for_merge(sheets: Sequence[SheetData]) -> MergeAnalysis:
    """Describe the merged column layout.

    The first sheet's headers come first; headers only found in later sheets
    are appended in the order they are met.
    """

    if not sheets:
        return MergeAnalysis()

    base_columns = sheets[0].header
    all_columns: Dict[Any, None] = dict.fromkeys(base_columns)
    mapping: Dict[str, List[Any]] = {}
    for sheet in sheets:
        header = sheet.header
        mapping[sheet.name] = header
        for column in header:
            all_columns.setdefault(column, None)

    base_set = set(base_columns)
    columns = list(all_columns)
    return MergeAnalysis(
        all_columns=columns,
        new_columns=[column for column in columns if column not in base_set],
        existing_columns=base_columns,
        sheet_column_mapping=mapping,
    )


def merge_sheets(
    sheets: Sequence[SheetData],
    merged_sheet_name: str,
    existing_sheets: ExistingSheets | None = None,
) -> SheetData:
    """Return a new sheet holding every data row of ``sheets``.

    Cells are placed by column name; columns a sheet lacks stay ``""`` for its
    rows. No rows are deduplicated.

    Raises:
        MergeInputError: When ``sheets`` is empty.
    """

    if not sheets:
        raise MergeInputError("没有选择要合并的sheet")

    analysis = analyze_sheets_for_merge(sheets)
    positions = {}
    for index, column in enumerate(analysis.all_columns):
        positions.setdefault(column, index)
    width = len(analysis.all_columns)

    merged: List[Row] = [list(analysis.all_columns)]
    for sheet in sheets:
        targets = [positions.get(column) for column in sheet.header]
        for row in sheet.rows:
            out: Row = [""] * width
            for index, target in enumerate(targets):
                if target is not None and index < len(row):
                    out[target] = row[index]
            merged.append(out)

    name = generate_unique_sheet_name(merged_sheet_name, existing_sheets)
    LOGGER.info(
        "Merged %s sheets into %s (%s rows, %s columns, %s new)",
        len(sheets),
        name,
        len(merged) - 1,
        width,
        len(analysis.new_columns),
    )
    return SheetData(name=name, data=merged)


__all__ = ["analyze_sheets_for_merge", "merge_sheets"]
