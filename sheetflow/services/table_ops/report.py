"""Build a sheet from the categories of a comparison result."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from .models import ComparisonResult, ReportOptions, Row, SheetData
from .naming import ExistingSheets, generate_unique_sheet_name

LOGGER = logging.getLogger(__name__)

REPORT_SUFFIX = "差异报告"

CATEGORY_UNIQUE_FIRST = "unique_to_first"
CATEGORY_UNIQUE_SECOND = "unique_to_second"
CATEGORY_MODIFIED = "modified"


def default_report_name(first_name: str, second_name: str) -> str:
    return f"{first_name}_{second_name}_{REPORT_SUFFIX}"


def _report_header(first_headers: Sequence[Any], second_headers: Sequence[Any]) -> List[Any]:
    columns: Dict[Any, None] = dict.fromkeys(first_headers)
    for column in second_headers:
        columns.setdefault(column, None)
    return list(columns)


def _placer(header: Sequence[Any], report_positions: Dict[Any, int]) -> List[int | None]:
    return [report_positions.get(column) for column in header]


def _place(row: Sequence[Any], targets: Sequence[int | None], width: int) -> Row:
    out: Row = [""] * width
    for index, target in enumerate(targets):
        if target is not None and index < len(row):
            out[target] = row[index]
    return out


def build_comparison_report(
    result: ComparisonResult,
    options: ReportOptions,
    existing_sheets: ExistingSheets | None = None,
) -> SheetData:
    """Concatenate the selected diff categories into one new sheet.

    The header is the first sheet's vocabulary followed by second-only
    columns; rows are placed by column name. Modified pairs contribute the
    second sheet's row. With ``highlight_changes`` the differing cells are
    listed in ``properties["highlights"]`` as one-based ``{"row", "col"}``
    positions for the renderer or writer to style. Callers validate that at
    least one category is selected.
    """

    meta = result.metadata
    header = _report_header(meta.first_headers, meta.second_headers)
    positions: Dict[Any, int] = {}
    for index, column in enumerate(header):
        positions.setdefault(column, index)
    width = len(header)
    first_targets = _placer(meta.first_headers, positions)
    second_targets = _placer(meta.second_headers, positions)

    data: List[Row] = [header]
    categories: List[str] = []
    highlights: List[Dict[str, int]] = []

    if options.include_unique_from_first:
        for row in result.data_differences.unique_to_first:
            data.append(_place(row, first_targets, width))
            categories.append(CATEGORY_UNIQUE_FIRST)
    if options.include_unique_from_second:
        for row in result.data_differences.unique_to_second:
            data.append(_place(row, second_targets, width))
            categories.append(CATEGORY_UNIQUE_SECOND)
    if options.include_modified_rows:
        for pair in result.data_differences.modified_rows:
            data.append(_place(pair.second_row, second_targets, width))
            categories.append(CATEGORY_MODIFIED)
            if not options.highlight_changes:
                continue
            row_number = len(data)
            for diff in pair.differences:
                col = positions.get(diff.column)
                if col is not None:
                    highlights.append({"row": row_number, "col": col + 1})

    name = options.sheet_name.strip() or default_report_name(
        meta.first_sheet_name, meta.second_sheet_name
    )
    name = generate_unique_sheet_name(name, existing_sheets)
    properties: Dict[str, Any] = {
        "highlight_changes": bool(options.highlight_changes),
        "highlights": highlights,
        "row_categories": categories,
    }
    LOGGER.info(
        "Built comparison report %s with %s rows (%s highlighted cells)",
        name,
        len(data) - 1,
        len(highlights),
    )
    return SheetData(name=name, data=data, properties=properties)


__all__ = [
    "CATEGORY_MODIFIED",
    "CATEGORY_UNIQUE_FIRST",
    "CATEGORY_UNIQUE_SECOND",
    "REPORT_SUFFIX",
    "build_comparison_report",
    "default_report_name",
]
