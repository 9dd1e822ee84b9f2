"""Row matching and sheet comparison."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Sequence, Tuple

from .alignment import AlignedColumn, ColumnAlignment, align_columns, default_column_label
from .cells import CellFormatter, DEFAULT_FORMATTER
from .models import (
    CellDifference,
    ComparisonMetadata,
    ComparisonOptions,
    ComparisonResult,
    ComparisonSummary,
    DataDifferences,
    EditedRowData,
    ModifiedRow,
    Row,
    SheetData,
)
from .overlay import project_edits

LOGGER = logging.getLogger(__name__)

RowHash = Tuple[Tuple[str, str], ...]
RowKey = Tuple[str, ...]


def _cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if 0 <= index < len(row) else None


def row_hash(row: Sequence[Any], headers: Sequence[Any], formatter: CellFormatter = DEFAULT_FORMATTER) -> RowHash:
    """Content identity of a row as sorted ``(header, value)`` pairs.

    Sorting makes the identity independent of column order; cells past the
    header row are paired with an empty header name.
    """

    width = max(len(row), len(headers))
    pairs = [
        (formatter(_cell(headers, idx)), formatter(_cell(row, idx)))
        for idx in range(width)
    ]
    return tuple(sorted(pairs))


@dataclass(slots=True)
class RowClassification:
    common_rows: List[Row]
    unique_to_first: List[Row]
    unique_to_second: List[Row]


def classify_rows(
    first_rows: Sequence[Row],
    second_rows: Sequence[Row],
    first_headers: Sequence[Any],
    second_headers: Sequence[Any],
    formatter: CellFormatter = DEFAULT_FORMATTER,
) -> RowClassification:
    """Split rows into common / first-only / second-only by whole-row content.

    Matching is one-to-one: each first row consumes at most one identical
    second row, so duplicated rows are counted as many times as they occur.
    """

    pool: Dict[RowHash, Deque[int]] = defaultdict(deque)
    for index, row in enumerate(second_rows):
        pool[row_hash(row, second_headers, formatter)].append(index)

    common: List[Row] = []
    unique_first: List[Row] = []
    consumed: set[int] = set()
    for row in first_rows:
        candidates = pool.get(row_hash(row, first_headers, formatter))
        if candidates:
            consumed.add(candidates.popleft())
            common.append(row)
        else:
            unique_first.append(row)

    unique_second = [row for index, row in enumerate(second_rows) if index not in consumed]
    return RowClassification(common_rows=common, unique_to_first=unique_first, unique_to_second=unique_second)


@dataclass(frozen=True, slots=True)
class KeySpec:
    """Columns forming the composite row key; empty ``columns`` means position 0."""

    names: Tuple[str, ...]
    columns: Tuple[AlignedColumn, ...]

    @property
    def positional(self) -> bool:
        return not self.columns


def resolve_key_columns(requested: Sequence[str] | None, columns: Sequence[AlignedColumn]) -> KeySpec:
    """Pick the key columns actually usable for this alignment.

    Unknown names are ignored. Without any usable name the first aligned
    column is the key; without aligned columns the first cell of each row is.
    """

    by_label: Dict[Any, AlignedColumn] = {}
    for column in columns:
        by_label.setdefault(column.label, column)

    chosen: List[AlignedColumn] = []
    for name in requested or ():
        column = by_label.get(name)
        if column is not None and column not in chosen:
            chosen.append(column)
    if requested and not chosen:
        LOGGER.warning("None of the key columns %s exist in both sheets; using default key", list(requested))

    if not chosen and columns:
        chosen = [columns[0]]
    if not chosen:
        return KeySpec(names=(default_column_label(0),), columns=())
    return KeySpec(names=tuple(column.label for column in chosen), columns=tuple(chosen))


def _row_key(row: Sequence[Any], spec: KeySpec, side: str, formatter: CellFormatter) -> RowKey:
    if spec.positional:
        return (formatter(_cell(row, 0)),)
    return tuple(
        formatter(_cell(row, column.first_index if side == "first" else column.second_index))
        for column in spec.columns
    )


def _index_by_key(rows: Sequence[Row], spec: KeySpec, side: str, formatter: CellFormatter) -> Dict[RowKey, Row]:
    indexed: Dict[RowKey, Row] = {}
    for row in rows:
        if not row:
            continue
        # Later rows replace earlier rows sharing the same key.
        indexed[_row_key(row, spec, side, formatter)] = row
    return indexed


def find_modified_rows(
    first_rows: Sequence[Row],
    second_rows: Sequence[Row],
    columns: Sequence[AlignedColumn],
    key_spec: KeySpec,
    formatter: CellFormatter = DEFAULT_FORMATTER,
) -> List[ModifiedRow]:
    """Pair rows by key and report the aligned columns whose text differs.

    Runs independently of :func:`classify_rows`; a pair reported here may also
    appear among the first-only/second-only rows of that pass.
    """

    first_by_key = _index_by_key(first_rows, key_spec, "first", formatter)
    second_by_key = _index_by_key(second_rows, key_spec, "second", formatter)

    modified: List[ModifiedRow] = []
    for key, first_row in first_by_key.items():
        second_row = second_by_key.get(key)
        if second_row is None:
            continue
        differences = [
            CellDifference(
                column=column.label,
                first_value=_cell(first_row, column.first_index),
                second_value=_cell(second_row, column.second_index),
            )
            for column in columns
            if formatter(_cell(first_row, column.first_index))
            != formatter(_cell(second_row, column.second_index))
        ]
        if not differences:
            continue
        if key_spec.positional:
            key_values = {key_spec.names[0]: _cell(first_row, 0)}
        else:
            key_values = {
                column.label: _cell(first_row, column.first_index) for column in key_spec.columns
            }
        modified.append(
            ModifiedRow(
                first_row=first_row,
                second_row=second_row,
                key_values=key_values,
                differences=differences,
            )
        )
    return modified


def _project(rows: Sequence[Row], indices: Sequence[int]) -> List[Row]:
    return [[_cell(row, index) for index in indices] for row in rows]


def _manual_view(alignment: ColumnAlignment) -> List[AlignedColumn]:
    # After projection both sides share the label order, so positions coincide.
    return [
        AlignedColumn(label=column.label, first_index=idx, second_index=idx)
        for idx, column in enumerate(alignment.columns)
    ]


def compare_sheets(
    first_sheet: SheetData,
    second_sheet: SheetData,
    first_sheet_id: int | str,
    second_sheet_id: int | str,
    edits: EditedRowData | None = None,
    options: ComparisonOptions | None = None,
    *,
    formatter: CellFormatter = DEFAULT_FORMATTER,
) -> ComparisonResult:
    """Compare two sheets after applying the edit overlay to both.

    In manual alignment mode rows are re-projected onto the mapping labels
    before either pass runs, so the reported rows and headers use the labels.
    Rows paired as modified are removed from the unique lists by default, so
    the three categories do not overlap; ``options.keep_modified_in_unique``
    restores the overlapping lists.
    """

    options = options or ComparisonOptions()
    first_headers = first_sheet.header
    second_headers = second_sheet.header
    first_rows = project_edits(first_sheet.rows, first_sheet_id, edits)
    second_rows = project_edits(second_sheet.rows, second_sheet_id, edits)

    alignment = align_columns(first_headers, second_headers, options)

    if alignment.mode == "manual":
        labels = [column.label for column in alignment.columns]
        first_rows = _project(first_rows, [column.first_index for column in alignment.columns])
        second_rows = _project(second_rows, [column.second_index for column in alignment.columns])
        first_view, second_view = list(labels), list(labels)
        compared_columns = _manual_view(alignment)
    else:
        first_view, second_view = list(first_headers), list(second_headers)
        compared_columns = alignment.columns

    classification = classify_rows(first_rows, second_rows, first_view, second_view, formatter)
    key_spec = resolve_key_columns(options.key_columns, compared_columns)
    modified = find_modified_rows(first_rows, second_rows, compared_columns, key_spec, formatter)

    unique_first = classification.unique_to_first
    unique_second = classification.unique_to_second
    if not options.keep_modified_in_unique and modified:
        paired_first = {id(pair.first_row) for pair in modified}
        paired_second = {id(pair.second_row) for pair in modified}
        unique_first = [row for row in unique_first if id(row) not in paired_first]
        unique_second = [row for row in unique_second if id(row) not in paired_second]

    data = DataDifferences(
        common_rows=classification.common_rows,
        unique_to_first=unique_first,
        unique_to_second=unique_second,
        modified_rows=modified,
    )
    summary = ComparisonSummary(
        first_sheet_rows=len(first_rows),
        second_sheet_rows=len(second_rows),
        common_rows_count=len(data.common_rows),
        unique_to_first_count=len(data.unique_to_first),
        unique_to_second_count=len(data.unique_to_second),
        modified_rows_count=len(data.modified_rows),
    )
    LOGGER.info(
        "Compared sheets %s and %s: %s common / %s first-only / %s second-only / %s modified",
        first_sheet.name,
        second_sheet.name,
        summary.common_rows_count,
        summary.unique_to_first_count,
        summary.unique_to_second_count,
        summary.modified_rows_count,
    )
    return ComparisonResult(
        header_differences=alignment.header_differences,
        data_differences=data,
        summary=summary,
        metadata=ComparisonMetadata(
            manual_column_mappings=list(alignment.resolved_mappings),
            key_columns=list(key_spec.names),
            alignment_mode=alignment.mode,
            first_sheet_name=first_sheet.name,
            second_sheet_name=second_sheet.name,
            first_headers=first_view,
            second_headers=second_view,
        ),
    )


__all__ = [
    "KeySpec",
    "RowClassification",
    "classify_rows",
    "compare_sheets",
    "find_modified_rows",
    "resolve_key_columns",
    "row_hash",
]
