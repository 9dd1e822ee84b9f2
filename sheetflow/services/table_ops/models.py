"""Data models shared by the table operations service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Union

CellValue = Union[str, int, float, bool, datetime, date, None]
Row = List[Any]
EditedRowData = Mapping[str, Mapping[str, Any]]
AlignmentMode = Literal["auto", "manual"]


def edit_key(sheet_id: int | str, row_index: int) -> str:
    """Return the overlay key for a data row of a sheet."""

    return f"{sheet_id}_{row_index}"


def _as_rows(data: Any) -> List[Row]:
    if not isinstance(data, (list, tuple)):
        return []
    return [list(row) if isinstance(row, (list, tuple)) else [] for row in data]


@dataclass(frozen=True, slots=True)
class SheetData:
    """A named grid of cell values; row 0 holds the headers.

    ``styles``, ``formulas`` and ``properties`` are carried for the workbook
    adapters and never interpreted by the engine, except ``properties["merges"]``.
    """

    name: str
    data: List[Row] = field(default_factory=list)
    styles: Optional[Mapping[str, Any]] = None
    formulas: Optional[Mapping[str, Any]] = None
    properties: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _as_rows(self.data))

    @classmethod
    def from_rows(
        cls,
        name: str,
        header: Sequence[Any],
        rows: Sequence[Sequence[Any]],
        *,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> "SheetData":
        return cls(name=name, data=[list(header), *[list(r) for r in rows]], properties=properties)

    @property
    def header(self) -> Row:
        return list(self.data[0]) if self.data else []

    @property
    def rows(self) -> List[Row]:
        return [list(row) for row in self.data[1:]]

    @property
    def total_rows(self) -> int:
        return max(len(self.data) - 1, 0)

    @property
    def total_cols(self) -> int:
        return max((len(row) for row in self.data), default=0)

    @property
    def merges(self) -> List[Any]:
        props = self.properties or {}
        merges = props.get("merges") if isinstance(props, Mapping) else None
        return list(merges) if isinstance(merges, (list, tuple)) else []


@dataclass(slots=True)
class ColumnMapping:
    """User supplied pairing of a first-sheet column with a second-sheet column."""

    first_column_index: Any
    second_column_index: Any
    label: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ResolvedColumnMapping:
    """Sanitized column mapping with a display label that is never blank."""

    first_column_index: int
    second_column_index: int
    label: str


@dataclass(slots=True)
class ComparisonOptions:
    """Options controlling column alignment and key based row matching.

    ``keep_modified_in_unique`` keeps rows that form a modified pair in the
    first-only/second-only lists as well, instead of reporting them once.
    """

    alignment_mode: AlignmentMode = "auto"
    manual_column_mappings: List[ColumnMapping] = field(default_factory=list)
    key_columns: List[str] = field(default_factory=list)
    keep_modified_in_unique: bool = False


@dataclass(slots=True)
class HeaderDifferences:
    common_columns: List[str] = field(default_factory=list)
    unique_to_first: List[str] = field(default_factory=list)
    unique_to_second: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CellDifference:
    column: str
    first_value: Any
    second_value: Any


@dataclass(slots=True)
class ModifiedRow:
    """A first/second row pair sharing a key but differing in some column."""

    first_row: Row
    second_row: Row
    key_values: Dict[str, Any]
    differences: List[CellDifference]


@dataclass(slots=True)
class DataDifferences:
    common_rows: List[Row] = field(default_factory=list)
    unique_to_first: List[Row] = field(default_factory=list)
    unique_to_second: List[Row] = field(default_factory=list)
    modified_rows: List[ModifiedRow] = field(default_factory=list)


@dataclass(slots=True)
class ComparisonSummary:
    first_sheet_rows: int
    second_sheet_rows: int
    common_rows_count: int
    unique_to_first_count: int
    unique_to_second_count: int
    modified_rows_count: int


@dataclass(slots=True)
class ComparisonMetadata:
    """Context needed to render or re-project a comparison.

    ``first_headers``/``second_headers`` are the header vocabularies the rows in
    :class:`DataDifferences` are expressed in: native headers in auto mode, the
    resolved mapping labels in manual mode.
    """

    manual_column_mappings: List[ResolvedColumnMapping] = field(default_factory=list)
    key_columns: List[str] = field(default_factory=list)
    alignment_mode: AlignmentMode = "auto"
    first_sheet_name: str = ""
    second_sheet_name: str = ""
    first_headers: List[str] = field(default_factory=list)
    second_headers: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ComparisonResult:
    header_differences: HeaderDifferences
    data_differences: DataDifferences
    summary: ComparisonSummary
    metadata: ComparisonMetadata


@dataclass(slots=True)
class ReportOptions:
    """Selection of diff categories copied into a comparison report sheet."""

    sheet_name: str = ""
    include_unique_from_first: bool = True
    include_unique_from_second: bool = True
    include_modified_rows: bool = True
    highlight_changes: bool = True

    @property
    def any_category_selected(self) -> bool:
        return (
            self.include_unique_from_first
            or self.include_unique_from_second
            or self.include_modified_rows
        )


@dataclass(frozen=True, slots=True)
class MergeRange:
    """One-based, inclusive rectangle of merged cells."""

    top: int
    left: int
    bottom: int
    right: int


@dataclass(frozen=True, slots=True)
class MergeMeta:
    row_span: int
    col_span: int
    is_top_left: bool


@dataclass(slots=True)
class MergeAnalysis:
    """Column layout of a prospective merge, shown before merging."""

    all_columns: List[Any] = field(default_factory=list)
    new_columns: List[Any] = field(default_factory=list)
    existing_columns: List[Any] = field(default_factory=list)
    sheet_column_mapping: Dict[str, List[Any]] = field(default_factory=dict)


__all__ = [
    "AlignmentMode",
    "CellDifference",
    "CellValue",
    "ColumnMapping",
    "ComparisonMetadata",
    "ComparisonOptions",
    "ComparisonResult",
    "ComparisonSummary",
    "DataDifferences",
    "EditedRowData",
    "HeaderDifferences",
    "MergeAnalysis",
    "MergeMeta",
    "MergeRange",
    "ModifiedRow",
    "ReportOptions",
    "ResolvedColumnMapping",
    "Row",
    "SheetData",
    "edit_key",
]
