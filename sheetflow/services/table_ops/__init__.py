"""Table operations service package: compare, split, merge and render sheets."""

from .alignment import align_columns, resolve_manual_mappings
from .cells import CellFormatter, format_cell_value
from .export import sheet_to_csv_text
from .grid import RenderWindow, RenderedCell
from .matcher import classify_rows, compare_sheets, find_modified_rows
from .merge_index import (
    build_merge_index,
    clamp_row_span,
    header_row_count,
    normalize_merge_range,
    resolve_column_count,
)
from .merger import analyze_sheets_for_merge, merge_sheets
from .models import (
    ColumnMapping,
    ComparisonOptions,
    ComparisonResult,
    EditedRowData,
    MergeAnalysis,
    MergeMeta,
    MergeRange,
    ReportOptions,
    ResolvedColumnMapping,
    SheetData,
    edit_key,
)
from .naming import generate_unique_sheet_name
from .overlay import apply_edits_to_sheet, project_edits
from .report import build_comparison_report, default_report_name
from .splitter import column_unique_values, split_sheet_by_column

__all__ = [
    "CellFormatter",
    "ColumnMapping",
    "ComparisonOptions",
    "ComparisonResult",
    "EditedRowData",
    "MergeAnalysis",
    "MergeMeta",
    "MergeRange",
    "RenderWindow",
    "RenderedCell",
    "ReportOptions",
    "ResolvedColumnMapping",
    "SheetData",
    "align_columns",
    "analyze_sheets_for_merge",
    "apply_edits_to_sheet",
    "build_comparison_report",
    "build_merge_index",
    "clamp_row_span",
    "classify_rows",
    "column_unique_values",
    "compare_sheets",
    "default_report_name",
    "edit_key",
    "find_modified_rows",
    "format_cell_value",
    "generate_unique_sheet_name",
    "header_row_count",
    "merge_sheets",
    "normalize_merge_range",
    "project_edits",
    "resolve_column_count",
    "resolve_manual_mappings",
    "sheet_to_csv_text",
    "split_sheet_by_column",
]
