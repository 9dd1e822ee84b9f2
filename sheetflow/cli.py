"""Typer based command line entry points for SheetFlow."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from sheetflow.config import load_comparison_config
from sheetflow.core.errors import ConfigError, SheetFlowError
from sheetflow.core.logger import get_logger
from sheetflow.services.table_ops import (
    ColumnMapping,
    ComparisonOptions,
    ComparisonResult,
    ReportOptions,
    SheetData,
    apply_edits_to_sheet,
    build_comparison_report,
    compare_sheets,
    format_cell_value,
    merge_sheets,
    split_sheet_by_column,
)
from sheetflow.services.table_ops.validate import (
    validate_merge_selection,
    validate_report_options,
    validate_sheet_name,
)
from sheetflow_io import read_sheet, read_workbook, write_workbook

app = typer.Typer(help="Compare, split and merge spreadsheet sheets.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    logger = get_logger()

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")

    logging.getLogger().setLevel(level_value)
    logger.setLevel(level_value)


def _load_edits(path: Optional[Path]) -> Dict[str, Dict[str, Any]]:
    if path is None:
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read edits file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("edits file must contain a JSON object")
    return {str(key): dict(value) for key, value in payload.items() if isinstance(value, dict)}


def _parse_mapping(value: str) -> ColumnMapping:
    parts = value.split(":", 2)
    if len(parts) < 2:
        raise typer.BadParameter(f"mapping must look like FIRST:SECOND[:LABEL], got {value!r}")
    label = parts[2] if len(parts) == 3 else None
    return ColumnMapping(first_column_index=parts[0], second_column_index=parts[1], label=label)


def _load_sheet(path: Path, sheet: Optional[str]) -> SheetData:
    try:
        return read_sheet(path, sheet)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except SheetFlowError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _resolve_column(sheet: SheetData, column: str) -> int:
    header = [format_cell_value(cell) for cell in sheet.header]
    if column in header:
        return header.index(column)
    if column.isdigit():
        return int(column)
    raise typer.BadParameter(f"Column {column!r} not found in sheet {sheet.name}")


def _print_summary(result: ComparisonResult) -> None:
    meta = result.metadata
    summary = result.summary
    headers = result.header_differences
    typer.echo(f"{meta.first_sheet_name}: {summary.first_sheet_rows} rows | {meta.second_sheet_name}: {summary.second_sheet_rows} rows")
    typer.echo(
        f"common={summary.common_rows_count} first_only={summary.unique_to_first_count} "
        f"second_only={summary.unique_to_second_count} modified={summary.modified_rows_count}"
    )
    typer.echo(f"key columns: {', '.join(map(str, meta.key_columns))}")
    typer.echo(f"common columns: {', '.join(map(str, headers.common_columns))}")
    if headers.unique_to_first:
        typer.echo(f"{meta.first_sheet_name} only columns: {', '.join(map(str, headers.unique_to_first))}")
    if headers.unique_to_second:
        typer.echo(f"{meta.second_sheet_name} only columns: {', '.join(map(str, headers.unique_to_second))}")
    for pair in result.data_differences.modified_rows:
        changes = "; ".join(
            f"{diff.column}: {format_cell_value(diff.first_value)!r} -> {format_cell_value(diff.second_value)!r}"
            for diff in pair.differences
        )
        keys = ", ".join(f"{name}={format_cell_value(value)}" for name, value in pair.key_values.items())
        typer.echo(f"  [{keys}] {changes}")


@app.command("compare")
def compare_command(
    first: Path = typer.Argument(..., help="First workbook"),
    second: Path = typer.Argument(..., help="Second workbook"),
    sheet_a: Optional[str] = typer.Option(None, "--sheet-a", help="Sheet of the first workbook"),
    sheet_b: Optional[str] = typer.Option(None, "--sheet-b", help="Sheet of the second workbook"),
    key: List[str] = typer.Option([], "--key", "-k", help="Key column name (repeatable)"),
    mapping: List[str] = typer.Option(
        [], "--map", help="Manual column pair FIRST:SECOND[:LABEL] (zero-based, repeatable)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Comparison YAML file"),
    edits: Optional[Path] = typer.Option(None, "--edits", help="JSON edit overlay; sheet ids are 0 and 1"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a report workbook here"),
    report_name: Optional[str] = typer.Option(None, "--report-name", help="Report sheet name"),
) -> None:
    """Compare two sheets and print the differences."""

    report_options = ReportOptions()
    options = ComparisonOptions()
    if config is not None:
        try:
            conf = load_comparison_config(config)
        except ConfigError as exc:
            raise typer.BadParameter(str(exc)) from exc
        options = conf.to_options()
        report_options = conf.report.to_options()
    if key:
        options.key_columns = list(key)
    if mapping:
        options.alignment_mode = "manual"
        options.manual_column_mappings = [_parse_mapping(item) for item in mapping]
    if report_name is not None:
        try:
            report_options.sheet_name = validate_sheet_name(report_name)
        except SheetFlowError as exc:
            raise typer.BadParameter(str(exc)) from exc

    first_sheet = _load_sheet(first, sheet_a)
    second_sheet = _load_sheet(second, sheet_b)
    result = compare_sheets(first_sheet, second_sheet, 0, 1, _load_edits(edits), options)
    _print_summary(result)

    if report is not None:
        try:
            validate_report_options(report_options)
        except SheetFlowError as exc:
            raise typer.BadParameter(str(exc)) from exc
        sheet = build_comparison_report(result, report_options)
        write_workbook([sheet], report)
        typer.echo(f"report written: {report} ({sheet.total_rows} rows)")


@app.command("split")
def split_command(
    workbook: Path = typer.Argument(..., help="Workbook to split"),
    column: str = typer.Option(..., "--column", "-c", help="Header name or zero-based index"),
    out: Path = typer.Option(..., "--out", "-o", help="Output workbook"),
    sheet: Optional[str] = typer.Option(None, "--sheet", help="Sheet to split (default: first)"),
    edits: Optional[Path] = typer.Option(None, "--edits", help="JSON edit overlay; the sheet id is 0"),
) -> None:
    """Split one sheet into one sheet per distinct column value."""

    source = _load_sheet(workbook, sheet)
    column_index = _resolve_column(source, column)
    parts = split_sheet_by_column(source, column_index, 0, _load_edits(edits), [source])
    if not parts:
        raise typer.BadParameter(f"Column {column!r} has no non-empty values")
    write_workbook(parts, out)
    for part in parts:
        typer.echo(f"{part.name}: {part.total_rows} rows")


@app.command("merge")
def merge_command(
    workbooks: List[Path] = typer.Argument(..., help="Workbooks whose sheets are merged"),
    name: str = typer.Option("合并表格", "--name", help="Merged sheet name"),
    out: Path = typer.Option(..., "--out", "-o", help="Output workbook"),
    edits: Optional[Path] = typer.Option(
        None, "--edits", help="JSON edit overlay; sheet ids follow input order"
    ),
) -> None:
    """Stack every sheet of the given workbooks into one sheet."""

    sheets: List[SheetData] = []
    for path in workbooks:
        try:
            sheets.extend(read_workbook(path))
        except (FileNotFoundError, SheetFlowError) as exc:
            raise typer.BadParameter(str(exc)) from exc
    overlay = _load_edits(edits)
    sheets = [apply_edits_to_sheet(sheet, idx, overlay) for idx, sheet in enumerate(sheets)]
    try:
        merged_name = validate_merge_selection(sheets, name)
        merged = merge_sheets(sheets, merged_name, sheets)
    except SheetFlowError as exc:
        raise typer.BadParameter(str(exc)) from exc
    write_workbook([merged], out)
    typer.echo(f"{merged.name}: {merged.total_rows} rows, {merged.total_cols} columns")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
