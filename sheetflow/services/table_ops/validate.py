"""Caller-side checks run before invoking the table operations."""

from __future__ import annotations

from typing import Sequence

from sheetflow.core.errors import ValidationError

from .models import ReportOptions, SheetData

EMPTY_NAME_MESSAGE = "名称不能为空"
NO_CATEGORY_MESSAGE = "请至少选择一种差异数据参与合并"
SAME_SHEET_MESSAGE = "请选择两个不同的工作表进行对比"
TOO_FEW_SHEETS_MESSAGE = "请至少选择两个工作表进行合并"


def validate_sheet_name(name: str | None) -> str:
    """Return the trimmed name or raise when it is blank."""

    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError(EMPTY_NAME_MESSAGE)
    return trimmed


def validate_report_options(options: ReportOptions) -> ReportOptions:
    if not options.any_category_selected:
        raise ValidationError(NO_CATEGORY_MESSAGE)
    return options


def validate_compare_pair(first_index: int, second_index: int) -> None:
    if first_index == second_index:
        raise ValidationError(SAME_SHEET_MESSAGE)


def validate_merge_selection(sheets: Sequence[SheetData], merged_name: str | None) -> str:
    """Check a merge request the way the merge dialog does; returns the trimmed name."""

    if len(sheets) < 2:
        raise ValidationError(TOO_FEW_SHEETS_MESSAGE)
    return validate_sheet_name(merged_name)


__all__ = [
    "EMPTY_NAME_MESSAGE",
    "NO_CATEGORY_MESSAGE",
    "SAME_SHEET_MESSAGE",
    "TOO_FEW_SHEETS_MESSAGE",
    "validate_compare_pair",
    "validate_merge_selection",
    "validate_report_options",
    "validate_sheet_name",
]
