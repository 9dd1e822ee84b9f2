"""Comparison report sheets."""

from __future__ import annotations

import pytest

from sheetflow.core.errors import ValidationError
from sheetflow.services.table_ops import (
    ComparisonOptions,
    ReportOptions,
    SheetData,
    build_comparison_report,
    compare_sheets,
)
from sheetflow.services.table_ops.report import CATEGORY_MODIFIED, CATEGORY_UNIQUE_FIRST, CATEGORY_UNIQUE_SECOND
from sheetflow.services.table_ops.validate import validate_report_options


@pytest.fixture()
def comparison():
    first = SheetData.from_rows("A", ["ID", "Name", "Age"], [["1", "Alice", "30"], ["2", "Bob", "25"]])
    second = SheetData.from_rows(
        "B", ["ID", "Age", "Email"], [["1", "31", "a@x"], ["3", "22", "c@x"]]
    )
    return compare_sheets(first, second, 0, 1, None, ComparisonOptions(key_columns=["ID"]))


def test_report_concatenates_selected_categories(comparison) -> None:
    sheet = build_comparison_report(comparison, ReportOptions(sheet_name="  差异  "))

    assert sheet.name == "差异"
    assert sheet.header == ["ID", "Name", "Age", "Email"]
    assert sheet.rows == [
        ["2", "Bob", "25", ""],
        ["3", "", "22", "c@x"],
        ["1", "", "31", "a@x"],
    ]
    assert sheet.properties["row_categories"] == [
        CATEGORY_UNIQUE_FIRST,
        CATEGORY_UNIQUE_SECOND,
        CATEGORY_MODIFIED,
    ]
    assert sheet.properties["highlight_changes"] is True
    assert sheet.properties["highlights"] == [{"row": 4, "col": 3}]


def test_report_without_highlight(comparison) -> None:
    options = ReportOptions(include_unique_from_first=False, include_unique_from_second=False, highlight_changes=False)

    sheet = build_comparison_report(comparison, options)

    assert sheet.name == "A_B_差异报告"
    assert sheet.rows == [["1", "", "31", "a@x"]]
    assert sheet.properties["highlights"] == []
    assert sheet.properties["highlight_changes"] is False


def test_report_name_avoids_existing_sheets(comparison) -> None:
    existing = [SheetData(name="A_B_差异报告")]

    sheet = build_comparison_report(comparison, ReportOptions(include_modified_rows=False), existing)

    assert sheet.name == "A_B_差异报告_1"
    assert sheet.total_rows == 2


def test_report_options_require_a_category() -> None:
    options = ReportOptions(
        include_unique_from_first=False,
        include_unique_from_second=False,
        include_modified_rows=False,
    )

    with pytest.raises(ValidationError):
        validate_report_options(options)
