"""Row classification, key matching and full sheet comparison."""

from __future__ import annotations

import pytest

from sheetflow.services.table_ops import (
    ColumnMapping,
    ComparisonOptions,
    SheetData,
    classify_rows,
    compare_sheets,
)
from sheetflow.services.table_ops.matcher import row_hash


@pytest.fixture()
def people_a() -> SheetData:
    return SheetData.from_rows("A", ["ID", "Name", "Age"], [["1", "Alice", "30"], ["2", "Bob", "25"]])


@pytest.fixture()
def people_b() -> SheetData:
    return SheetData.from_rows("B", ["ID", "Name", "Age"], [["1", "Alice", "31"], ["3", "Carol", "22"]])


def test_compare_reports_unique_and_modified_rows(people_a: SheetData, people_b: SheetData) -> None:
    result = compare_sheets(people_a, people_b, 0, 1, {}, ComparisonOptions(key_columns=["ID"]))

    data = result.data_differences
    assert data.common_rows == []
    assert data.unique_to_first == [["2", "Bob", "25"]]
    assert data.unique_to_second == [["3", "Carol", "22"]]
    assert len(data.modified_rows) == 1
    modified = data.modified_rows[0]
    assert modified.key_values == {"ID": "1"}
    assert [(d.column, d.first_value, d.second_value) for d in modified.differences] == [("Age", "30", "31")]
    assert result.summary.modified_rows_count == 1
    assert result.metadata.key_columns == ["ID"]


def test_modified_pairs_can_stay_in_unique_lists(people_a: SheetData, people_b: SheetData) -> None:
    options = ComparisonOptions(key_columns=["ID"], keep_modified_in_unique=True)

    result = compare_sheets(people_a, people_b, 0, 1, {}, options)

    assert result.data_differences.unique_to_first == [["1", "Alice", "30"], ["2", "Bob", "25"]]
    assert result.data_differences.unique_to_second == [["1", "Alice", "31"], ["3", "Carol", "22"]]
    assert len(result.data_differences.modified_rows) == 1


def test_compare_sheet_with_itself(people_a: SheetData) -> None:
    duplicate = SheetData.from_rows("A", people_a.header, people_a.rows + [["2", "Bob", "25"]])

    result = compare_sheets(duplicate, duplicate, 0, 0)

    assert result.data_differences.unique_to_first == []
    assert result.data_differences.unique_to_second == []
    assert result.data_differences.modified_rows == []
    assert len(result.data_differences.common_rows) == duplicate.total_rows


def test_edits_are_applied_before_comparing(people_a: SheetData, people_b: SheetData) -> None:
    edits = {"0_0": {"2": "31"}}

    result = compare_sheets(people_a, people_b, 0, 1, edits, ComparisonOptions(key_columns=["ID"]))

    assert result.data_differences.common_rows == [["1", "Alice", "31"]]
    assert result.data_differences.modified_rows == []


def test_row_hash_ignores_column_order() -> None:
    assert row_hash(["1", "x"], ["ID", "V"]) == row_hash(["x", "1"], ["V", "ID"])
    assert row_hash(["1", None], ["ID", "V"]) == row_hash(["1"], ["ID", "V"])


def test_classify_rows_matches_reordered_columns() -> None:
    outcome = classify_rows([["1", "x"]], [["x", "1"]], ["ID", "V"], ["V", "ID"])

    assert outcome.common_rows == [["1", "x"]]
    assert outcome.unique_to_first == []
    assert outcome.unique_to_second == []


def test_default_key_is_first_common_column() -> None:
    first = SheetData.from_rows("A", ["Note", "Code", "Qty"], [["a", "K1", 1]])
    second = SheetData.from_rows("B", ["Code", "Qty"], [["K1", 2]])

    result = compare_sheets(first, second, 0, 1)

    assert result.metadata.key_columns == ["Code"]
    assert [(d.column, d.first_value, d.second_value) for d in result.data_differences.modified_rows[0].differences] == [
        ("Qty", 1, 2)
    ]


def test_unknown_key_columns_fall_back_to_default(people_a: SheetData, people_b: SheetData) -> None:
    result = compare_sheets(people_a, people_b, 0, 1, None, ComparisonOptions(key_columns=["Missing"]))

    assert result.metadata.key_columns == ["ID"]


def test_composite_key_columns(people_a: SheetData) -> None:
    second = SheetData.from_rows("B", ["ID", "Name", "Age"], [["1", "Alicia", "30"]])

    result = compare_sheets(people_a, second, 0, 1, None, ComparisonOptions(key_columns=["ID", "Name"]))

    assert result.metadata.key_columns == ["ID", "Name"]
    assert result.data_differences.modified_rows == []


def test_positional_key_without_common_columns() -> None:
    first = SheetData.from_rows("A", ["x", "y"], [["k", "1"]])
    second = SheetData.from_rows("B", ["p", "q"], [["k", "2"]])

    result = compare_sheets(first, second, 0, 1)

    assert result.header_differences.common_columns == []
    assert result.metadata.key_columns == ["列1"]
    # Nothing is aligned, so a key match still has no comparable column.
    assert result.data_differences.modified_rows == []


def test_duplicate_keys_keep_last_row() -> None:
    first = SheetData.from_rows("A", ["ID", "V"], [["1", "a"], ["1", "b"]])
    second = SheetData.from_rows("B", ["ID", "V"], [["1", "c"]])

    result = compare_sheets(first, second, 0, 1, options=ComparisonOptions(key_columns=["ID"]))

    modified = result.data_differences.modified_rows
    assert len(modified) == 1
    assert modified[0].first_row == ["1", "b"]
    assert result.data_differences.unique_to_first == [["1", "a"]]


def test_manual_alignment_compares_mapped_columns() -> None:
    first = SheetData.from_rows("A", ["ID", "Name", "Score"], [["1", "Ann", 90], ["2", "Ben", 70]])
    second = SheetData.from_rows("B", ["Points", "Code"], [[95, "1"], [70, "2"]])
    options = ComparisonOptions(
        alignment_mode="manual",
        manual_column_mappings=[
            ColumnMapping(first_column_index=0, second_column_index=1, label="编号"),
            ColumnMapping(first_column_index=2, second_column_index=0, label="分数"),
        ],
        key_columns=["编号"],
    )

    result = compare_sheets(first, second, 0, 1, None, options)

    assert result.metadata.first_headers == ["编号", "分数"]
    assert [m.label for m in result.metadata.manual_column_mappings] == ["编号", "分数"]
    assert result.data_differences.common_rows == [["2", 70]]
    modified = result.data_differences.modified_rows
    assert len(modified) == 1
    assert modified[0].key_values == {"编号": "1"}
    assert [(d.column, d.first_value, d.second_value) for d in modified[0].differences] == [("分数", 90, 95)]
    assert result.data_differences.unique_to_first == []
    assert result.data_differences.unique_to_second == []


def test_numbers_and_text_compare_by_text() -> None:
    first = SheetData.from_rows("A", ["ID", "V"], [[1, 2.0]])
    second = SheetData.from_rows("B", ["ID", "V"], [["1", "2"]])

    result = compare_sheets(first, second, 0, 1)

    assert len(result.data_differences.common_rows) == 1
    assert result.data_differences.modified_rows == []


def test_empty_sheets_compare_cleanly() -> None:
    result = compare_sheets(SheetData(name="A"), SheetData(name="B"), 0, 1)

    assert result.summary.first_sheet_rows == 0
    assert result.header_differences.common_columns == []
    assert result.data_differences.modified_rows == []


def test_null_edit_does_not_create_modified_rows(people_a: SheetData) -> None:
    result = compare_sheets(people_a, people_a, 0, 1, {"0_0": {"1": None}})

    assert result.data_differences.modified_rows == []
    assert result.summary.common_rows_count == 2


def test_rows_with_blank_keys_pair_with_each_other() -> None:
    first = SheetData.from_rows("A", ["ID", "Name"], [["", "a"]])
    second = SheetData.from_rows("B", ["ID", "Name"], [["", "b"]])

    result = compare_sheets(first, second, 0, 1)

    modified = result.data_differences.modified_rows
    assert [(pair.key_values, [d.column for d in pair.differences]) for pair in modified] == [({"ID": ""}, ["Name"])]
