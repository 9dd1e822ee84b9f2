"""CSV export and caller-side validation."""

from __future__ import annotations

import pytest

from sheetflow.core.errors import ValidationError
from sheetflow.services.table_ops import SheetData, sheet_to_csv_text
from sheetflow.services.table_ops.validate import (
    EMPTY_NAME_MESSAGE,
    validate_compare_pair,
    validate_merge_selection,
    validate_sheet_name,
)


def test_csv_text_quotes_special_cells() -> None:
    sheet = SheetData.from_rows("S", ["Name", "Note"], [["Ann", 'says "hi", ok'], ["Ben", None], ["Cat", "a\nb"]])

    text = sheet_to_csv_text(sheet)

    assert text == 'Name,Note\nAnn,"says ""hi"", ok"\nBen,\nCat,"a\nb"\n'


def test_validate_sheet_name_trims() -> None:
    assert validate_sheet_name("  合并表格 ") == "合并表格"
    with pytest.raises(ValidationError, match=EMPTY_NAME_MESSAGE):
        validate_sheet_name("   ")


def test_validate_compare_pair_rejects_same_sheet() -> None:
    validate_compare_pair(0, 1)
    with pytest.raises(ValidationError):
        validate_compare_pair(2, 2)


def test_validate_merge_selection_needs_two_sheets() -> None:
    one = SheetData.from_rows("A", ["x"], [])
    two = SheetData.from_rows("B", ["x"], [])

    assert validate_merge_selection([one, two], " M ") == "M"
    with pytest.raises(ValidationError):
        validate_merge_selection([one], "M")
