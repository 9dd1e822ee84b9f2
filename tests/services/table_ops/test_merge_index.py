"""Merged cell index and chunked rendering."""

from __future__ import annotations

from sheetflow.services.table_ops import (
    MergeMeta,
    MergeRange,
    RenderWindow,
    SheetData,
    build_merge_index,
    clamp_row_span,
    header_row_count,
    normalize_merge_range,
    resolve_column_count,
)


def test_index_covers_every_cell_of_a_region() -> None:
    index = build_merge_index([{"top": 1, "left": 1, "bottom": 2, "right": 3}], 5, 5)

    assert len(index) == 6
    assert index["1_1"] == MergeMeta(row_span=2, col_span=3, is_top_left=True)
    assert index["2_3"] == MergeMeta(row_span=2, col_span=3, is_top_left=False)


def test_one_top_left_per_region() -> None:
    merges = [
        MergeRange(1, 1, 1, 2),
        "C3:D5",
        {"top": 6, "left": 1, "bottom": 7, "right": 1},
        {"top": "x", "left": 1, "bottom": 2, "right": 2},
        "not a range",
    ]

    index = build_merge_index(merges, 10, 4)

    assert sum(1 for meta in index.values() if meta.is_top_left) == 3
    assert index["3_3"].row_span == 3 and index["3_3"].col_span == 2


def test_regions_are_clamped_to_the_grid() -> None:
    index = build_merge_index([MergeRange(2, 2, 9, 9)], 4, 3)

    assert index["2_2"] == MergeMeta(row_span=3, col_span=2, is_top_left=True)
    assert "5_2" not in index


def test_empty_grid_has_no_index() -> None:
    assert build_merge_index([MergeRange(1, 1, 2, 2)], 0, 3) == {}


def test_normalize_merge_range_swaps_inverted_bounds() -> None:
    assert normalize_merge_range({"top": 4, "left": 3, "bottom": 2, "right": 1}) == MergeRange(2, 1, 4, 3)
    assert normalize_merge_range(" a1:b2 ") == MergeRange(1, 1, 2, 2)
    assert normalize_merge_range(42) is None


def test_clamp_row_span_to_rendered_window() -> None:
    # Merge over rows 3..7 (zero-based), only rows 0..4 rendered.
    assert clamp_row_span(5, 5, 3) == 2
    assert clamp_row_span(2, 100, 3) == 2
    assert clamp_row_span(4, 3, 7) == 1


def test_header_band_grows_with_header_merges() -> None:
    sheet = SheetData(
        name="S",
        data=[["Title", None], [None, None], ["a", "b"], ["1", "2"]],
        properties={"merges": [{"top": 1, "left": 1, "bottom": 2, "right": 2}]},
    )

    assert header_row_count(sheet) == 2
    assert resolve_column_count(sheet) == 2


def test_column_count_includes_merges_and_declared_columns() -> None:
    sheet = SheetData(
        name="S",
        data=[["a"]],
        properties={"merges": ["A1:D1"], "columns": [{}, {}]},
    )

    assert resolve_column_count(sheet) == 4


def test_render_window_loads_chunks_and_clamps_spans() -> None:
    rows = [["H", "V"]] + [[f"r{i}", i] for i in range(7)]
    sheet = SheetData(
        name="S",
        data=rows,
        properties={"merges": [{"top": 4, "left": 1, "bottom": 8, "right": 1}]},
    )
    window = RenderWindow(sheet, chunk_size=4)

    assert window.rendered_row_count == 5
    assert window.has_more
    assert window.cell_span(3, 0) == (2, 1)
    assert window.cell_span(4, 0) is None
    assert window.cell_span(3, 1) == (1, 1)

    assert window.load_more() == 8
    assert not window.has_more
    assert window.cell_span(3, 0) == (5, 1)


def test_render_plan_skips_covered_cells_and_applies_edits() -> None:
    sheet = SheetData(
        name="S",
        data=[["A", "B"], ["x", "y"]],
        properties={"merges": [{"top": 1, "left": 1, "bottom": 1, "right": 2}]},
    )
    window = RenderWindow(sheet, sheet_id=2, edits={"2_0": {"1": "Y"}})

    plan = window.render_plan()

    assert [[(c.value, c.col_span, c.is_header) for c in row] for row in plan] == [
        [("A", 2, True)],
        [("x", 1, False), ("Y", 1, False)],
    ]


def test_render_window_null_edit_shows_original_value() -> None:
    sheet = SheetData(name="S", data=[["A"], ["x"]])
    window = RenderWindow(sheet, sheet_id=0, edits={"0_0": {"0": None}})

    assert window.cell_value(1, 0) == "x"
