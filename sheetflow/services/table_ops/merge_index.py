"""Spatial index of merged-cell regions for grid rendering."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional

from openpyxl.utils.cell import range_boundaries

from .models import MergeMeta, MergeRange, SheetData

LOGGER = logging.getLogger(__name__)

MergeIndex = Dict[str, MergeMeta]


def cell_key(row: int, col: int) -> str:
    """Index key of a one-based cell position."""

    return f"{row}_{col}"


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, int):
        return value
    return None


def normalize_merge_range(raw: Any) -> Optional[MergeRange]:
    """Coerce a merge descriptor into a :class:`MergeRange`.

    Accepts a ``MergeRange``, a mapping with ``top/left/bottom/right`` or an
    A1 style range such as ``"A1:C2"``. Inverted bounds are swapped; anything
    else yields ``None``.
    """

    if isinstance(raw, MergeRange):
        top, left, bottom, right = raw.top, raw.left, raw.bottom, raw.right
    elif isinstance(raw, str):
        try:
            min_col, min_row, max_col, max_row = range_boundaries(raw.strip().upper())
        except (TypeError, ValueError):
            return None
        if None in (min_col, min_row, max_col, max_row):
            return None
        top, left, bottom, right = min_row, min_col, max_row, max_col
    elif isinstance(raw, Mapping):
        values = [_as_int(raw.get(name)) for name in ("top", "left", "bottom", "right")]
        if any(value is None for value in values):
            return None
        top, left, bottom, right = values
    else:
        return None

    top, bottom = min(top, bottom), max(top, bottom)
    left, right = min(left, right), max(left, right)
    return MergeRange(top=top, left=left, bottom=bottom, right=right)


def build_merge_index(merges: Iterable[Any] | None, row_count: int, col_count: int) -> MergeIndex:
    """Map every covered one-based cell to the span of its merge region.

    Each region is clamped into ``[1, row_count] x [1, col_count]``; exactly
    one cell per kept region is flagged ``is_top_left``. Regions that cannot
    be interpreted or that collapse after clamping are skipped.
    """

    index: MergeIndex = {}
    if row_count <= 0 or col_count <= 0:
        return index

    for raw in merges or ():
        merge = normalize_merge_range(raw)
        if merge is None:
            LOGGER.debug("Skipping unreadable merge descriptor: %r", raw)
            continue
        top = max(1, min(merge.top, row_count))
        bottom = max(1, min(merge.bottom, row_count))
        left = max(1, min(merge.left, col_count))
        right = max(1, min(merge.right, col_count))
        if top > bottom or left > right:
            continue

        row_span = bottom - top + 1
        col_span = right - left + 1
        for row in range(top, bottom + 1):
            for col in range(left, right + 1):
                index[cell_key(row, col)] = MergeMeta(
                    row_span=row_span,
                    col_span=col_span,
                    is_top_left=row == top and col == left,
                )
    return index


def clamp_row_span(row_span: int, rendered_row_count: int, row_index: int) -> int:
    """Row span a top-left cell may use when only ``rendered_row_count`` rows exist.

    ``row_index`` is the zero-based position of the cell's row in the grid.
    """

    remaining = max(1, rendered_row_count - row_index)
    return min(row_span, remaining)


def resolve_column_count(sheet: SheetData) -> int:
    """Widest of the data rows, declared columns and right-most merge edge."""

    props = sheet.properties if isinstance(sheet.properties, Mapping) else {}
    declared = props.get("columns")
    from_columns = len(declared) if isinstance(declared, (list, tuple)) else 0
    from_merges = 0
    for raw in sheet.merges:
        merge = normalize_merge_range(raw)
        if merge is not None:
            from_merges = max(from_merges, merge.right)
    return max(sheet.total_cols, from_columns, from_merges)


def header_row_count(sheet: SheetData, header_row_index: int = 0) -> int:
    """Number of leading rows rendered as header.

    The header band is extended downwards to the bottom of any merge region
    that covers the header row.
    """

    rows = len(sheet.data)
    count = min(header_row_index + 1, rows)
    header_row_number = header_row_index + 1
    for raw in sheet.merges:
        merge = normalize_merge_range(raw)
        if merge is None:
            continue
        if merge.top <= header_row_number <= merge.bottom:
            count = max(count, min(rows, merge.bottom))
    return count


__all__ = [
    "MergeIndex",
    "build_merge_index",
    "cell_key",
    "clamp_row_span",
    "header_row_count",
    "normalize_merge_range",
    "resolve_column_count",
]
