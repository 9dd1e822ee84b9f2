"""Chunked render window over a sheet with merged cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .merge_index import (
    MergeIndex,
    build_merge_index,
    cell_key,
    clamp_row_span,
    header_row_count,
    resolve_column_count,
)
from .models import EditedRowData, SheetData, edit_key

DATA_CHUNK_SIZE = 200


@dataclass(frozen=True, slots=True)
class RenderedCell:
    row_index: int
    col_index: int
    value: Any
    row_span: int
    col_span: int
    is_header: bool


@dataclass(slots=True)
class RenderWindow:
    """Rows of a sheet materialized so far, growing one chunk at a time.

    Row and column indices are zero-based; the merge index keys are one-based.
    """

    sheet: SheetData
    sheet_id: int | str = 0
    edits: Optional[EditedRowData] = None
    chunk_size: int = DATA_CHUNK_SIZE
    header_row_index: int = 0
    column_count: int = field(init=False)
    header_rows: int = field(init=False)
    visible_data_rows: int = field(init=False)
    merge_index: MergeIndex = field(init=False)

    def __post_init__(self) -> None:
        self.chunk_size = max(1, self.chunk_size)
        self.column_count = resolve_column_count(self.sheet)
        self.header_rows = header_row_count(self.sheet, self.header_row_index)
        self.merge_index = build_merge_index(self.sheet.merges, len(self.sheet.data), self.column_count)
        self.visible_data_rows = min(self.chunk_size, self.data_row_count)

    @property
    def data_row_count(self) -> int:
        return max(len(self.sheet.data) - self.header_rows, 0)

    @property
    def rendered_row_count(self) -> int:
        return self.header_rows + self.visible_data_rows

    @property
    def has_more(self) -> bool:
        return self.visible_data_rows < self.data_row_count

    def load_more(self) -> int:
        """Materialize the next chunk; returns the new rendered row count."""

        if self.has_more:
            self.visible_data_rows = min(self.data_row_count, self.visible_data_rows + self.chunk_size)
        return self.rendered_row_count

    def cell_value(self, row_index: int, col_index: int) -> Any:
        row = self.sheet.data[row_index] if 0 <= row_index < len(self.sheet.data) else []
        value = row[col_index] if 0 <= col_index < len(row) else None
        if row_index < self.header_rows or not self.edits:
            return value
        row_edits = self.edits.get(edit_key(self.sheet_id, row_index - self.header_rows))
        if row_edits and row_edits.get(str(col_index)) is not None:
            return row_edits[str(col_index)]
        return value

    def cell_span(self, row_index: int, col_index: int) -> Optional[Tuple[int, int]]:
        """``(row_span, col_span)`` to paint, or ``None`` for a covered cell."""

        meta = self.merge_index.get(cell_key(row_index + 1, col_index + 1))
        if meta is None:
            return 1, 1
        if not meta.is_top_left:
            return None
        return clamp_row_span(meta.row_span, self.rendered_row_count, row_index), meta.col_span

    def render_plan(self) -> List[List[RenderedCell]]:
        """Cells to paint for every rendered row, covered cells omitted."""

        plan: List[List[RenderedCell]] = []
        for row_index in range(self.rendered_row_count):
            cells: List[RenderedCell] = []
            for col_index in range(self.column_count):
                span = self.cell_span(row_index, col_index)
                if span is None:
                    continue
                cells.append(
                    RenderedCell(
                        row_index=row_index,
                        col_index=col_index,
                        value=self.cell_value(row_index, col_index),
                        row_span=span[0],
                        col_span=span[1],
                        is_header=row_index < self.header_rows,
                    )
                )
            plan.append(cells)
        return plan


__all__ = ["DATA_CHUNK_SIZE", "RenderWindow", "RenderedCell"]
