"""Column alignment between two header rows."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from .models import (
    ColumnMapping,
    ComparisonOptions,
    HeaderDifferences,
    ResolvedColumnMapping,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AlignedColumn:
    """One compared column: display label plus its position on each side."""

    label: str
    first_index: int
    second_index: int


@dataclass(slots=True)
class ColumnAlignment:
    """Outcome of aligning two header rows."""

    header_differences: HeaderDifferences
    columns: List[AlignedColumn]
    resolved_mappings: List[ResolvedColumnMapping]
    mode: str = "auto"


def default_column_label(first_index: int) -> str:
    return f"列{first_index + 1}"


def _coerce_index(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return math.floor(value)


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length - 1))


def resolve_manual_mappings(
    mappings: Iterable[ColumnMapping | dict] | None,
    first_header_length: int,
    second_header_length: int,
) -> List[ResolvedColumnMapping]:
    """Sanitize user supplied column pairs.

    Non-numeric or non-finite indices drop the pair; the rest are floored and
    clamped per side. When either header row is empty nothing can be mapped.
    """

    if first_header_length <= 0 or second_header_length <= 0:
        return []

    resolved: List[ResolvedColumnMapping] = []
    for raw in mappings or ():
        if isinstance(raw, dict):
            first_raw = raw.get("first_column_index", raw.get("firstColumnIndex"))
            second_raw = raw.get("second_column_index", raw.get("secondColumnIndex"))
            label_raw = raw.get("label")
        elif isinstance(raw, ColumnMapping):
            first_raw, second_raw, label_raw = (
                raw.first_column_index,
                raw.second_column_index,
                raw.label,
            )
        else:
            continue

        first = _coerce_index(first_raw)
        second = _coerce_index(second_raw)
        if first is None or second is None:
            LOGGER.debug("Dropping malformed column mapping: %r", raw)
            continue
        first = _clamp(first, first_header_length)
        second = _clamp(second, second_header_length)
        label = str(label_raw).strip() if label_raw is not None else ""
        resolved.append(
            ResolvedColumnMapping(
                first_column_index=first,
                second_column_index=second,
                label=label or default_column_label(first),
            )
        )
    return resolved


def _header_names(headers: Sequence[Any] | None) -> List[Any]:
    return list(headers) if isinstance(headers, (list, tuple)) else []


def align_columns(
    first_headers: Sequence[Any] | None,
    second_headers: Sequence[Any] | None,
    options: ComparisonOptions | None = None,
) -> ColumnAlignment:
    """Align the columns of two sheets by name (auto) or by explicit pairs (manual)."""

    options = options or ComparisonOptions()
    first = _header_names(first_headers)
    second = _header_names(second_headers)

    if options.alignment_mode == "manual":
        return _align_manual(first, second, options.manual_column_mappings)
    return _align_auto(first, second)


def _align_auto(first: List[Any], second: List[Any]) -> ColumnAlignment:
    second_set = set(second)
    first_set = set(first)
    common = [col for col in first if col in second_set]
    columns = [
        AlignedColumn(label=col, first_index=first.index(col), second_index=second.index(col))
        for col in dict.fromkeys(common)
    ]
    return ColumnAlignment(
        header_differences=HeaderDifferences(
            common_columns=common,
            unique_to_first=[col for col in first if col not in second_set],
            unique_to_second=[col for col in second if col not in first_set],
        ),
        columns=columns,
        resolved_mappings=[],
        mode="auto",
    )


def _align_manual(
    first: List[Any],
    second: List[Any],
    mappings: Iterable[ColumnMapping | dict] | None,
) -> ColumnAlignment:
    resolved = resolve_manual_mappings(mappings, len(first), len(second))
    columns = [
        AlignedColumn(
            label=mapping.label,
            first_index=mapping.first_column_index,
            second_index=mapping.second_column_index,
        )
        for mapping in resolved
    ]
    used_first = {mapping.first_column_index for mapping in resolved}
    used_second = {mapping.second_column_index for mapping in resolved}
    return ColumnAlignment(
        header_differences=HeaderDifferences(
            common_columns=[mapping.label for mapping in resolved],
            unique_to_first=[col for idx, col in enumerate(first) if idx not in used_first],
            unique_to_second=[col for idx, col in enumerate(second) if idx not in used_second],
        ),
        columns=columns,
        resolved_mappings=resolved,
        mode="manual",
    )


__all__ = [
    "AlignedColumn",
    "ColumnAlignment",
    "align_columns",
    "default_column_label",
    "resolve_manual_mappings",
]
