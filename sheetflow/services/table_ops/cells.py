"""Cell stringification used wherever cells are compared, hashed or grouped."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

DEFAULT_DATETIME_FORMAT = "%Y/%m/%d %H:%M:%S"
DEFAULT_DATE_FORMAT = "%Y/%m/%d"


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


@dataclass(frozen=True, slots=True)
class CellFormatter:
    """Explicit text policy for cell values.

    Dates are rendered with fixed strftime patterns instead of the host locale
    so two machines always agree on whether two date cells are equal.
    """

    datetime_format: str = DEFAULT_DATETIME_FORMAT
    date_format: str = DEFAULT_DATE_FORMAT

    def __call__(self, value: Any) -> str:
        return self.format(value)

    def format(self, value: Any) -> str:
        if _is_blank(value):
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            return value.strftime(self.datetime_format)
        if isinstance(value, date):
            return value.strftime(self.date_format)
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return repr(value)
        if isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            # rich text runs
            return "".join(self._run_text(item) for item in value)
        if isinstance(value, Mapping):
            return self._format_mapping(value)
        return str(value)

    def _run_text(self, item: Any) -> str:
        if isinstance(item, Mapping):
            return str(item.get("text") or "")
        return self.format(item)

    def _format_mapping(self, value: Mapping[str, Any]) -> str:
        if "richText" in value:
            runs = value["richText"]
            if isinstance(runs, (list, tuple)):
                return "".join(self._run_text(item) for item in runs)
            return self._run_text(runs)
        if "result" in value:
            return self.format(value.get("result"))
        return json.dumps(value, ensure_ascii=False, default=str, sort_keys=True)


DEFAULT_FORMATTER = CellFormatter()


def format_cell_value(value: Any, formatter: CellFormatter | None = None) -> str:
    """Return the canonical text of ``value`` under ``formatter`` (default policy)."""

    return (formatter or DEFAULT_FORMATTER).format(value)


__all__ = [
    "CellFormatter",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_DATETIME_FORMAT",
    "DEFAULT_FORMATTER",
    "format_cell_value",
]
