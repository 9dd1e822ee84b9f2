"""Sheet name helpers."""

from __future__ import annotations

from typing import Iterable, Union

from .models import SheetData

ExistingSheets = Iterable[Union[SheetData, str]]


def _existing_names(existing: ExistingSheets | None) -> set[str]:
    names: set[str] = set()
    for item in existing or ():
        names.add(item.name if isinstance(item, SheetData) else str(item))
    return names


def generate_unique_sheet_name(base_name: str, existing: ExistingSheets | None) -> str:
    """Return ``base_name`` or the first free ``{base_name}_{n}`` (n >= 1)."""

    taken = _existing_names(existing)
    if base_name not in taken:
        return base_name
    counter = 1
    while f"{base_name}_{counter}" in taken:
        counter += 1
    return f"{base_name}_{counter}"


__all__ = ["ExistingSheets", "generate_unique_sheet_name"]
