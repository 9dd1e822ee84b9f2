"""`sheetflow_io` top-level package exports the workbook adapters for SheetFlow."""

# Module responsibilities:
# - Re-export the workbook decoder/encoder and pandas helpers so consumers have a stable API surface.

from __future__ import annotations

from .excel_reader import read_sheet, read_workbook
from .excel_writer import safe_sheet_title, write_workbook
from .frames import frame_to_sheet, sheet_to_frame

__all__ = [
    "read_workbook",
    "read_sheet",
    "write_workbook",
    "safe_sheet_title",
    "sheet_to_frame",
    "frame_to_sheet",
]

__version__ = "0.1.0"
