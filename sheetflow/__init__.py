"""SheetFlow: spreadsheet comparison and restructuring toolkit."""

__version__ = "0.1.0"
