"""Custom exceptions used across SheetFlow."""


class SheetFlowError(Exception):
    """Base error for the application."""


class ConfigError(SheetFlowError):
    """Configuration related error."""


class ValidationError(SheetFlowError):
    """Raised when user input is rejected before an operation runs."""


class MergeInputError(SheetFlowError):
    """Raised when a merge is requested without any input sheet."""


class WorkbookError(SheetFlowError):
    """Raised when a workbook cannot be read or written."""
