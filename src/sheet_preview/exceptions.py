__all__ = [
    "EditRejectedError",
    "ExportError",
    "FileError",
    "FormulaError",
    "SheetPreviewError",
    "TokenizerError",
]


class SheetPreviewError(Exception):
    """Base class for other exceptions."""


class FormulaError(SheetPreviewError):
    """Raised for formula evaluation errors."""


class TokenizerError(FormulaError):
    """Raised when an expression cannot be split into tokens."""


class EditRejectedError(SheetPreviewError):
    """Raised when a cell cannot be edited by the user."""


class ExportError(SheetPreviewError):
    """Raised when there is nothing to export."""


class FileError(SheetPreviewError):
    """Raised for IO and other OS errors."""
