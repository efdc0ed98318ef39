"""
Error types for the EdgeCore journal.

Row-level problems during import are never raised; they are tallied by the
ingestor. These exceptions cover whole-operation failures and invalid engine
configuration.
"""

from typing import Any, Optional


class EdgecoreError(Exception):
    """Base class for EdgeCore errors."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ImportFormatError(EdgecoreError):
    """Workbook could not be read as a spreadsheet."""


class EmptyWorkbookError(ImportFormatError):
    """Workbook was readable but produced zero usable trades."""

    def __init__(
        self,
        message: str,
        skipped: Optional[dict[str, int]] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.skipped = skipped or {}
        if self.skipped:
            self.context.setdefault("skipped", self.skipped)


class ConfigValidationError(EdgecoreError, ValueError):
    """Simulator configuration outside its documented domain."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.context.setdefault("field", field)
