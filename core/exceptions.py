"""
Custom exceptions for DataGrid Search.

The codec, dispatcher and derivation pipeline never raise; malformed input
is propagated as state. These exceptions are raised by the layers around the
core: configuration persistence and saved-view import/export.
"""

from typing import Optional, Any


class DataGridError(Exception):
    """Base exception for all DataGrid Search errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(DataGridError):
    """Raised when there are issues with configuration loading or validation."""

    def __init__(self, message: str, config_file: Optional[str] = None, field: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field
        super().__init__(message, context)


class ValidationError(DataGridError):
    """Raised when a saved grid view or grid state fails validation."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)
        super().__init__(message, context)
