"""Exception hierarchy shared by the aggregation, rendering and API layers."""

from __future__ import annotations
from typing import Any, Optional


class ToplangsError(Exception):
    """Base class for every error raised by toplangs."""


class DataFormatError(ToplangsError):
    """A language record or API response is missing a field or has the wrong type."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidConfigError(ToplangsError):
    """Render settings cannot produce a well-formed image."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class EmptyInputError(ToplangsError):
    """Nothing to render: the ranked language list is empty."""


class ApiError(ToplangsError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
