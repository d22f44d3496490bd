"""
Fatal error taxonomy for channel reporting.

Every error aborts the whole batch: nothing is skipped and no partial report
is written.
"""

from pathlib import Path
from typing import Optional, Union


class ChannelReportError(Exception):
    """Base class for read, parse and connector errors."""

    def __init__(self, message: str, path: Optional[Union[Path, str]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class ChannelReadError(ChannelReportError):
    """A channel file could not be read."""


class ChannelParseError(ChannelReportError):
    """Malformed XML or a document that is not a usable channel export."""


class MissingDataTypeError(ChannelParseError):
    """A connector has no DataType property."""


class UnknownDataTypeError(ChannelReportError):
    """A connector DataType with no registered descriptor."""

    def __init__(self, data_type: str, path: Optional[Union[Path, str]] = None):
        super().__init__(f"{data_type} not defined", path)
        self.data_type = data_type
