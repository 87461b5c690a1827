from __future__ import annotations
from typing import Optional


class DatasetError(ValueError):
    """Base class for failures while turning an uploaded file into a Table."""

    def __init__(self, message: str, *, file_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.file_name = file_name


class ParseError(DatasetError):
    """The file has a supported extension but its contents could not be parsed."""

    def __init__(self, message: str, *, file_name: Optional[str] = None, source_format: Optional[str] = None) -> None:
        super().__init__(message, file_name=file_name)
        self.source_format = source_format


class UnsupportedFormatError(DatasetError):
    """The file extension is neither .csv nor .json."""
