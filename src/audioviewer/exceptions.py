"""Custom exceptions for the audio viewer."""

from pathlib import Path
from typing import Optional, Union


class AudioViewerError(Exception):
    """Base exception for audio viewer errors."""

    pass


class LoadError(AudioViewerError):
    """
    Raised when a Parquet file cannot be turned into a dataset.

    Covers missing files, unreadable Parquet data, and missing or mistyped
    required columns. Always fatal at startup.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class InvalidRequest(AudioViewerError):
    """Raised for malformed page requests (bad page size or page index)."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
