"""Core types shared by the discovery, parsing and CLI layers."""

from .errors import (
    AstgenError,
    ConfigurationError,
    FileAccessError,
    FileTooLargeError,
    InvalidEncodingError,
    ParseFailedError,
    UnsupportedLanguageError,
)
from .outcome import AggregateResult, Failed, ParseOutcome, Skipped, Success

__all__ = [
    "AstgenError",
    "ConfigurationError",
    "FileAccessError",
    "FileTooLargeError",
    "InvalidEncodingError",
    "ParseFailedError",
    "UnsupportedLanguageError",
    "AggregateResult",
    "Failed",
    "ParseOutcome",
    "Skipped",
    "Success",
]
