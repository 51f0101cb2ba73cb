"""
Error taxonomy for astgen.

Per-file errors are never raised out of a batch: the file processor catches
them and folds them into a Failed outcome. Only ConfigurationError is fatal,
and it is raised before any file is touched.
"""


class AstgenError(Exception):
    """
    Base class for all astgen errors.

    Attributes:
        kind: Short machine-readable tag used in diagnostics.
        message: Human-readable error message.
    """

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FileTooLargeError(AstgenError):
    """
    Raised when a file exceeds the configured size limit.

    Attributes:
        path: The offending file.
        size: Actual size in bytes.
        limit: Configured limit in bytes.
    """

    kind = "file_too_large"

    def __init__(self, path: str, size: int, limit: int):
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {path} ({size} bytes, limit is {limit} bytes). "
            f"Use --max-file-size to raise the limit."
        )


class InvalidEncodingError(AstgenError):
    """Raised when a file is not valid UTF-8."""

    kind = "invalid_encoding"

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"File contains invalid UTF-8: {path}\n"
            f"Try converting the file to UTF-8 encoding first."
        )


class ParseFailedError(AstgenError):
    """Raised when the grammar engine produces no tree, or faults while parsing."""

    kind = "parse_failed"

    def __init__(self, path: str, message: str = "Failed to parse content"):
        self.path = path
        super().__init__(f"Parse error in {path}: {message}")


class UnsupportedLanguageError(AstgenError):
    """Raised in strict mode when no language binding matches a file."""

    kind = "unsupported_language"

    def __init__(self, path: str, extension: str):
        self.path = path
        self.extension = extension
        super().__init__(f"Language not supported for extension '{extension}': {path}")


class FileAccessError(AstgenError):
    """
    Raised when a file cannot be stat'd or read.

    Attributes:
        path: The file that could not be accessed.
        cause: The underlying OSError.
    """

    kind = "io_error"

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"IO error on {path}: {cause.strerror or cause}")


class ConfigurationError(AstgenError):
    """Raised for invalid settings or config files, before processing starts."""

    kind = "configuration"
