"""Unit tests for the error taxonomy."""

import errno

import pytest

from astgen.core.errors import (
    AstgenError,
    ConfigurationError,
    FileAccessError,
    FileTooLargeError,
    InvalidEncodingError,
    ParseFailedError,
    UnsupportedLanguageError,
)


@pytest.mark.parametrize(
    "error, kind",
    [
        (FileTooLargeError("a.rs", 11, 10), "file_too_large"),
        (InvalidEncodingError("a.rs"), "invalid_encoding"),
        (ParseFailedError("a.rs"), "parse_failed"),
        (UnsupportedLanguageError("a.xyz", "xyz"), "unsupported_language"),
        (FileAccessError("a.rs", OSError(errno.EACCES, "Permission denied")), "io_error"),
        (ConfigurationError("bad"), "configuration"),
    ],
)
def test_kinds(error, kind):
    assert isinstance(error, AstgenError)
    assert error.kind == kind


def test_file_too_large_carries_diagnostics():
    err = FileTooLargeError("big.rs", 2_000_000, 1_000_000)
    assert err.path == "big.rs"
    assert err.size == 2_000_000
    assert err.limit == 1_000_000
    assert "2000000 bytes" in str(err)
    assert "--max-file-size" in str(err)


def test_file_access_error_uses_strerror():
    err = FileAccessError("gone.rs", OSError(errno.ENOENT, "No such file or directory"))
    assert str(err) == "IO error on gone.rs: No such file or directory"


def test_parse_failed_message():
    assert str(ParseFailedError("x.rs", "bad parse")) == "Parse error in x.rs: bad parse"
