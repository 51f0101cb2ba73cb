"""
Single-file processing.

Takes one path through classify -> size check -> read -> parse -> serialize
-> wrap -> render. Every failure along the way is returned as a Failed
outcome; nothing raised here escapes into the batch.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from ..config import FORMAT_VERSION, MAX_FILE_SIZE_MB, max_file_size_bytes
from ..core.errors import (
    AstgenError,
    FileAccessError,
    FileTooLargeError,
    InvalidEncodingError,
    ParseFailedError,
    UnsupportedLanguageError,
)
from ..core.outcome import Failed, ParseOutcome, Skipped, Success
from ..languages import LanguageBinding, LanguageRegistry, file_extension
from ..output import OutputFormat, render, to_json, truncate_output
from .pool import ParserPool
from .serializer import JsonNode, serialize

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class ProcessOptions:
    """Per-file processing settings."""

    max_file_size_bytes: int = max_file_size_bytes(MAX_FILE_SIZE_MB)
    truncate: int | None = None
    dry_run: bool = False
    strict: bool = False
    output_format: OutputFormat = OutputFormat.JSON


def read_source(path: Path, limit: int) -> bytes:
    """
    Stat, size-check and read a file, returning its bytes once they are
    known to be valid UTF-8.

    Raises:
        FileTooLargeError: The file is over the limit; it is not read.
        InvalidEncodingError: The content is not valid UTF-8.
        FileAccessError: Any other stat/read failure.
    """
    path_str = str(path)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise FileAccessError(path_str, e) from e

    if size > limit:
        raise FileTooLargeError(path_str, size, limit)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileAccessError(path_str, e) from e

    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidEncodingError(path_str) from None
    return data


def wrap_document(filename: str, language: str, ast: JsonNode) -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "filename": filename,
        "language": language,
        "ast": ast.to_dict(),
    }


class FileProcessor:
    """
    Turns one file path into one ParseOutcome.

    Safe to share between worker threads: the registry is read-only and the
    parser pool is thread-safe.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        pool: ParserPool | None = None,
        options: ProcessOptions | None = None,
    ):
        self.registry = registry
        self.pool = pool or ParserPool()
        self.options = options or ProcessOptions()

    def __call__(self, path: PathLike) -> ParseOutcome:
        return self.process(path)

    def process(self, path: PathLike) -> ParseOutcome:
        path_str = str(path)
        binding = self.registry.classify(path_str)

        if binding is None:
            extension = file_extension(path_str)
            if self.options.strict and extension:
                return Failed(path_str, UnsupportedLanguageError(path_str, extension))
            logger.debug(f"Unsupported file type, skipping: {path_str}")
            return Skipped(path_str, "unsupported")

        if self.options.dry_run:
            return Success(
                path_str, binding.name, f"Would parse: {path_str} ({binding.name})", dry_run=True
            )

        try:
            document = self.parse_document(Path(path), binding)
            rendered = self.render(document)
        except AstgenError as e:
            return Failed(path_str, e)
        except Exception as e:
            # Grammar engine faults and anything else unexpected stay local to this file
            logger.debug(f"Unexpected failure on {path_str}", exc_info=True)
            return Failed(path_str, ParseFailedError(path_str, f"{type(e).__name__}: {e}"))

        return Success(path_str, binding.name, rendered, document)

    def parse_document(self, path: Path, binding: LanguageBinding) -> Dict[str, Any]:
        """Read, parse and wrap one file. Raises AstgenError subclasses."""
        path_str = str(path)
        data = read_source(path, self.options.max_file_size_bytes)

        with self.pool.parser(binding.language_id) as parser:
            tree = parser.parse(data)

        if tree is None:
            raise ParseFailedError(path_str)

        ast = serialize(data, tree.root_node)
        return wrap_document(path_str, binding.name, ast)

    def render(self, document: Dict[str, Any]) -> str:
        """
        Render a document for output.

        Truncation works on the compact JSON text; a truncated preview is
        emitted as-is, whatever the output format.
        """
        compact = to_json(document)
        limit = self.options.truncate
        if limit is not None and len(compact) > limit:
            return truncate_output(compact, limit)
        if self.options.output_format == OutputFormat.JSON:
            return compact
        return render(document, self.options.output_format)
