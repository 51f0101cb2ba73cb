"""
Output rendering and emission.

Documents are rendered to one of three formats and written to a single
thread-safe sink. Every write is a complete record followed by a newline and
a flush, so a run interrupted at any point leaves only whole records behind.
Diagnostics never go through the sink.
"""

import json
import logging
import sys
import threading
from enum import StrEnum
from pathlib import Path
from typing import Any, Iterator, List, TextIO, Tuple

import yaml
from pydantic import BaseModel

from .core.outcome import AggregateResult

logger = logging.getLogger(__name__)


class OutputFormat(StrEnum):
    JSON = "json"
    PRETTY_JSON = "pretty-json"
    YAML = "yaml"


def iter_json(value: Any, indent: int | None = None) -> Iterator[str]:
    """
    Encode a JSON-compatible value chunk by chunk without recursion.

    Containers are expanded on an explicit stack; only scalars and keys go
    through json.dumps. With `indent` set the layout matches
    `json.dumps(value, indent=indent)`.
    """
    key_sep = ":" if indent is None else ": "

    def newline(level: int) -> str:
        return "" if indent is None else "\n" + " " * (indent * level)

    # (is_literal, payload, nesting level)
    stack: List[Tuple[bool, Any, int]] = [(False, value, 0)]
    while stack:
        literal, item, level = stack.pop()
        if literal:
            yield item
            continue

        if isinstance(item, dict):
            if not item:
                yield "{}"
                continue
            yield "{"
            parts: List[Tuple[bool, Any, int]] = []
            for i, (key, child) in enumerate(item.items()):
                prefix = ("," if i else "") + newline(level + 1)
                parts.append((True, prefix + json.dumps(str(key), ensure_ascii=False) + key_sep, 0))
                parts.append((False, child, level + 1))
            parts.append((True, newline(level) + "}", 0))
            stack.extend(reversed(parts))
        elif isinstance(item, (list, tuple)):
            if not item:
                yield "[]"
                continue
            yield "["
            parts = []
            for i, child in enumerate(item):
                parts.append((True, ("," if i else "") + newline(level + 1), 0))
                parts.append((False, child, level + 1))
            parts.append((True, newline(level) + "]", 0))
            stack.extend(reversed(parts))
        else:
            yield json.dumps(item, ensure_ascii=False)


def to_json(value: Any) -> str:
    """Compact JSON: no whitespace between tokens, non-ASCII kept as-is."""
    return "".join(iter_json(value))


def render(value: Any, fmt: OutputFormat = OutputFormat.JSON) -> str:
    """
    Render a JSON-compatible value in the requested format.

    Both JSON layouts handle any nesting depth. PyYAML's representer is
    recursive, so yaml output is limited by the interpreter's recursion
    limit; a document too deep for it fails for that file only.
    """
    if fmt == OutputFormat.PRETTY_JSON:
        return "".join(iter_json(value, indent=2))
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(
            value, sort_keys=False, allow_unicode=True, explicit_start=True
        ).rstrip("\n")
    return to_json(value)


def truncate_output(text: str, limit: int | None) -> str:
    """
    Cut a rendered document down to a preview of at most `limit` characters.

    The cut is pulled back to the last '}' inside the first `limit`
    characters when there is one. The result is a preview and is usually
    not valid JSON.
    """
    if limit is None or len(text) <= limit:
        return text
    cut = text[:limit]
    last_brace = cut.rfind("}")
    if last_brace != -1:
        cut = cut[: last_brace + 1]
    return cut


class OutputSink:
    """
    Serialized line writer over stdout or an append-mode file.

    Usage:
        with OutputSink(Path("out.jsonl")) as sink:
            sink.write(line)
    """

    def __init__(self, path: Path | None = None, stream: TextIO | None = None):
        self.path = path
        self._lock = threading.Lock()
        self._owned = False
        self._stream = stream
        self.records_written = 0

    def open(self) -> "OutputSink":
        if self._stream is None:
            if self.path is not None:
                self._stream = open(self.path, "a", encoding="utf-8")
                self._owned = True
            else:
                self._stream = sys.stdout
        return self

    def write(self, record: str) -> None:
        if self._stream is None:
            self.open()
        with self._lock:
            self._stream.write(record + "\n")
            self._stream.flush()
            self.records_written += 1

    def close(self) -> None:
        with self._lock:
            if self._owned and self._stream is not None:
                self._stream.close()
            self._stream = None
            self._owned = False

    def __enter__(self) -> "OutputSink":
        return self.open()

    def __exit__(self, *args) -> None:
        self.close()


class RunSummary(BaseModel):
    """Aggregate counts for a run, as reported at the end."""

    files_processed: int
    errors: int
    skipped: int
    total: int

    @classmethod
    def from_result(cls, result: AggregateResult) -> "RunSummary":
        return cls(
            files_processed=result.success_count,
            errors=result.error_count,
            skipped=result.skipped_count,
            total=result.total,
        )


def format_summary(result: AggregateResult, fmt: OutputFormat = OutputFormat.JSON) -> str:
    summary = RunSummary.from_result(result)
    return render({"summary": summary.model_dump()}, fmt)
