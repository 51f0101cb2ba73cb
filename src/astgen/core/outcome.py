"""
Per-file outcome types.

Every attempt to process a file yields exactly one tagged outcome: Success,
Skipped or Failed. Outcomes are folded into an AggregateResult, which is a
plain commutative count so completion order never matters.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from .errors import AstgenError


@dataclass(frozen=True)
class Success:
    """
    A file that was parsed and rendered.

    Attributes:
        path: The file path as given.
        language: Display name of the matched language.
        rendered: The line to emit (document JSON, or the dry-run notice).
        document: The wrapped document; None in dry-run mode.
        dry_run: The file was only classified; `rendered` is a notice, not a record.
    """

    path: str
    language: str
    rendered: str
    document: Dict[str, Any] | None = None
    dry_run: bool = False

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class Skipped:
    """A file that was intentionally not processed (no language match, filtered)."""

    path: str
    reason: str

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    """A file whose processing failed; carries the error for diagnostics."""

    path: str
    error: AstgenError

    @property
    def kind(self) -> str:
        return self.error.kind

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True


ParseOutcome = Union[Success, Skipped, Failed]


@dataclass(frozen=True)
class AggregateResult:
    """
    Success/error totals for a run.

    Instances are immutable; `add` and `merge` return new values, so the fold
    is associative and commutative.
    """

    success_count: int = 0
    error_count: int = 0
    skipped_count: int = 0

    @property
    def total(self) -> int:
        return self.success_count + self.error_count + self.skipped_count

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def add(self, outcome: ParseOutcome) -> "AggregateResult":
        if isinstance(outcome, Success):
            return AggregateResult(self.success_count + 1, self.error_count, self.skipped_count)
        if isinstance(outcome, Failed):
            return AggregateResult(self.success_count, self.error_count + 1, self.skipped_count)
        return AggregateResult(self.success_count, self.error_count, self.skipped_count + 1)

    def merge(self, other: "AggregateResult") -> "AggregateResult":
        return AggregateResult(
            self.success_count + other.success_count,
            self.error_count + other.error_count,
            self.skipped_count + other.skipped_count,
        )

    def __add__(self, other: "AggregateResult") -> "AggregateResult":
        return self.merge(other)
