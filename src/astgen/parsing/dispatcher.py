"""
Parallel dispatch.

Fans a file list out over a fixed-size thread pool. Each task is wrapped so
that whatever happens inside it comes back as a ParseOutcome; outcomes are
handled on the coordinating thread in completion order, written to the sink
and folded into an AggregateResult.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, Iterable, Union

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from ..config import MAX_THREADS, PROGRESS_THRESHOLD
from ..core.errors import ParseFailedError
from ..core.outcome import AggregateResult, Failed, ParseOutcome, Skipped, Success
from ..output import OutputSink

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ProcessFn = Callable[[PathLike], ParseOutcome]


def resolve_thread_count(threads: int | None = None) -> int:
    """Configured thread count, or the host core count, capped at MAX_THREADS."""
    if threads is None:
        threads = os.cpu_count() or 1
    return max(1, min(threads, MAX_THREADS))


def run_isolated(process_fn: ProcessFn, path: PathLike) -> ParseOutcome:
    """Run one task, converting any exception into a Failed outcome for that file."""
    try:
        return process_fn(path)
    except Exception as e:
        logger.debug(f"Task for {path} raised", exc_info=True)
        return Failed(str(path), ParseFailedError(str(path), f"{type(e).__name__}: {e}"))


class ParallelDispatcher:
    """
    Processes files concurrently and reports per-file results as they finish.

    Args:
        sink: Where successful records are written.
        notices: Where dry-run notices are written; stdout by default.
        threads: Worker count; defaults to the host core count.
        force_progress: Always show the progress bar.
        quiet: Never show the progress bar automatically; drop dry-run notices.
        verbose: Log every parsed and skipped file.
    """

    def __init__(
        self,
        sink: OutputSink,
        threads: int | None = None,
        force_progress: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        notices: OutputSink | None = None,
    ):
        self.sink = sink
        self.notices = notices or OutputSink()
        self.threads = resolve_thread_count(threads)
        self.force_progress = force_progress
        self.quiet = quiet
        self.verbose = verbose

    def should_show_progress(self, file_count: int) -> bool:
        return self.force_progress or (not self.quiet and file_count > PROGRESS_THRESHOLD)

    def handle(self, outcome: ParseOutcome) -> None:
        """Emit a single outcome: records to the sink, notices to stdout, failures to the log."""
        if isinstance(outcome, Success) and outcome.dry_run:
            if not self.quiet:
                self.notices.write(outcome.rendered)
        elif isinstance(outcome, Success):
            self.sink.write(outcome.rendered)
            if self.verbose:
                logger.info(f"Parsed file: {outcome.path}")
        elif isinstance(outcome, Failed):
            logger.error(f"Error parsing file {outcome.path}: {outcome.error}")
        elif isinstance(outcome, Skipped) and self.verbose:
            logger.warning(f"Skipped {outcome.path} ({outcome.reason})")

    def dispatch(self, files: Iterable[PathLike], process_fn: ProcessFn) -> AggregateResult:
        files = list(files)
        result = AggregateResult()
        if not files:
            return result

        logger.info(f"Processing {len(files)} file(s) with {self.threads} thread(s)")

        with self._progress(len(files)) as advance:
            with ThreadPoolExecutor(max_workers=self.threads) as executor:
                futures = {executor.submit(run_isolated, process_fn, f): f for f in files}
                for future in as_completed(futures):
                    outcome = future.result()
                    self.handle(outcome)
                    result = result.add(outcome)
                    advance(outcome.path)

        if self.verbose:
            logger.info(
                f"Successfully processed {result.success_count} files, "
                f"{result.error_count} errors"
            )
        return result

    @contextmanager
    def _progress(self, total: int) -> Generator[Callable[[str], None], None, None]:
        if not self.should_show_progress(total):
            yield lambda _path: None
            return

        progress = Progress(
            SpinnerColumn(),
            TimeElapsedColumn(),
            BarColumn(),
            MofNCompleteColumn(),
            TimeRemainingColumn(),
            TextColumn("{task.description}"),
            console=Console(stderr=True),
        )
        with progress:
            task = progress.add_task("Processing files", total=total)

            def advance(path: str) -> None:
                if self.verbose:
                    progress.update(task, advance=1, description=f"Processing {Path(path).name}")
                else:
                    progress.update(task, advance=1)

            yield advance
            progress.update(task, description="Complete")
