"""
Parse Engine for astgen.

Central orchestrator: resolves each input path to either a single file or a
directory walk, runs the files through the dispatcher and folds everything
into one AggregateResult. The registry and parser pool are owned by the
engine instance; there is no module-level grammar state.
"""

import logging
import stat
from pathlib import Path
from typing import Iterable, Union

from ..core.errors import FileAccessError
from ..core.outcome import AggregateResult, Failed, Skipped
from ..discovery import DirectoryWalker, WalkOptions
from ..languages import LanguageRegistry, create_default_registry
from ..output import OutputSink
from .dispatcher import ParallelDispatcher
from .pool import ParserPool
from .processor import FileProcessor, ProcessOptions

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ParseEngine:
    """
    Runs the discovery and parse pipeline over a set of input paths.

    Usage:
        with OutputSink() as sink:
            engine = ParseEngine(create_default_registry(), sink)
            result = engine.run(["src", "main.rs"])
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        sink: OutputSink,
        walk_options: WalkOptions | None = None,
        process_options: ProcessOptions | None = None,
        pool: ParserPool | None = None,
        threads: int | None = None,
        force_progress: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ):
        self.registry = registry
        self.sink = sink
        self.walk_options = walk_options or WalkOptions()
        self.pool = pool or ParserPool()
        self.processor = FileProcessor(registry, self.pool, process_options)
        self.walker = DirectoryWalker(self.walk_options)
        self.dispatcher = ParallelDispatcher(
            sink,
            threads=threads,
            force_progress=force_progress,
            quiet=quiet,
            verbose=verbose,
        )
        self.verbose = verbose

    def run(self, paths: Iterable[PathLike]) -> AggregateResult:
        """Process every input path. Per-file problems are counted, never raised."""
        total = AggregateResult()
        for path in paths:
            path = Path(path)
            try:
                mode = path.stat().st_mode
            except OSError as e:
                error = FileAccessError(str(path), e)
                logger.error(f"Cannot access {path}: {e.strerror or e}")
                total = total.add(Failed(str(path), error))
                continue

            if stat.S_ISDIR(mode):
                if self.verbose:
                    logger.info(f"Processing directory: {path}")
                total = total + self.process_directory(path)
            else:
                total = total + self.process_file(path)
        return total

    def process_file(self, path: Path) -> AggregateResult:
        """Process one explicitly named file, applying include/exclude patterns."""
        if not self.walk_options.should_process_file(path):
            outcome = Skipped(str(path), "filtered")
        else:
            outcome = self.processor.process(path)
        self.dispatcher.handle(outcome)
        return AggregateResult().add(outcome)

    def process_directory(self, directory: Path) -> AggregateResult:
        files = [candidate.path for candidate in self.walker.walk(directory)]
        if not files:
            logger.warning(f"No matching files found in directory: {directory}")
            return AggregateResult()
        if self.verbose:
            logger.info(f"Found {len(files)} files to process")
        return self.dispatcher.dispatch(files, self.processor)


def create_default_engine(sink: OutputSink, **kwargs) -> ParseEngine:
    """Engine over the built-in languages."""
    return ParseEngine(create_default_registry(), sink, **kwargs)
