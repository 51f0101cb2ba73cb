"""
astgen CLI - Main entry point.

Parses source files and directories with tree-sitter and writes one JSON
document per file to stdout (or appends to --output). Diagnostics go to
stderr. Exits 1 if any file failed, 2 on configuration errors.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import click

from .. import config
from ..core.errors import ConfigurationError
from ..core.settings import FileConfig, RunSettings
from ..output import OutputFormat, OutputSink, format_summary
from ..parsing.engine import ParseEngine
from ..parsing.pool import ParserPool
from .utils import configure_logging, echo_error, echo_info, print_supported_languages

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("files", nargs=-1, type=click.Path(path_type=Path))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format  [default: json]",
)
@click.option("--truncate", type=int, help="Truncate JSON output to N characters (preview only)")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed processing information")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress and warning messages")
@click.option("--parallel", "threads", type=int, metavar="THREADS", help="Number of worker threads")
@click.option("--dry-run", is_flag=True, help="Show files that would be parsed without parsing them")
@click.option(
    "--max-file-size",
    "max_file_size_mb",
    type=int,
    default=None,
    help=f"Maximum file size to process, in MB  [default: {config.MAX_FILE_SIZE_MB}]",
)
@click.option("--follow-links", is_flag=True, help="Follow symbolic links when traversing directories")
@click.option(
    "--max-depth",
    type=int,
    default=config.MAX_DIRECTORY_DEPTH,
    show_default=True,
    help="Maximum depth for directory traversal",
)
@click.option("--list-languages", is_flag=True, help="Display supported languages and exit")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help=f"Path to configuration file  [default: ./{config.CONFIG_FILE_NAME} or ~/{config.CONFIG_FILE_NAME}]",
)
@click.option("--include", multiple=True, metavar="PATTERN", help="Only process paths matching PATTERN (repeatable)")
@click.option("--exclude", multiple=True, metavar="PATTERN", help="Skip paths matching PATTERN (repeatable)")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Append output to FILE instead of stdout")
@click.option("--progress", is_flag=True, help="Always show a progress bar for directories")
@click.option("--strict", is_flag=True, help="Treat files with an unsupported extension as errors")
@click.option("--summary", is_flag=True, help="Print aggregate counts to stderr when done")
@click.version_option(package_name="astgen", prog_name="astgen")
def main(
    files: Tuple[Path, ...],
    output_format: Optional[str],
    truncate: Optional[int],
    verbose: bool,
    quiet: bool,
    threads: Optional[int],
    dry_run: bool,
    max_file_size_mb: Optional[int],
    follow_links: bool,
    max_depth: int,
    list_languages: bool,
    config_path: Optional[Path],
    include: Tuple[str, ...],
    exclude: Tuple[str, ...],
    output: Optional[Path],
    progress: bool,
    strict: bool,
    summary: bool,
):
    """
    Generate abstract syntax trees from source code using tree-sitter.

    Parses FILES (files or directories) and writes one JSON document per
    file.

    \b
    Supported languages:
      Rust, Java, C#, Go, Python, TypeScript, TSX, JavaScript, Ruby

    \b
    Examples:
      astgen src/main.rs
      astgen ./project --exclude tests --parallel 8 -o ast.jsonl
      astgen --list-languages
    """
    if list_languages:
        print_supported_languages()
        return

    configure_logging(verbose=verbose, quiet=quiet)

    try:
        file_config = FileConfig.load(config_path) if config_path else FileConfig.load_default()
        settings = RunSettings.resolve(
            file_config,
            files=list(files),
            output_format=OutputFormat(output_format) if output_format else None,
            truncate=truncate,
            verbose=verbose,
            quiet=quiet,
            threads=threads,
            dry_run=dry_run,
            max_file_size_mb=max_file_size_mb,
            follow_links=follow_links,
            max_depth=max_depth,
            include=list(include),
            exclude=list(exclude),
            output=output,
            progress=progress,
            strict=strict,
        )
        registry = settings.build_registry()
    except ConfigurationError as e:
        raise click.UsageError(e.message) from e

    if not settings.files:
        raise click.UsageError("No input files specified")

    start = time.perf_counter()
    with OutputSink(settings.output) as sink:
        engine = ParseEngine(
            registry,
            sink,
            walk_options=settings.walk_options(),
            process_options=settings.process_options(),
            pool=ParserPool(max_size=settings.parser_pool_size),
            threads=settings.threads,
            force_progress=settings.progress,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        result = engine.run(settings.files)
    duration = time.perf_counter() - start

    if verbose:
        logger.info(
            f"Processed {result.success_count} files with {result.error_count} errors "
            f"in {duration:.2f}s"
        )

    if summary:
        click.echo(format_summary(result, settings.output_format), err=True)

    if result.has_errors:
        if not quiet:
            echo_error(f"{result.error_count} file(s) failed to process")
            echo_info("Run with --verbose for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
