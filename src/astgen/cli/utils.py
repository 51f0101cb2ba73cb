"""
CLI Utilities - Shared helpers for the command line.

Logging setup, the supported-languages table and status echo helpers.
Everything here writes to stderr except the languages table, which is the
requested output of --list-languages.
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

import click
from rich.console import Console
from rich.table import Table

from ..languages import supported_languages

console = Console()

LOG_FORMAT = "[%(levelname)s] %(message)s"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Route log records to stderr.

    INFO when verbose, ERROR when quiet, WARNING otherwise.
    """
    if verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def grammar_pack_version() -> str:
    """Installed version of the grammar bundle, or 'unknown'."""
    try:
        return version("tree-sitter-language-pack")
    except PackageNotFoundError:
        return "unknown"


def print_supported_languages() -> None:
    """Print a table of built-in languages and their grammars."""
    pack_version = grammar_pack_version()

    table = Table(title="Supported Languages", title_justify="left")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions")
    table.add_column("Grammar")
    table.add_column("Grammar Pack Version", style="dim")

    for info in supported_languages():
        table.add_row(info.name, ", ".join(info.extensions), info.language_id, pack_version)

    console.print(table)


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross to stderr.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_info(message: str) -> None:
    """Print a dimmed informational message to stderr."""
    click.echo(click.style(f"   {message}", dim=True), err=True)
