"""
Global Configuration and Safety Defaults.

Centralizes the limits that protect the parse pipeline from huge files,
runaway traversal and oversized thread pools.
"""

from pathlib import Path
from typing import FrozenSet

# Tag written into every per-file document
FORMAT_VERSION = "astgen-0.1"

# --- Safety Limits ---
# Files larger than this are reported as too large and never read
MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_LIMIT_MB = 1000
BYTES_PER_MB = 1_000_000

# Maximum directory depth for the walker
MAX_DIRECTORY_DEPTH = 100

# Worker pool bounds
MAX_THREADS = 64

# Cached parser instances kept per language
PARSER_POOL_SIZE = 10

# Directory runs with more files than this show a progress bar unless quiet
PROGRESS_THRESHOLD = 10

# --- Blocklists ---

# Directories never descended into. Matched by exact path segment, case-sensitive.
IGNORE_DIRECTORIES: FrozenSet[str] = frozenset(
    {
        # Version Control
        ".git",
        # Build output & dependencies
        "target",
        "node_modules",
        # Environments
        ".venv",
    }
)

# Per-directory ignore list, gitignore syntax
IGNORE_FILE_NAME = ".astgenignore"

# Config file looked up in the working directory, then the home directory
CONFIG_FILE_NAME = ".astgenrc"


def max_file_size_bytes(megabytes: int) -> int:
    """Convert a size limit in MB to bytes."""
    return megabytes * BYTES_PER_MB


def default_config_locations() -> list[Path]:
    """Candidate config files, in lookup order."""
    return [Path.cwd() / CONFIG_FILE_NAME, Path.home() / CONFIG_FILE_NAME]
