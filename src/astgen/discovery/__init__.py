"""File discovery: directory traversal and include/exclude filtering."""

from .patterns import glob_match, should_process_file
from .walker import CandidateFile, DirectoryWalker, WalkOptions, should_walk_dir, walk

__all__ = [
    "CandidateFile",
    "DirectoryWalker",
    "WalkOptions",
    "glob_match",
    "should_process_file",
    "should_walk_dir",
    "walk",
]
