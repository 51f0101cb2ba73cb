"""
Directory traversal.

Walks a root directory iteratively, pruning well-known noise directories,
honouring a depth limit, a symlink policy, per-directory ignore files and
include/exclude patterns. Entries are visited in sorted name order so a
traversal of an unchanged tree always yields the same sequence.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import FrozenSet, Generator, List, Optional, Set, Tuple

import pathspec

from ..config import IGNORE_DIRECTORIES, IGNORE_FILE_NAME, MAX_DIRECTORY_DEPTH
from .patterns import should_process_file

logger = logging.getLogger(__name__)

# (directory the ignore file lives in, compiled spec)
IgnoreRule = Tuple[Path, pathspec.PathSpec]


@dataclass
class WalkOptions:
    """Traversal settings for DirectoryWalker."""

    follow_symlinks: bool = False
    max_depth: int = MAX_DIRECTORY_DEPTH
    include_patterns: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=list)
    ignore_file_name: Optional[str] = IGNORE_FILE_NAME
    ignore_dirs: FrozenSet[str] = IGNORE_DIRECTORIES

    def should_skip_dir(self, dir_name: str) -> bool:
        return dir_name in self.ignore_dirs

    def should_process_file(self, path: Path) -> bool:
        return should_process_file(str(path), self.include_patterns, self.exclude_patterns)


@dataclass
class CandidateFile:
    """A file found by the walker. Its size is stat'd on first access."""

    path: Path
    _size: Optional[int] = field(default=None, repr=False, compare=False)

    @property
    def size(self) -> int:
        if self._size is None:
            self._size = self.path.stat().st_size
        return self._size

    def __str__(self) -> str:
        return str(self.path)


def should_walk_dir(path: str, ignore_dirs: FrozenSet[str] = IGNORE_DIRECTORIES) -> bool:
    """
    Return False if any segment of the path is a default-ignored directory.

    Segments are compared exactly and case-sensitively, so "targets" and
    "TARGET" are walked while "a/target/b" is not.
    """
    return not any(part in ignore_dirs for part in PurePath(path).parts)


def _load_ignore_file(directory: Path, file_name: str) -> Optional[IgnoreRule]:
    ignore_path = directory / file_name
    if not ignore_path.is_file():
        return None
    try:
        lines = ignore_path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        logger.warning(f"Cannot read ignore file {ignore_path}: {e}")
        return None
    lines = [line for line in lines if line.strip() and not line.lstrip().startswith("#")]
    if not lines:
        return None
    logger.debug(f"Loaded {len(lines)} ignore rule(s) from {ignore_path}")
    return directory, pathspec.GitIgnoreSpec.from_lines(lines)


def _is_ignored(path: Path, is_dir: bool, rules: List[IgnoreRule]) -> bool:
    """
    Gitignore precedence: the deepest ignore file with a matching pattern
    decides, and within one file the last matching pattern wins, so a nested
    `!pattern` re-includes what a parent file excluded.
    """
    for base, spec in reversed(rules):
        relative = path.relative_to(base).as_posix()
        if is_dir:
            relative += "/"
        include = spec.check_file(relative).include
        if include is not None:
            return include
    return False


class DirectoryWalker:
    """
    Enumerates candidate files below a root directory.

    Usage:
        walker = DirectoryWalker(WalkOptions(max_depth=3))
        for candidate in walker.walk(Path("src")):
            ...
    """

    def __init__(self, options: WalkOptions | None = None):
        self.options = options or WalkOptions()

    def walk(self, root: Path) -> Generator[CandidateFile, None, None]:
        """
        Yield every candidate file under root, exactly once.

        The root itself is always entered, whatever its name. Depth counts
        from the root: its direct children are at depth 1.
        """
        root = Path(root)
        visited: Set[str] = {os.path.realpath(root)}

        root_rules: List[IgnoreRule] = []
        if self.options.ignore_file_name:
            rule = _load_ignore_file(root, self.options.ignore_file_name)
            if rule:
                root_rules.append(rule)

        # LIFO stack of (directory, depth of the directory, inherited ignore rules)
        stack: List[Tuple[Path, int, List[IgnoreRule]]] = [(root, 0, root_rules)]

        while stack:
            directory, depth, rules = stack.pop()
            child_depth = depth + 1
            if child_depth > self.options.max_depth:
                continue
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                logger.warning(f"Cannot read directory {directory}: {e}")
                continue

            subdirs: List[Tuple[Path, int, List[IgnoreRule]]] = []

            for entry in entries:
                path = directory / entry.name
                is_link = entry.is_symlink()

                try:
                    is_dir = entry.is_dir(follow_symlinks=self.options.follow_symlinks)
                    is_file = entry.is_file(follow_symlinks=self.options.follow_symlinks)
                except OSError:
                    continue

                if is_dir:
                    if self.options.should_skip_dir(entry.name):
                        logger.debug(f"Skipping ignored directory: {path}")
                        continue
                    if child_depth >= self.options.max_depth:
                        continue
                    if rules and _is_ignored(path, True, rules):
                        continue
                    if is_link or self.options.follow_symlinks:
                        real = os.path.realpath(path)
                        if real in visited:
                            logger.debug(f"Not re-entering already visited directory: {path}")
                            continue
                        visited.add(real)
                    child_rules = rules
                    if self.options.ignore_file_name:
                        rule = _load_ignore_file(path, self.options.ignore_file_name)
                        if rule:
                            child_rules = rules + [rule]
                    subdirs.append((path, child_depth, child_rules))
                    continue

                if not is_file:
                    # Sockets, fifos, and symlinks when not following links
                    continue
                if entry.name == self.options.ignore_file_name:
                    continue
                if rules and _is_ignored(path, False, rules):
                    continue
                if not self.options.should_process_file(path):
                    continue
                yield CandidateFile(path)

            # Reversed so the LIFO stack pops subdirectories in sorted order
            stack.extend(reversed(subdirs))


def walk(root: Path, options: WalkOptions | None = None) -> Generator[CandidateFile, None, None]:
    """Convenience wrapper around DirectoryWalker.walk."""
    return DirectoryWalker(options).walk(root)
