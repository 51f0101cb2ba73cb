"""
Unit tests for directory traversal.
"""

import logging
import os

import pytest

from astgen.discovery import CandidateFile, DirectoryWalker, WalkOptions, should_walk_dir, walk
from conftest import write


def relative(root, candidates):
    return [c.path.relative_to(root).as_posix() for c in candidates]


@pytest.fixture
def tree(tmp_path):
    write(tmp_path / "main.rs", "fn main() {}")
    write(tmp_path / "b.py", "x = 1")
    write(tmp_path / "src" / "lib.rs", "")
    write(tmp_path / "src" / "deep" / "mod.rs", "")
    write(tmp_path / "target" / "build.rs", "")
    write(tmp_path / "node_modules" / "pkg" / "index.js", "")
    write(tmp_path / ".git" / "config.rs", "")
    write(tmp_path / ".venv" / "site.py", "")
    write(tmp_path / "targets" / "keep.rs", "")
    write(tmp_path / "venv" / "keep.py", "")
    return tmp_path


class TestShouldWalkDir:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src", True),
            ("a/target/b", False),
            ("node_modules", False),
            ("project/.git/objects", False),
            ("targets", True),
            ("my_target", True),
            ("TARGET", True),
            ("venv", True),
            ("src/.venv", False),
        ],
    )
    def test_segments(self, path, expected):
        assert should_walk_dir(path) is expected

    def test_custom_ignore_set(self):
        assert not should_walk_dir("a/vendor/b", frozenset({"vendor"}))
        assert should_walk_dir("a/target/b", frozenset({"vendor"}))


class TestDirectoryWalker:
    def test_prunes_ignored_directories(self, tree):
        found = relative(tree, walk(tree))
        assert found == [
            "b.py",
            "main.rs",
            "src/lib.rs",
            "src/deep/mod.rs",
            "targets/keep.rs",
            "venv/keep.py",
        ]

    def test_order_is_stable(self, tree):
        assert relative(tree, walk(tree)) == relative(tree, walk(tree))

    def test_each_file_once(self, tree):
        found = relative(tree, walk(tree))
        assert len(found) == len(set(found))

    def test_root_named_like_ignored_dir_is_entered(self, tmp_path):
        root = tmp_path / "target"
        write(root / "a.rs", "")
        assert relative(root, walk(root)) == ["a.rs"]

    def test_depth_one_lists_only_direct_children(self, tree):
        found = relative(tree, walk(tree, WalkOptions(max_depth=1)))
        assert found == ["b.py", "main.rs"]

    def test_depth_two(self, tree):
        found = relative(tree, walk(tree, WalkOptions(max_depth=2)))
        assert "src/lib.rs" in found
        assert "src/deep/mod.rs" not in found

    def test_include_patterns(self, tree):
        found = relative(tree, walk(tree, WalkOptions(include_patterns=["*.py"])))
        assert found == ["b.py", "venv/keep.py"]

    def test_exclude_patterns(self, tree):
        found = relative(tree, walk(tree, WalkOptions(exclude_patterns=["deep"])))
        assert "src/deep/mod.rs" not in found
        assert "src/lib.rs" in found

    def test_extra_ignore_dirs(self, tree):
        options = WalkOptions(ignore_dirs=frozenset({"src"}))
        found = relative(tree, walk(tree, options))
        assert not any(path.startswith("src/") for path in found)
        # The replacement set no longer contains the built-in names
        assert "target/build.rs" in found

    def test_ignore_file(self, tree):
        write(tree / ".astgenignore", "# generated\n\n*.py\ndeep/\n")
        found = relative(tree, walk(tree))
        assert "b.py" not in found
        assert "venv/keep.py" not in found
        assert "src/deep/mod.rs" not in found
        assert "src/lib.rs" in found

    def test_nested_ignore_file_is_scoped(self, tree):
        write(tree / "src" / ".astgenignore", "lib.rs\n")
        write(tree / "other" / "lib.rs", "")
        found = relative(tree, walk(tree))
        assert "src/lib.rs" not in found
        assert "other/lib.rs" in found

    def test_nested_ignore_file_can_reinclude(self, tmp_path):
        write(tmp_path / ".astgenignore", "*.rs\n")
        write(tmp_path / "sub" / ".astgenignore", "!keep.rs\n")
        write(tmp_path / "top.rs", "")
        write(tmp_path / "sub" / "keep.rs", "")
        write(tmp_path / "sub" / "other.rs", "")
        assert relative(tmp_path, walk(tmp_path)) == ["sub/keep.rs"]

    def test_last_matching_pattern_wins_within_a_file(self, tmp_path):
        write(tmp_path / ".astgenignore", "*.rs\n!main.rs\n")
        write(tmp_path / "main.rs", "")
        write(tmp_path / "lib.rs", "")
        assert relative(tmp_path, walk(tmp_path)) == ["main.rs"]

    def test_ignore_file_disabled(self, tree):
        write(tree / ".astgenignore", "*.py\n")
        found = relative(tree, walk(tree, WalkOptions(ignore_file_name=None)))
        assert "b.py" in found

    def test_empty_directory(self, tmp_path):
        assert list(walk(tmp_path)) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinked_dir_not_followed_by_default(self, tmp_path):
        write(tmp_path / "real" / "a.rs", "")
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
        assert relative(tmp_path, walk(tmp_path)) == ["real/a.rs"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinked_file_not_followed_by_default(self, tmp_path):
        write(tmp_path / "a.rs", "")
        (tmp_path / "b.rs").symlink_to(tmp_path / "a.rs")
        assert relative(tmp_path, walk(tmp_path)) == ["a.rs"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_follow_symlinks_terminates_on_cycle(self, tmp_path):
        write(tmp_path / "a" / "x.rs", "")
        (tmp_path / "a" / "loop").symlink_to(tmp_path, target_is_directory=True)
        found = relative(tmp_path, walk(tmp_path, WalkOptions(follow_symlinks=True)))
        assert found == ["a/x.rs"]

    def test_unreadable_directory_is_skipped(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        walker = DirectoryWalker()
        missing = tmp_path / "gone"
        assert list(walker.walk(missing)) == []
        assert "Cannot read directory" in caplog.text


class TestCandidateFile:
    def test_size_is_lazy(self, tmp_path):
        path = write(tmp_path / "a.rs", "12345")
        candidate = CandidateFile(path)
        assert candidate._size is None
        assert candidate.size == 5
        assert str(candidate) == str(path)
