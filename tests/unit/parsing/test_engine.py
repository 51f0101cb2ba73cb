"""
Unit tests for the parse engine.
"""

import io
import json
import logging

import pytest

from astgen.discovery import WalkOptions
from astgen.output import OutputSink
from astgen.parsing.engine import ParseEngine, create_default_engine
from astgen.parsing.processor import ProcessOptions
from conftest import write


@pytest.fixture
def buffer():
    return io.StringIO()


def make_engine(registry, pool, buffer, **kwargs):
    return ParseEngine(registry, OutputSink(stream=buffer), pool=pool, threads=2, quiet=True, **kwargs)


class TestParseEngine:
    def test_single_file(self, words_registry, words_pool, buffer, tmp_path):
        path = write(tmp_path / "a.txt", "hello")
        result = make_engine(words_registry, words_pool, buffer).run([path])
        assert result.success_count == 1
        assert json.loads(buffer.getvalue())["filename"] == str(path)

    def test_missing_path_is_counted(self, words_registry, words_pool, buffer, tmp_path):
        path = write(tmp_path / "a.txt", "hello")
        result = make_engine(words_registry, words_pool, buffer).run([tmp_path / "gone.txt", path])
        assert (result.success_count, result.error_count) == (1, 1)

    def test_directory(self, words_registry, words_pool, buffer, tmp_path):
        write(tmp_path / "a.txt", "a")
        write(tmp_path / "sub" / "b.txt", "b")
        write(tmp_path / "sub" / "c.md", "c")
        write(tmp_path / "node_modules" / "d.txt", "d")
        result = make_engine(words_registry, words_pool, buffer).run([tmp_path])
        assert (result.success_count, result.error_count, result.skipped_count) == (2, 0, 1)
        assert len(buffer.getvalue().splitlines()) == 2

    def test_empty_directory_warns(self, words_registry, words_pool, buffer, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        result = make_engine(words_registry, words_pool, buffer).run([tmp_path])
        assert result.total == 0
        assert "No matching files found" in caplog.text

    def test_explicit_file_respects_exclude(self, words_registry, words_pool, buffer, tmp_path):
        path = write(tmp_path / "gen" / "a.txt", "x")
        engine = make_engine(
            words_registry, words_pool, buffer, walk_options=WalkOptions(exclude_patterns=["gen"])
        )
        result = engine.run([path])
        assert result.skipped_count == 1
        assert buffer.getvalue() == ""

    def test_mixed_inputs_fold_together(self, words_registry, words_pool, buffer, tmp_path):
        write(tmp_path / "dir" / "a.txt", "a")
        write(tmp_path / "dir" / "b.txt", "b")
        single = write(tmp_path / "c.txt", "c")
        result = make_engine(words_registry, words_pool, buffer).run([tmp_path / "dir", single])
        assert result.success_count == 3

    def test_dry_run_notice_goes_to_stdout(self, words_registry, words_pool, buffer, tmp_path, capsys):
        path = write(tmp_path / "a.txt", "x")
        engine = ParseEngine(
            words_registry,
            OutputSink(stream=buffer),
            pool=words_pool,
            process_options=ProcessOptions(dry_run=True),
        )
        result = engine.run([path])
        assert result.success_count == 1
        assert buffer.getvalue() == ""
        assert capsys.readouterr().out == f"Would parse: {path} (Words)\n"

    def test_default_engine_has_builtin_languages(self, buffer):
        engine = create_default_engine(OutputSink(stream=buffer))
        assert engine.registry.classify("main.rs").name == "Rust"
