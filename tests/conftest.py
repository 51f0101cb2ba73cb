"""
Shared test fixtures.

Most tests run against a tiny fake grammar instead of tree-sitter: the
"words" language turns each whitespace-separated token into a leaf under a
single root, which is enough to exercise every layer above the engine.
"""

import re
from dataclasses import dataclass, field
from typing import List

import pytest

from astgen.languages import LanguageRegistry
from astgen.parsing.pool import ParserPool


@dataclass
class FakeNode:
    type: str
    start_byte: int
    end_byte: int
    children: List["FakeNode"] = field(default_factory=list)


@dataclass
class FakeTree:
    root_node: FakeNode


class WordsParser:
    """Parses bytes into source_file -> word* (one leaf per token)."""

    def __init__(self):
        self.parse_calls = 0

    def parse(self, data: bytes):
        self.parse_calls += 1
        words = [
            FakeNode("word", m.start(), m.end()) for m in re.finditer(rb"\S+", data)
        ]
        return FakeTree(FakeNode("source_file", 0, len(data), words))


class NoTreeParser:
    def parse(self, data: bytes):
        return None


class ExplodingParser:
    def parse(self, data: bytes):
        raise RuntimeError("engine fault")


def make_factory(parser_cls=WordsParser):
    created = []

    def factory(language_id: str):
        parser = parser_cls()
        created.append((language_id, parser))
        return parser

    factory.created = created
    return factory


@pytest.fixture
def words_registry() -> LanguageRegistry:
    return LanguageRegistry().register("txt$", "words", "Words")


@pytest.fixture
def words_pool() -> ParserPool:
    return ParserPool(factory=make_factory())


def write(path, content: str = "", encoding: str = "utf-8"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)
    return path
