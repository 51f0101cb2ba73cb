"""
Parser instance pool.

Building a tree-sitter Parser and binding its grammar is cheap but not free;
the pool keeps a bounded stack of ready parsers per language so worker
threads can reuse them. Results never depend on whether a parser came from
the pool or was freshly built.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, List

from ..config import PARSER_POOL_SIZE

logger = logging.getLogger(__name__)

# Type alias for tree_sitter.Parser
Parser = Any
ParserFactory = Callable[[str], Parser]


def default_parser_factory(language_id: str) -> Parser:
    """Build a parser bound to a tree-sitter-language-pack grammar."""
    from tree_sitter_language_pack import get_parser

    return get_parser(language_id)


class _Slot:
    """Per-language stack of idle parsers with its own lock."""

    __slots__ = ("lock", "parsers")

    def __init__(self):
        self.lock = threading.Lock()
        self.parsers: List[Parser] = []


class ParserPool:
    """
    Per-language bounded cache of reusable parsers.

    Each language has its own lock; the pool-wide lock is held only while a
    language's slot is first created.
    """

    def __init__(self, factory: ParserFactory | None = None, max_size: int = PARSER_POOL_SIZE):
        self._factory = factory or default_parser_factory
        self.max_size = max_size
        self._slots: Dict[str, _Slot] = {}
        self._slots_lock = threading.Lock()

    def _slot(self, language_id: str) -> _Slot:
        slot = self._slots.get(language_id)
        if slot is None:
            with self._slots_lock:
                slot = self._slots.setdefault(language_id, _Slot())
        return slot

    def acquire(self, language_id: str) -> Parser:
        """Pop a cached parser for the language, or build a new one."""
        slot = self._slot(language_id)
        with slot.lock:
            if slot.parsers:
                return slot.parsers.pop()
        logger.debug(f"Creating parser for {language_id}")
        return self._factory(language_id)

    def release(self, language_id: str, parser: Parser) -> None:
        """Return a parser to the pool. Dropped if the language is at capacity."""
        slot = self._slot(language_id)
        with slot.lock:
            if len(slot.parsers) < self.max_size:
                slot.parsers.append(parser)

    @contextmanager
    def parser(self, language_id: str) -> Generator[Parser, None, None]:
        """
        Borrow a parser for the duration of a with-block.

        A parser whose use raised is not returned to the pool.
        """
        instance = self.acquire(language_id)
        try:
            yield instance
        except Exception:
            logger.debug(f"Discarding {language_id} parser after a failed parse")
            raise
        else:
            self.release(language_id, instance)

    def idle_count(self, language_id: str) -> int:
        slot = self._slots.get(language_id)
        if slot is None:
            return 0
        with slot.lock:
            return len(slot.parsers)
