"""Parsing pipeline: parser pool, serializer, per-file processor, dispatcher, engine."""

from .dispatcher import ParallelDispatcher, resolve_thread_count
from .engine import ParseEngine, create_default_engine
from .pool import ParserPool
from .processor import FileProcessor, ProcessOptions
from .serializer import JsonNode, serialize

__all__ = [
    "FileProcessor",
    "JsonNode",
    "ParallelDispatcher",
    "ParseEngine",
    "ParserPool",
    "ProcessOptions",
    "create_default_engine",
    "resolve_thread_count",
    "serialize",
]
