"""
Language registry for astgen.

Maps file extension patterns to tree-sitter grammars. Bindings are kept in
registration order and the first match wins, so a broad pattern registered
early shadows a more specific one registered later.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Optional

from ..core.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageBinding:
    """
    A registered (pattern, grammar, display name) triple.

    Attributes:
        pattern: Compiled regex searched against the file extension only.
        language_id: tree-sitter-language-pack grammar name (e.g. "rust").
        name: Display name written into documents (e.g. "Rust").
    """

    pattern: re.Pattern
    language_id: str
    name: str

    def matches(self, path: str) -> bool:
        extension = file_extension(path)
        if extension is None:
            return False
        return self.pattern.search(extension) is not None


@dataclass(frozen=True)
class LanguageInfo:
    """Static metadata about a built-in language, used for listings."""

    name: str
    extensions: tuple
    language_id: str


def file_extension(path: str) -> Optional[str]:
    """
    Return the text after the final '.' of the last path component.

    A name without a dot, or a dotfile such as ".bashrc", has no extension.
    """
    suffix = PurePath(path).suffix
    if not suffix:
        return None
    return suffix[1:]


class LanguageRegistry:
    """Ordered collection of language bindings."""

    def __init__(self):
        self._bindings: List[LanguageBinding] = []

    def __len__(self) -> int:
        return len(self._bindings)

    @property
    def bindings(self) -> List[LanguageBinding]:
        return list(self._bindings)

    def register(
        self,
        pattern: str,
        language_id: str,
        name: str,
        case_insensitive: bool = False,
    ) -> "LanguageRegistry":
        """
        Append a binding. Returns self so registrations can be chained.

        Raises:
            re.error: If the pattern is not a valid regular expression.
        """
        flags = re.IGNORECASE if case_insensitive else 0
        self._bindings.append(LanguageBinding(re.compile(pattern, flags), language_id, name))
        logger.debug(f"Registered {name} ({language_id}) for /{pattern}/")
        return self

    def classify(self, path: str) -> Optional[LanguageBinding]:
        """Return the first binding matching the path's extension, or None."""
        for binding in self._bindings:
            if binding.matches(path):
                return binding
        return None

    def classify_or_error(self, path: str) -> LanguageBinding:
        binding = self.classify(path)
        if binding is None:
            raise UnsupportedLanguageError(str(path), file_extension(path) or "unknown")
        return binding

    def find_by_name(self, name: str) -> Optional[LanguageBinding]:
        """Look up the first binding with the given display name or grammar id."""
        lowered = name.lower()
        for binding in self._bindings:
            if binding.name.lower() == lowered or binding.language_id == lowered:
                return binding
        return None


_BUILTIN_LANGUAGES: List[tuple] = [
    # (pattern, grammar, display name, extensions)
    ("rs$", "rust", "Rust", (".rs",)),
    ("java$", "java", "Java", (".java",)),
    ("cs$", "csharp", "C#", (".cs",)),
    ("go$", "go", "Go", (".go",)),
    ("py$", "python", "Python", (".py",)),
    ("ts$", "typescript", "TypeScript", (".ts",)),
    ("tsx$", "tsx", "TSX", (".tsx",)),
    ("js$", "javascript", "JavaScript", (".js",)),
    ("rb$", "ruby", "Ruby", (".rb",)),
]


def supported_languages() -> List[LanguageInfo]:
    """Static metadata for all built-in languages."""
    return [LanguageInfo(name, exts, grammar) for _, grammar, name, exts in _BUILTIN_LANGUAGES]


def create_default_registry() -> LanguageRegistry:
    """Build a fresh registry with the built-in languages, in priority order."""
    registry = LanguageRegistry()
    for pattern, grammar, name, _ in _BUILTIN_LANGUAGES:
        registry.register(pattern, grammar, name)
    return registry


__all__ = [
    "LanguageBinding",
    "LanguageInfo",
    "LanguageRegistry",
    "create_default_registry",
    "file_extension",
    "supported_languages",
]
