"""
Include/exclude pattern matching.

This is a deliberately small matcher, not full glob semantics: a pattern with
exactly one '*' matches paths that start with the text before the star and
end with the text after it; every other pattern matches by substring.
"""

from typing import Iterable


def glob_match(pattern: str, path: str) -> bool:
    """
    Match a single include/exclude pattern against a full path string.

    Examples:
        glob_match("*.rs", "src/main.rs")      -> True
        glob_match("src/*", "src/lib/a.py")    -> True
        glob_match("vendor", "a/vendor/b.go")  -> True
    """
    if pattern.count("*") == 1:
        prefix, suffix = pattern.split("*")
        return path.startswith(prefix) and path.endswith(suffix)
    return pattern in path


def matches_any(patterns: Iterable[str], path: str) -> bool:
    return any(glob_match(pattern, path) for pattern in patterns)


def should_process_file(path: str, include: Iterable[str], exclude: Iterable[str]) -> bool:
    """
    Apply exclude patterns first, then include patterns if any are configured.

    With no include patterns every non-excluded path passes.
    """
    if matches_any(exclude, path):
        return False
    include = list(include)
    if include:
        return matches_any(include, path)
    return True
