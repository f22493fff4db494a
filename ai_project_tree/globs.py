"""
Safe glob pattern matching with ReDoS protection.

Supports ``*`` (any run of characters, including none) and ``?`` (exactly one
character). Matching is anchored to the full string and case-sensitive.
Oversized patterns are rejected up front and match nothing.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import functools
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

#: Maximum pattern length accepted by the compiler.
MAX_PATTERN_LENGTH = 256

#: Maximum number of wildcards (``*`` plus ``?``) accepted by the compiler.
MAX_WILDCARDS = 10

# NUL-delimited so they cannot collide with literal pattern text.
_STAR_SENTINEL = "\x00STAR\x00"
_QUESTION_SENTINEL = "\x00QUESTION\x00"


class GlobMatcher:
    """Compiled glob pattern.

    A matcher built from a rejected pattern has ``regex`` set to None and
    never matches.
    """

    __slots__ = ("pattern", "regex")

    def __init__(self, pattern: str, regex: Optional[re.Pattern]):
        self.pattern = pattern
        self.regex = regex

    @property
    def is_valid(self) -> bool:
        """False when the pattern was rejected by the safety caps."""
        return self.regex is not None

    def match(self, text: str) -> bool:
        """Check whether the whole of text matches the pattern."""
        if self.regex is None:
            return False
        return self.regex.fullmatch(text) is not None

    def __call__(self, text: str) -> bool:
        """Support callable interface."""
        return self.match(text)

    def __repr__(self) -> str:
        state = "" if self.is_valid else ", rejected"
        return f"GlobMatcher({self.pattern!r}{state})"


def count_wildcards(pattern: str) -> int:
    """Number of ``*`` and ``?`` characters in pattern."""
    return pattern.count("*") + pattern.count("?")


def glob_to_regex(pattern: str) -> str:
    """Translate a glob pattern into an anchored regex source string.

    Wildcards are swapped for sentinels before escaping so the ``.`` emitted
    for ``*`` is never escaped, and ``?`` is never mistaken for the lazy
    quantifier of an earlier translation.

    Examples:
        glob_to_regex("*.ts")       -> "^.*\\.ts$"
        glob_to_regex("a?c")        -> "^a.c$"
    """
    tokenized = pattern.replace("*", _STAR_SENTINEL).replace("?", _QUESTION_SENTINEL)
    escaped = re.escape(tokenized)
    escaped = escaped.replace(re.escape(_STAR_SENTINEL), ".*")
    escaped = escaped.replace(re.escape(_QUESTION_SENTINEL), ".")
    return f"^{escaped}$"


@functools.lru_cache(maxsize=512)
def _compile(pattern: str) -> Optional[re.Pattern]:
    try:
        return re.compile(glob_to_regex(pattern))
    except re.error as exc:
        logger.warning("Glob pattern %r could not be compiled: %s", pattern, exc)
        return None


def compile_glob(pattern: str) -> GlobMatcher:
    """Compile a glob pattern into a matcher, never raising.

    Patterns longer than MAX_PATTERN_LENGTH or with more than MAX_WILDCARDS
    wildcards produce a matcher that matches nothing; a warning is logged on
    every such call. Only accepted patterns are cached.

    Args:
        pattern: Glob pattern (e.g. "folders-dg-*", "*.ts", "a?c")

    Returns:
        GlobMatcher for the pattern.
    """
    if len(pattern) > MAX_PATTERN_LENGTH:
        logger.warning(
            "Glob pattern exceeds maximum length (%d > %d), skipping",
            len(pattern), MAX_PATTERN_LENGTH,
        )
        return GlobMatcher(pattern, None)

    wildcards = count_wildcards(pattern)
    if wildcards > MAX_WILDCARDS:
        logger.warning(
            "Glob pattern has too many wildcards (%d > %d), skipping",
            wildcards, MAX_WILDCARDS,
        )
        return GlobMatcher(pattern, None)

    return GlobMatcher(pattern, _compile(pattern))


def match_glob_pattern(text: str, pattern: str) -> bool:
    """Match text against a glob pattern.

    Examples:
        match_glob_pattern("folders-dg-abc123", "folders-dg-*")  # True
        match_glob_pattern("test.ts", "*.ts")                    # True
        match_glob_pattern("ac", "a?c")                          # False
    """
    return compile_glob(pattern).match(text)
