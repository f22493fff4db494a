"""
Type protocols for composable, extensible architecture.

Protocols allow dependency injection and multiple implementations.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from typing import Any, List, Protocol, Union, runtime_checkable

from .models import DirectoryGroupingResult, GroupingResult, ProjectRecord


@runtime_checkable
class Matcher(Protocol):
    """Protocol for compiled text matchers."""

    def match(self, text: str) -> bool:
        """Check if text matches."""
        ...


@runtime_checkable
class Grouper(Protocol):
    """Protocol for grouping strategies."""

    def __call__(self, projects: List[ProjectRecord]) -> Union[GroupingResult, DirectoryGroupingResult]:
        """Partition projects into groups and ungrouped projects."""
        ...


@runtime_checkable
class Formatter(Protocol):
    """Protocol for output formatting."""

    def format(self, data: Any) -> str:
        """Format data for output."""
        ...

    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        ...
