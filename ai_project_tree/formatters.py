"""
Output formatters for grouping results.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .models import DirectoryGroupingResult, GroupingResult, ProjectRecord
from .paths import format_path_with_tilde, worktree_label

Result = Union[GroupingResult, DirectoryGroupingResult]


def _count_suffix(project: ProjectRecord) -> str:
    return f"{project.session_count} sessions, {project.message_count} messages"


class ResultFormatter(ABC):
    """Base formatter protocol."""

    @abstractmethod
    def format(self, data: Any) -> str:
        """Format data for output."""
        pass

    @abstractmethod
    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        pass


class TreeFormatter(ResultFormatter):
    """Render grouping results as a Rich tree."""

    def __init__(self, title: str = "Projects", name_fn: Optional[Callable[[ProjectRecord], str]] = None):
        """Initialize with title and an optional display-name function (e.g. aliases)."""
        self.title = title
        self.name_fn = name_fn or (lambda p: p.name)

    def _project_label(self, project: ProjectRecord, all_paths: List[str]) -> str:
        return (
            f"[cyan]{escape(self.name_fn(project))}[/cyan] "
            f"[dim]{escape(format_path_with_tilde(project.real_path, all_paths))} "
            f"({_count_suffix(project)})[/dim]"
        )

    def _build(self, data: Result) -> Tree:
        all_paths = [p.real_path for p in data.all_projects()]
        tree = Tree(f"[bold]{escape(self.title)}[/bold]")
        if isinstance(data, DirectoryGroupingResult):
            for group in data.groups:
                branch = tree.add(
                    f"[blue]{escape(group.name)}[/blue] [dim]{escape(group.display_path)} "
                    f"({len(group.projects)})[/dim]"
                )
                for project in group.projects:
                    branch.add(self._project_label(project, all_paths))
        else:
            for group in data.groups:
                branch = tree.add(
                    self._project_label(group.parent, all_paths)
                    + f" [green]+{len(group.children)} worktrees[/green]"
                )
                for child in group.children:
                    branch.add(
                        f"[yellow]{escape(worktree_label(child.real_path))}[/yellow] "
                        f"[dim]({_count_suffix(child)})[/dim]"
                    )
        for project in data.ungrouped:
            tree.add(self._project_label(project, all_paths))
        return tree

    def _render(self, renderable) -> str:
        console = Console(highlight=False)
        with console.capture() as capture:
            console.print(renderable)
        return capture.get()

    def format(self, data: Result) -> str:
        """Format a grouping result as a tree."""
        return self._render(self._build(data))

    def format_many(self, items: List[ProjectRecord]) -> str:
        """Format a flat project list as a single-level tree."""
        return self.format(GroupingResult(groups=[], ungrouped=list(items)))


class JsonFormatter(ResultFormatter):
    """Format results as JSON."""

    def format(self, data: Any) -> str:
        """Format a result or a record."""
        return json.dumps(data.to_dict(), indent=2)

    def format_many(self, items: List[Any]) -> str:
        """Format multiple items as a JSON array."""
        return json.dumps([item.to_dict() for item in items], indent=2)


class PlainFormatter(ResultFormatter):
    """Simple indented plain-text formatter."""

    def format(self, data: Any) -> str:
        """Format single item."""
        if isinstance(data, ProjectRecord):
            return f"{data.name} ({data.session_count} sessions) - {data.real_path}"
        if isinstance(data, DirectoryGroupingResult):
            lines = []
            for group in data.groups:
                lines.append(f"{group.display_path}/")
                lines.extend(f"  {self.format(p)}" for p in group.projects)
            lines.extend(self.format(p) for p in data.ungrouped)
            return "\n".join(lines)
        if isinstance(data, GroupingResult):
            lines = []
            for group in data.groups:
                lines.append(self.format(group.parent))
                lines.extend(f"  └ {self.format(c)}" for c in group.children)
            lines.extend(self.format(p) for p in data.ungrouped)
            return "\n".join(lines)
        return str(data)

    def format_many(self, items: List[Any]) -> str:
        """Format multiple items."""
        return "\n".join(self.format(item) for item in items)


def get_formatter(format_type: str, title: str = "Projects") -> ResultFormatter:
    """Factory function to get formatter by type."""
    formatters = {
        "tree": TreeFormatter,
        "json": JsonFormatter,
        "plain": PlainFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(f"Unknown format: {format_type}")

    try:
        return formatter_class(title)
    except TypeError:
        return formatter_class()
