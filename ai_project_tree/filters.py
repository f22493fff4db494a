"""
Composable filter implementations for project visibility.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .globs import GlobMatcher, compile_glob
from .models import ProjectRecord, UserSettings


class MatchTarget(str, Enum):
    """Which string of a project the hidden patterns are matched against."""

    NAME = "name"
    PATH = "path"


def _target_text(project: Union[ProjectRecord, str], target: MatchTarget) -> str:
    if isinstance(project, str):
        return project
    if target is MatchTarget.NAME:
        return project.name
    return project.real_path


def is_project_hidden(
    project: Union[ProjectRecord, str],
    explicit_hidden: bool = False,
    patterns: Iterable[str] = (),
    target: MatchTarget = MatchTarget.PATH,
) -> bool:
    """Check whether a project should be hidden.

    Args:
        project: A ProjectRecord, or the already-selected text to match
        explicit_hidden: The user's per-project hidden flag; True short-circuits
        patterns: Hidden glob patterns, each compiled independently
        target: Match patterns against the record's name or its real path

    Returns:
        True if the flag is set or any pattern matches.
    """
    if explicit_hidden:
        return True
    text = _target_text(project, target)
    return any(compile_glob(p).match(text) for p in patterns)


class VisibilityFilter:
    """Drop hidden projects using settings-driven flags and glob patterns.

    Patterns are compiled once at construction; rejected patterns are kept
    as never-matching matchers so the set stays aligned with its source.
    """

    def __init__(
        self,
        settings: Optional[Union[UserSettings, Sequence[str]]] = None,
        target: MatchTarget = MatchTarget.PATH,
    ):
        """Initialize from UserSettings or a bare list of patterns."""
        if settings is None:
            settings = UserSettings()
        elif not isinstance(settings, UserSettings):
            settings = UserSettings(hidden_patterns=list(settings))
        self.settings = settings
        self.target = target
        self.matchers: List[GlobMatcher] = [compile_glob(p) for p in settings.hidden_patterns]

    def explicit_flag(self, project: ProjectRecord) -> bool:
        """The user's explicit hidden flag for project."""
        meta = self.settings.metadata_for(project)
        return bool(meta and meta.hidden)

    def matching_pattern(self, project: ProjectRecord) -> Optional[str]:
        """First pattern that hides project, or None."""
        text = _target_text(project, self.target)
        for matcher in self.matchers:
            if matcher.match(text):
                return matcher.pattern
        return None

    def is_hidden(self, project: ProjectRecord) -> bool:
        """Check if project is hidden by flag or pattern."""
        if self.explicit_flag(project):
            return True
        return self.matching_pattern(project) is not None

    def apply(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Keep visible projects, preserving input order."""
        return [p for p in projects if not self.is_hidden(p)]

    def hidden(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """The complement of apply()."""
        return [p for p in projects if self.is_hidden(p)]

    def __call__(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Support callable interface."""
        return self.apply(projects)


class ProjectFilter:
    """Composable project filter."""

    def __init__(self):
        """Initialize filter."""
        self._predicates: List[Callable[[ProjectRecord], bool]] = []

    def by_name_pattern(self, pattern: str) -> "ProjectFilter":
        """Keep projects whose name matches a glob pattern."""
        matcher = compile_glob(pattern)

        def predicate(p: ProjectRecord) -> bool:
            return matcher.match(p.name)

        self._predicates.append(predicate)
        return self

    def by_min_sessions(self, min_sessions: int) -> "ProjectFilter":
        """Keep projects with at least min_sessions sessions."""

        def predicate(p: ProjectRecord) -> bool:
            return p.session_count >= min_sessions

        self._predicates.append(predicate)
        return self

    def with_git_info(self) -> "ProjectFilter":
        """Keep projects that carry usable git metadata."""
        self._predicates.append(lambda p: p.has_git_info)
        return self

    def exclude_hidden(self, visibility: VisibilityFilter) -> "ProjectFilter":
        """Drop projects hidden by a VisibilityFilter."""
        self._predicates.append(lambda p: not visibility.is_hidden(p))
        return self

    def custom(self, predicate: Callable[[ProjectRecord], bool]) -> "ProjectFilter":
        """Add custom filter predicate."""
        self._predicates.append(predicate)
        return self

    def apply(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Apply all filters to project list."""
        result = projects
        for predicate in self._predicates:
            result = [p for p in result if predicate(p)]
        return result

    def __call__(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Support callable interface."""
        return self.apply(projects)
