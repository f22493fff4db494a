"""
AI Project Tree - organize Claude Code projects into worktree and directory trees.

A small, pure library with a thin CLI layer: decodes project storage paths,
hides projects by ReDoS-safe glob patterns, and groups projects by git
worktree relationships or by parent directory.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0

Example usage as library:
    from ai_project_tree import ProjectOrganizer, ProjectRecord, UserSettings, GroupingMode

    projects = [ProjectRecord.from_dict(d) for d in scanner_output]
    organizer = ProjectOrganizer(UserSettings(hidden_patterns=["*/scratch-*"]))
    result = organizer.group(projects, mode=GroupingMode.WORKTREE)
"""

try:
    from importlib.metadata import version
    __version__ = version("ai_project_tree")
except Exception:
    __version__ = "1.0.0"

__author__ = "Andrew Hundt"

from .engine import ProjectOrganizer
from .filters import MatchTarget, ProjectFilter, VisibilityFilter, is_project_hidden
from .formatters import JsonFormatter, PlainFormatter, ResultFormatter, TreeFormatter, get_formatter
from .globs import MAX_PATTERN_LENGTH, MAX_WILDCARDS, GlobMatcher, compile_glob, match_glob_pattern
from .grouping import (
    detect_worktree_groups,
    detect_worktree_groups_by_git,
    detect_worktree_groups_hybrid,
    group_projects_by_directory,
    is_worktree_of,
)
from .models import (
    DirectoryGroup,
    DirectoryGroupingResult,
    GitInfo,
    GroupingMode,
    GroupingResult,
    HybridPolicy,
    ProjectMetadata,
    ProjectRecord,
    ProjectStatistics,
    UserSettings,
    WorktreeGroup,
    WorktreeType,
)
from .paths import (
    TMP_PREFIXES,
    decode_project_path,
    detect_home_dir,
    encode_project_path,
    extract_project_name,
    format_path_with_tilde,
    is_in_tmp_directory,
    parent_directory,
    to_display_path,
    worktree_label,
)
from .types import Formatter, Grouper, Matcher

__all__ = [
    "MAX_PATTERN_LENGTH",
    "MAX_WILDCARDS",
    "TMP_PREFIXES",
    "DirectoryGroup",
    "DirectoryGroupingResult",
    "Formatter",
    "GitInfo",
    "GlobMatcher",
    "Grouper",
    "GroupingMode",
    "GroupingResult",
    "HybridPolicy",
    "JsonFormatter",
    "MatchTarget",
    "Matcher",
    "PlainFormatter",
    "ProjectFilter",
    "ProjectMetadata",
    "ProjectOrganizer",
    "ProjectRecord",
    "ProjectStatistics",
    "ResultFormatter",
    "TreeFormatter",
    "UserSettings",
    "VisibilityFilter",
    "WorktreeGroup",
    "WorktreeType",
    "compile_glob",
    "decode_project_path",
    "detect_home_dir",
    "detect_worktree_groups",
    "detect_worktree_groups_by_git",
    "detect_worktree_groups_hybrid",
    "encode_project_path",
    "extract_project_name",
    "format_path_with_tilde",
    "get_formatter",
    "group_projects_by_directory",
    "is_in_tmp_directory",
    "is_project_hidden",
    "is_worktree_of",
    "match_glob_pattern",
    "parent_directory",
    "to_display_path",
    "worktree_label",
]
