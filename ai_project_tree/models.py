"""
Data models for project organization - using modern Python patterns.

Includes dataclasses, enums, and structured types for type safety.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .paths import decode_project_path, extract_project_name


def _as_int(value: Any, default: int = 0) -> int:
    """Coerce a scanner count to int, using default for missing or malformed values."""
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _as_bool(value: Any, default: bool = False) -> bool:
    """Accept only real JSON booleans; strings such as "false" fall back to default."""
    return value if isinstance(value, bool) else default


class WorktreeType(str, Enum):
    """Git worktree kind reported by the scanner."""

    MAIN = "main"
    LINKED = "linked"
    NOT_GIT = "not_git"

    @classmethod
    def parse(cls, value: Any) -> "WorktreeType":
        """Parse a scanner value, falling back to NOT_GIT for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.NOT_GIT


class GroupingMode(str, Enum):
    """Project tree grouping mode."""

    NONE = "none"
    WORKTREE = "worktree"
    DIRECTORY = "directory"

    @classmethod
    def parse(cls, value: Any) -> "GroupingMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.NONE


class HybridPolicy(str, Enum):
    """How git metadata and the tmp-directory heuristic are combined.

    MERGE runs git grouping first and the heuristic over whatever is left.
    GIT_ONLY trusts git metadata exclusively; records without it stay ungrouped.
    """

    MERGE = "merge"
    GIT_ONLY = "git_only"

    @classmethod
    def parse(cls, value: Any) -> "HybridPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().replace("-", "_"))
        except ValueError:
            return cls.MERGE


@dataclass(frozen=True)
class GitInfo:
    """Worktree metadata attached to a project by a git-aware scan.

    Attributes:
        worktree_type: main repository, linked worktree, or not a git checkout
        main_project_path: Real path of the main repository (linked worktrees only)
    """

    worktree_type: WorktreeType = WorktreeType.NOT_GIT
    main_project_path: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        """True when the metadata says something about worktree relationships."""
        return self.worktree_type is not WorktreeType.NOT_GIT

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["GitInfo"]:
        if not isinstance(data, dict):
            return None
        kind = WorktreeType.parse(data.get("worktree_type", data.get("kind")))
        main_path = data.get("main_project_path", data.get("main_project_real_path"))
        return cls(
            worktree_type=kind,
            main_project_path=main_path if kind is WorktreeType.LINKED else None,
        )

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {"worktree_type": self.worktree_type.value}
        if self.main_project_path is not None:
            d["main_project_path"] = self.main_project_path
        return d


@dataclass(frozen=True)
class ProjectRecord:
    """One project directory of conversation logs, as produced by the scanner.

    Identity is ``real_path``. Records are immutable snapshots: grouping never
    mutates them, it only places them into groups or the ungrouped list.

    Attributes:
        name: Display name (usually the last path segment)
        storage_key: Encoded on-disk directory name (e.g. "-Users-jack-my-app")
                     or the full storage path containing ".claude/projects/"
        real_path: Decoded filesystem path of the project (e.g. "/Users/jack/my-app")
        session_count: Number of session log files
        message_count: Number of messages across sessions
        last_modified: ISO timestamp of the newest session
        git_info: Worktree metadata, absent for scans without git support
    """

    name: str
    storage_key: str
    real_path: str
    session_count: int = 0
    message_count: int = 0
    last_modified: str = ""
    git_info: Optional[GitInfo] = None

    @property
    def worktree_type(self) -> WorktreeType:
        """Worktree kind, NOT_GIT when no metadata is present."""
        if self.git_info is None:
            return WorktreeType.NOT_GIT
        return self.git_info.worktree_type

    @property
    def has_git_info(self) -> bool:
        """True when git metadata is present and not ``not_git``."""
        return self.git_info is not None and self.git_info.is_usable

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectRecord":
        """Build a record from scanner JSON.

        Accepts both the scanner's field names (``path``, ``actual_path``,
        ``session_count`` ...) and this library's own (``storage_key``,
        ``real_path``). An already-decoded real path is always preferred; the
        lossy storage-key decoder is only a fallback.
        """
        storage_key = str(data.get("storage_key") or data.get("path") or "")
        real_path = data.get("real_path") or data.get("actual_path")
        if not real_path:
            real_path = decode_project_path(storage_key)
        name = data.get("name") or extract_project_name(real_path)
        return cls(
            name=str(name),
            storage_key=storage_key,
            real_path=str(real_path),
            session_count=_as_int(data.get("session_count")),
            message_count=_as_int(data.get("message_count")),
            last_modified=str(data.get("last_modified") or ""),
            git_info=GitInfo.from_dict(data.get("git_info")),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "storage_key": self.storage_key,
            "real_path": self.real_path,
            "session_count": self.session_count,
            "message_count": self.message_count,
            "last_modified": self.last_modified,
            "git_info": self.git_info.to_dict() if self.git_info else None,
        }


@dataclass
class WorktreeGroup:
    """A parent project with the worktrees attached to it."""

    parent: ProjectRecord
    children: List[ProjectRecord] = field(default_factory=list)

    @property
    def session_count(self) -> int:
        """Sessions across the parent and all children."""
        return self.parent.session_count + sum(c.session_count for c in self.children)

    def to_dict(self) -> dict:
        return {
            "parent": self.parent.to_dict(),
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class GroupingResult:
    """Worktree grouping output: every input record is placed exactly once."""

    groups: List[WorktreeGroup] = field(default_factory=list)
    ungrouped: List[ProjectRecord] = field(default_factory=list)

    def all_projects(self) -> List[ProjectRecord]:
        """Flatten back to records: parents, children, then ungrouped."""
        out: List[ProjectRecord] = []
        for group in self.groups:
            out.append(group.parent)
            out.extend(group.children)
        out.extend(self.ungrouped)
        return out

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "ungrouped": [p.to_dict() for p in self.ungrouped],
        }


@dataclass
class DirectoryGroup:
    """Projects sharing one parent directory.

    Attributes:
        name: Last segment of the directory (e.g. "client"), "/" for root
        path: Full directory path (e.g. "/Users/jack/client")
        display_path: Shortened path for display (e.g. "~/client")
        projects: Member projects sorted by name
    """

    name: str
    path: str
    display_path: str
    projects: List[ProjectRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "display_path": self.display_path,
            "projects": [p.to_dict() for p in self.projects],
        }


@dataclass
class DirectoryGroupingResult:
    """Directory grouping output. ``ungrouped`` is always empty."""

    groups: List[DirectoryGroup] = field(default_factory=list)
    ungrouped: List[ProjectRecord] = field(default_factory=list)

    def all_projects(self) -> List[ProjectRecord]:
        out: List[ProjectRecord] = []
        for group in self.groups:
            out.extend(group.projects)
        out.extend(self.ungrouped)
        return out

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "ungrouped": [p.to_dict() for p in self.ungrouped],
        }


@dataclass
class ProjectMetadata:
    """User metadata for one project, keyed by storage key or real path."""

    hidden: bool = False
    alias: Optional[str] = None
    parent_project: Optional[str] = None

    def is_empty(self) -> bool:
        """True when no field carries information."""
        return not self.hidden and not self.alias and not self.parent_project

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectMetadata":
        return cls(
            hidden=_as_bool(data.get("hidden")),
            alias=data.get("alias") or None,
            parent_project=data.get("parent_project") or None,
        )

    def to_dict(self) -> dict:
        return {"hidden": self.hidden, "alias": self.alias, "parent_project": self.parent_project}


@dataclass
class UserSettings:
    """Global user settings that steer visibility and grouping.

    Attributes:
        hidden_patterns: Glob patterns for projects to hide (e.g. "folders-dg-*")
        worktree_grouping: Legacy toggle; True with mode NONE means WORKTREE
        grouping_mode: none, worktree, or directory
        hybrid_policy: How git metadata and heuristics combine in worktree mode
        projects: Per-project metadata keyed by storage key or real path
    """

    hidden_patterns: List[str] = field(default_factory=list)
    worktree_grouping: bool = False
    grouping_mode: GroupingMode = GroupingMode.NONE
    hybrid_policy: HybridPolicy = HybridPolicy.MERGE
    projects: Dict[str, ProjectMetadata] = field(default_factory=dict)

    @property
    def effective_mode(self) -> GroupingMode:
        """Grouping mode after applying the legacy ``worktree_grouping`` toggle."""
        if self.grouping_mode is GroupingMode.NONE and self.worktree_grouping:
            return GroupingMode.WORKTREE
        return self.grouping_mode

    def metadata_for(self, project: ProjectRecord) -> Optional[ProjectMetadata]:
        """Metadata for a project, looked up by storage key first, then real path."""
        return self.projects.get(project.storage_key) or self.projects.get(project.real_path)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserSettings":
        """Build settings from a config dict, ignoring unknown or malformed keys."""
        if not isinstance(data, dict):
            return cls()
        patterns = data.get("hidden_patterns") or []
        if not isinstance(patterns, list):
            patterns = []
        projects = data.get("projects") or {}
        if not isinstance(projects, dict):
            projects = {}
        return cls(
            hidden_patterns=[str(p) for p in patterns],
            worktree_grouping=_as_bool(data.get("worktree_grouping")),
            grouping_mode=GroupingMode.parse(data.get("grouping_mode", "none")),
            hybrid_policy=HybridPolicy.parse(data.get("hybrid_policy", "merge")),
            projects={
                str(k): ProjectMetadata.from_dict(v)
                for k, v in projects.items()
                if isinstance(v, dict)
            },
        )

    def to_dict(self) -> dict:
        return {
            "hidden_patterns": list(self.hidden_patterns),
            "worktree_grouping": self.worktree_grouping,
            "grouping_mode": self.grouping_mode.value,
            "hybrid_policy": self.hybrid_policy.value,
            "projects": {k: v.to_dict() for k, v in self.projects.items() if not v.is_empty()},
        }


@dataclass
class ProjectStatistics:
    """Counts over one snapshot of projects."""

    total_projects: int = 0
    visible_projects: int = 0
    hidden_projects: int = 0
    total_sessions: int = 0
    total_messages: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "total_projects": self.total_projects,
            "visible_projects": self.visible_projects,
            "hidden_projects": self.hidden_projects,
            "total_sessions": self.total_sessions,
            "total_messages": self.total_messages,
        }
