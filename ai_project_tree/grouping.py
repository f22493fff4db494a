"""
Worktree and directory grouping of Claude Code projects.

Three worktree strategies and one directory strategy, all pure functions over
an immutable list of ProjectRecord:

- detect_worktree_groups_by_git: exact, from the scanner's git metadata
- detect_worktree_groups: tmp-directory heuristic for projects without it
- detect_worktree_groups_hybrid: both, combined by a HybridPolicy
- group_projects_by_directory: clusters by parent directory

Every worktree result is a partition of its input: each record appears once,
as a group parent, a group child, or in ``ungrouped``.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Set

from .models import (
    DirectoryGroup,
    DirectoryGroupingResult,
    GroupingResult,
    HybridPolicy,
    ProjectRecord,
    WorktreeGroup,
    WorktreeType,
)
from .paths import extract_project_name, is_in_tmp_directory, parent_directory, to_display_path

logger = logging.getLogger(__name__)


# ── Git metadata ─────────────────────────────────────────────────────────────

def detect_worktree_groups_by_git(projects: List[ProjectRecord]) -> GroupingResult:
    """Group linked worktrees under their main repository using git metadata.

    Main repositories are indexed by real path. A linked worktree whose
    ``main_project_path`` is in the index becomes a child of that main repo;
    children keep input order. Linked worktrees whose main repo is absent,
    and projects without usable git metadata, stay ungrouped in input order.

    Returns:
        GroupingResult with groups in order of their first child.
    """
    mains: Dict[str, int] = {}
    for i, project in enumerate(projects):
        if project.worktree_type is WorktreeType.MAIN:
            mains[project.real_path] = i

    groups: Dict[int, WorktreeGroup] = {}
    placed: Set[int] = set()

    for i, project in enumerate(projects):
        if project.worktree_type is not WorktreeType.LINKED:
            continue
        main_path = project.git_info.main_project_path
        parent_idx = mains.get(main_path) if main_path else None
        if parent_idx is None:
            logger.debug("Orphan worktree %s (main repo %s not found)", project.real_path, main_path)
            continue
        if parent_idx not in groups:
            groups[parent_idx] = WorktreeGroup(parent=projects[parent_idx])
        groups[parent_idx].children.append(project)
        placed.add(i)

    placed.update(groups)
    ungrouped = [p for i, p in enumerate(projects) if i not in placed]
    return GroupingResult(groups=list(groups.values()), ungrouped=ungrouped)


# ── Tmp-directory heuristic ──────────────────────────────────────────────────

def is_worktree_of(parent_path: str, child_path: str) -> bool:
    """Check whether child_path looks like a worktree of parent_path.

    True when the child is in a tmp directory, the parent is not, and both
    share the same non-empty final segment.

    Examples:
        is_worktree_of("/Users/jack/my-project", "/tmp/vibe-kanban/my-project")  # True
        is_worktree_of("/tmp/a/my-project", "/tmp/b/my-project")                 # False
    """
    if is_in_tmp_directory(parent_path) or not is_in_tmp_directory(child_path):
        return False
    parent_name = extract_project_name(parent_path)
    return parent_name != "" and parent_name == extract_project_name(child_path)


def detect_worktree_groups(projects: List[ProjectRecord]) -> GroupingResult:
    """Group tmp-directory projects under the regular project with the same name.

    Names are not unique (``~/work/app`` and ``~/personal/app``), so each name
    maps to an ordered candidate list and a worktree attaches to the first
    candidate in input order. This can pick the wrong parent when unrelated
    projects share a name; git metadata is the exact alternative.

    Returns:
        GroupingResult: groups in order of their first child; ungrouped holds
        regular projects without children, then unmatched tmp projects.
    """
    regular: List[int] = []
    ephemeral: List[int] = []
    for i, project in enumerate(projects):
        if is_in_tmp_directory(project.real_path):
            ephemeral.append(i)
        else:
            regular.append(i)

    candidates: Dict[str, List[int]] = defaultdict(list)
    for i in regular:
        name = extract_project_name(projects[i].real_path)
        if name:
            candidates[name].append(i)

    groups: Dict[int, WorktreeGroup] = {}
    placed_children: Set[int] = set()

    for i in ephemeral:
        matches = candidates.get(extract_project_name(projects[i].real_path))
        if not matches:
            continue
        parent_idx = matches[0]
        if parent_idx not in groups:
            groups[parent_idx] = WorktreeGroup(parent=projects[parent_idx])
        groups[parent_idx].children.append(projects[i])
        placed_children.add(i)

    ungrouped = [projects[i] for i in regular if i not in groups]
    ungrouped.extend(projects[i] for i in ephemeral if i not in placed_children)
    return GroupingResult(groups=list(groups.values()), ungrouped=ungrouped)


# ── Hybrid ───────────────────────────────────────────────────────────────────

def detect_worktree_groups_hybrid(
    projects: List[ProjectRecord],
    policy: HybridPolicy = HybridPolicy.MERGE,
) -> GroupingResult:
    """Combine git-based grouping with the tmp-directory heuristic.

    Args:
        projects: Snapshot of projects to group
        policy: MERGE runs git grouping over projects with usable git metadata
                and the heuristic over everything git left ungrouped plus the
                projects without metadata. GIT_ONLY never runs the heuristic;
                projects without metadata stay ungrouped.

    Returns:
        GroupingResult with git groups first, then heuristic groups.
    """
    if policy is HybridPolicy.GIT_ONLY:
        return detect_worktree_groups_by_git(projects)

    with_git = [p for p in projects if p.has_git_info]
    without_git = [p for p in projects if not p.has_git_info]

    git_result = detect_worktree_groups_by_git(with_git)
    heuristic_result = detect_worktree_groups(git_result.ungrouped + without_git)

    return GroupingResult(
        groups=git_result.groups + heuristic_result.groups,
        ungrouped=heuristic_result.ungrouped,
    )


# ── Directory ────────────────────────────────────────────────────────────────

def _name_key(project: ProjectRecord):
    return (project.name.casefold(), project.name)


def group_projects_by_directory(
    projects: List[ProjectRecord],
    home: Optional[str] = None,
) -> DirectoryGroupingResult:
    """Group projects by their parent directory.

    Example:
        /Users/jack/client/project1, /Users/jack/client/project2,
        /Users/jack/server/project3
        ->  client: [project1, project2], server: [project3]

    Args:
        projects: Snapshot of projects to group
        home: Home directory for display paths; detected per path when None

    Returns:
        DirectoryGroupingResult with groups sorted by path, members sorted by
        name. ``ungrouped`` is always empty.
    """
    by_dir: Dict[str, List[ProjectRecord]] = defaultdict(list)
    for project in projects:
        by_dir[parent_directory(project.real_path)].append(project)

    groups = []
    for dir_path, members in by_dir.items():
        segments = [s for s in dir_path.split("/") if s]
        groups.append(
            DirectoryGroup(
                name=segments[-1] if segments else "/",
                path=dir_path,
                display_path=to_display_path(dir_path, home),
                projects=sorted(members, key=_name_key),
            )
        )

    groups.sort(key=lambda g: g.path)
    return DirectoryGroupingResult(groups=groups, ungrouped=[])
