"""
Project organization engine - visibility filtering plus grouping.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import functools
import logging
from typing import List, Optional, Union

from .filters import MatchTarget, VisibilityFilter
from .grouping import (
    detect_worktree_groups_hybrid,
    group_projects_by_directory,
)
from .models import (
    DirectoryGroupingResult,
    GroupingMode,
    GroupingResult,
    HybridPolicy,
    ProjectRecord,
    ProjectStatistics,
    UserSettings,
)
from .types import Grouper

logger = logging.getLogger(__name__)


def _no_grouping(projects: List[ProjectRecord]) -> GroupingResult:
    return GroupingResult(groups=[], ungrouped=list(projects))


class ProjectOrganizer:
    """Organize a project snapshot for tree display.

    Stateless apart from the settings it was built with: each call is a full
    recomputation over the snapshot passed in.
    """

    def __init__(
        self,
        settings: Optional[UserSettings] = None,
        match_target: MatchTarget = MatchTarget.PATH,
    ):
        """Initialize organizer.

        Args:
            settings: User settings (hidden patterns, grouping mode, metadata).
                      Defaults to UserSettings() - nothing hidden, no grouping.
            match_target: Match hidden patterns against project path or name.
        """
        self.settings = settings or UserSettings()
        self.visibility = VisibilityFilter(self.settings, target=match_target)

    def visible_projects(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Projects that are not hidden, in input order."""
        return self.visibility.apply(projects)

    def hidden_projects(self, projects: List[ProjectRecord]) -> List[ProjectRecord]:
        """Projects hidden by an explicit flag or a pattern, in input order."""
        return self.visibility.hidden(projects)

    def grouper_for(
        self,
        mode: GroupingMode,
        policy: Optional[HybridPolicy] = None,
    ) -> Grouper:
        """Return the grouping function for a mode."""
        if mode is GroupingMode.WORKTREE:
            return functools.partial(
                detect_worktree_groups_hybrid,
                policy=policy if policy is not None else self.settings.hybrid_policy,
            )
        if mode is GroupingMode.DIRECTORY:
            return group_projects_by_directory
        return _no_grouping

    def group(
        self,
        projects: List[ProjectRecord],
        mode: Optional[GroupingMode] = None,
        policy: Optional[HybridPolicy] = None,
    ) -> Union[GroupingResult, DirectoryGroupingResult]:
        """Drop hidden projects, then group the rest.

        Args:
            projects: Snapshot from the scanner
            mode: Grouping mode; defaults to the settings' effective mode
            policy: Hybrid policy for worktree mode; defaults to the settings'

        Returns:
            GroupingResult for none/worktree, DirectoryGroupingResult for directory.
        """
        if mode is None:
            mode = self.settings.effective_mode
        visible = self.visible_projects(projects)
        logger.debug(
            "Grouping %d of %d projects (mode=%s)", len(visible), len(projects), mode.value
        )
        return self.grouper_for(mode, policy)(visible)

    def display_name(self, project: ProjectRecord) -> str:
        """User alias for a project, falling back to its name."""
        meta = self.settings.metadata_for(project)
        if meta and meta.alias:
            return meta.alias
        return project.name

    def statistics(self, projects: List[ProjectRecord]) -> ProjectStatistics:
        """Counts over a snapshot, including how many projects are hidden."""
        hidden = len(self.hidden_projects(projects))
        return ProjectStatistics(
            total_projects=len(projects),
            visible_projects=len(projects) - hidden,
            hidden_projects=hidden,
            total_sessions=sum(p.session_count for p in projects),
            total_messages=sum(p.message_count for p in projects),
        )
