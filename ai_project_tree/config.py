"""
Config file resolution and loading.

Config file location (priority order):

  1. explicit path (the CLI's --config flag)
  2. AI_PROJECT_TREE_CONFIG environment variable
  3. OS default via ``typer.get_app_dir("ai_project_tree")``:
       - macOS: ~/Library/Application Support/ai_project_tree/config.json
       - Linux: ~/.config/ai_project_tree/config.json

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from .models import UserSettings

logger = logging.getLogger(__name__)

APP_NAME = "ai_project_tree"
CONFIG_ENV_VAR = "AI_PROJECT_TREE_CONFIG"

#: Written by ``aipt config init``.
CONFIG_INIT_TEMPLATE = {
    "hidden_patterns": [
        "folders-dg-*",
    ],
    "grouping_mode": "worktree",
    "hybrid_policy": "merge",
    "worktree_grouping": False,
    "projects": {},
}


def get_config_file_path(override: Optional[str] = None) -> Path:
    """Return the config file path from the priority chain (file may not exist)."""
    if override:
        return Path(override).expanduser()
    env_val = os.getenv(CONFIG_ENV_VAR)
    if env_val:
        return Path(env_val).expanduser()
    return Path(typer.get_app_dir(APP_NAME)) / "config.json"


def load_config(path: Path) -> dict:
    """Load the config JSON. Returns an empty dict if missing or unreadable.

    Supported keys (all optional):

    - ``hidden_patterns`` (list of strings): glob patterns for projects to hide
    - ``grouping_mode`` (string): "none", "worktree" or "directory"
    - ``hybrid_policy`` (string): "merge" or "git_only"
    - ``worktree_grouping`` (bool): legacy toggle, same as grouping_mode "worktree"
    - ``projects`` (object): per-project ``{"hidden", "alias", "parent_project"}``
      keyed by storage key or real path
    """
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not load config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return {}
    return data


def load_settings(override: Optional[str] = None) -> UserSettings:
    """Resolve, load and parse the config into UserSettings."""
    return UserSettings.from_dict(load_config(get_config_file_path(override)))
