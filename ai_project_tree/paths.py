"""
Path helpers for Claude Code project directories.

Claude Code stores each project's sessions under ``~/.claude/projects/`` in a
directory named after the project's real path with every ``/`` replaced by
``-`` (``/Users/jack/my-app`` -> ``-Users-jack-my-app``). The encoding is
lossy: a ``-`` inside a real segment name cannot be told apart from an
encoded separator, so decoding is best effort only. Prefer the scanner's
already-decoded real path whenever it is available.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import re
from typing import Iterable, Optional

#: Marker that precedes the encoded project directory in a storage path.
STORAGE_MARKER = ".claude/projects/"

#: Character that stands in for "/" in encoded project directory names.
ENCODED_SEPARATOR = "-"

#: Staging directories where worktrees are conventionally created.
TMP_PREFIXES = ("/tmp/", "/private/tmp/")

_HOME_RES = (
    re.compile(r"^(/Users/[^/]+)"),  # macOS
    re.compile(r"^(/home/[^/]+)"),  # Linux
)


def encode_project_path(real_path: str) -> str:
    """Encode a real path the way Claude Code names its project directories.

    Example:
        encode_project_path("/Users/jack/my-app")  # "-Users-jack-my-app"
    """
    return real_path.replace("/", ENCODED_SEPARATOR)


def decode_project_path(storage_path: str) -> str:
    """Best-effort decode of a session storage path to the project's real path.

    Paths without the ``.claude/projects/`` marker, or whose encoded part does
    not start with ``-``, are returned unchanged.

    Examples:
        decode_project_path("/Users/jack/.claude/projects/-Users-jack-client-app")
        # "/Users/jack/client/app"
        decode_project_path("/Users/jack/.claude/projects/-Users-jack-my-app")
        # "/Users/jack/my/app"  (dashes in names are lost)
    """
    marker_pos = storage_path.find(STORAGE_MARKER)
    if marker_pos == -1:
        return storage_path

    encoded = storage_path[marker_pos + len(STORAGE_MARKER):]
    if encoded.startswith(ENCODED_SEPARATOR):
        return encoded.replace(ENCODED_SEPARATOR, "/")
    return storage_path


def extract_project_name(path: str) -> str:
    """Return the last non-empty segment of a (possibly encoded) project path.

    Examples:
        extract_project_name("/Users/jack/my-project")         # "my-project"
        extract_project_name("/tmp/vibe-kanban/my-project/")   # "my-project"
        extract_project_name("/Users/jack/app//")              # "app"
        extract_project_name("/")                              # ""
    """
    segments = [s for s in decode_project_path(path).split("/") if s]
    return segments[-1] if segments else ""


def is_in_tmp_directory(path: str) -> bool:
    """Check whether a (possibly encoded) path lives under a tmp staging prefix.

    This is a prefix test: "/Users/jack/tmp/app" is not in a tmp directory.
    """
    actual = decode_project_path(path)
    return actual.startswith(TMP_PREFIXES)


def worktree_label(path: str) -> str:
    """Display label for a worktree: the path with its tmp prefix removed.

    Example:
        worktree_label("/tmp/vibe-kanban/my-project")  # "vibe-kanban/my-project"
    """
    actual = decode_project_path(path)
    for prefix in TMP_PREFIXES:
        if actual.startswith(prefix):
            return actual[len(prefix):]
    return actual


def parent_directory(real_path: str) -> str:
    """All but the last segment of a path; "/" for root-level paths.

    Example:
        parent_directory("/Users/jack/client/my-project")  # "/Users/jack/client"
    """
    segments = [s for s in real_path.split("/") if s]
    if len(segments) <= 1:
        return "/"
    return "/" + "/".join(segments[:-1])


def detect_home_dir(paths: Iterable[str]) -> Optional[str]:
    """Infer a home directory from the first path that looks like one.

    Recognizes ``/Users/<user>`` (macOS) and ``/home/<user>`` (Linux).
    """
    for path in paths:
        for home_re in _HOME_RES:
            m = home_re.match(path)
            if m:
                return m.group(1)
    return None


def _under(path: str, directory: str) -> bool:
    return path == directory or path.startswith(directory.rstrip("/") + "/")


def to_display_path(path: str, home: Optional[str] = None) -> str:
    """Shorten a path for display by replacing the home directory with ``~``.

    Paths in tmp staging directories are returned unchanged. Only a whole
    leading home directory is replaced: with home "/home/jack",
    "/home/jackson/x" stays as it is.

    Examples:
        to_display_path("/Users/jack/client")          # "~/client"
        to_display_path("/tmp/worktree")               # "/tmp/worktree"
        to_display_path("/srv/x", home="/srv")         # "~/x"
    """
    if is_in_tmp_directory(path):
        return path
    if not path.startswith("/"):
        return path

    home_dir = home or detect_home_dir([path])
    if home_dir and _under(path, home_dir):
        rest = path[len(home_dir.rstrip("/")):]
        return "~" + rest
    return path


def format_path_with_tilde(path: str, all_paths: Optional[Iterable[str]] = None) -> str:
    """Format a path with ``~`` using a home directory detected from all_paths.

    Useful when path itself (e.g. "/Users") does not reveal the user but the
    sibling paths in the same listing do.
    """
    home_dir = detect_home_dir(all_paths if all_paths is not None else [path])
    return to_display_path(path, home_dir)
