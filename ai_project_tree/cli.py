"""
Thin CLI layer - orchestrates library components without business logic.

Reads a JSON snapshot of project records (as produced by a project scanner),
applies the user's hidden patterns and prints the grouped project tree.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable as _Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import CONFIG_ENV_VAR, CONFIG_INIT_TEMPLATE, get_config_file_path, load_config
from .engine import ProjectOrganizer
from .filters import MatchTarget
from .formatters import TreeFormatter, get_formatter
from .models import GroupingMode, HybridPolicy, ProjectRecord, UserSettings
from .paths import decode_project_path

app = typer.Typer(
    help=(
        "Organize Claude Code projects (~/.claude/projects/) into worktree and directory trees.\n\n"
        "Input is a JSON list of project records as produced by a project scanner: "
        "name, path (storage key), actual_path, session_count, message_count, "
        "last_modified and optional git_info.\n\n"
        "Override the config location with the environment variable:\n\n"
        f"  {CONFIG_ENV_VAR}  Path to the config JSON file"
    ),
)

config_app = typer.Typer(
    help=(
        "View and manage the ai_project_tree config file.\n\n"
        "Config file location (priority order):\n\n"
        "  1. --config CLI flag\n"
        f"  2. {CONFIG_ENV_VAR} env var\n"
        "  3. OS default: ~/Library/Application Support/ai_project_tree/config.json (macOS)\n"
        "               : ~/.config/ai_project_tree/config.json (Linux)"
    ),
)

app.add_typer(config_app, name="config", rich_help_panel="Configuration")

console = Console()
err_console = Console(stderr=True)


# ── CLI rendering infrastructure ──────────────────────────────────────────────

@dataclass
class ColumnSpec:
    """One column in a Rich table: header text + optional display hints."""

    header: str
    style: str = ""
    no_wrap: bool = False
    justify: str = "left"


@dataclass
class TableSpec:
    """Render spec for a list of dicts: table, JSON, or plain text."""

    title_template: str
    columns: List[ColumnSpec]
    row_fn: _Callable
    summary_template: Optional[str] = None


def _render_output(
    dicts: List[dict],
    fmt: str,
    spec: TableSpec,
    empty_msg: str = "No results found",
) -> None:
    """Render dicts in the requested format."""
    if fmt == "json":
        # Write directly to stdout: bypasses Rich markup rendering + ANSI codes
        sys.stdout.write(json.dumps(dicts, indent=2) + "\n")
        return
    if not dicts:
        console.print(f"[yellow]{empty_msg}[/yellow]")
        return
    if fmt == "plain":
        for d in dicts:
            typer.echo("  ".join(str(v) for v in spec.row_fn(d)))
        return
    from rich.table import Table
    table = Table(title=spec.title_template.format(n=len(dicts)))
    for col in spec.columns:
        table.add_column(col.header, style=col.style or None, no_wrap=col.no_wrap, justify=col.justify)
    for d in dicts:
        table.add_row(*[str(v) for v in spec.row_fn(d)])
    console.print(table)
    if spec.summary_template:
        console.print(f"\n[bold]{spec.summary_template.format(n=len(dicts))}[/bold]")


_HIDDEN_SPEC = TableSpec(
    title_template="Hidden Projects ({n} found)",
    columns=[
        ColumnSpec("Project", style="cyan", no_wrap=True),
        ColumnSpec("Path", style="blue"),
        ColumnSpec("Reason", style="yellow"),
    ],
    row_fn=lambda d: [d["name"], d["real_path"], d["reason"]],
    summary_template="Found {n} hidden projects",
)

_DECODE_SPEC = TableSpec(
    title_template="Decoded Paths ({n})",
    columns=[
        ColumnSpec("Storage Path", style="dim"),
        ColumnSpec("Real Path (best effort)", style="cyan"),
    ],
    row_fn=lambda d: [d["storage_path"], d["real_path"]],
)


# Module-level overrides set by global options
_g_config_path: Optional[str] = None
_config_cache: Optional[dict] = None  # lazily loaded, reset per process


def _get_config_file_path() -> Path:
    """Return the resolved config file path based on current priority chain."""
    return get_config_file_path(_g_config_path)


def get_config() -> dict:
    """Load app config once per process (see config.load_config for keys)."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config(_get_config_file_path())
    return _config_cache


def get_organizer(match_target: MatchTarget = MatchTarget.PATH) -> ProjectOrganizer:
    """Build a ProjectOrganizer from the active config."""
    return ProjectOrganizer(UserSettings.from_dict(get_config()), match_target=match_target)


def _load_projects(input_file: Optional[str]) -> List[ProjectRecord]:
    """Read project records from a JSON file, or stdin when input_file is None or "-".

    Accepts a bare list or an object with a "projects" list.
    """
    try:
        if input_file is None or input_file == "-":
            raw = sys.stdin.read()
        else:
            raw = Path(input_file).expanduser().read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, json.JSONDecodeError) as exc:
        err_console.print(f"[red]Error: could not read projects from {input_file or 'stdin'}: {exc}[/red]")
        raise typer.Exit(code=1)

    if isinstance(data, dict):
        data = data.get("projects", [])
    if not isinstance(data, list):
        err_console.print("[red]Error: expected a JSON list of projects[/red]")
        raise typer.Exit(code=1)
    return [ProjectRecord.from_dict(item) for item in data if isinstance(item, dict)]


# ── Root app callback (global options) ────────────────────────────────────────

@app.callback(invoke_without_command=True)
def app_callback(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None, "--config",
        help=(
            "Path to the ai_project_tree config JSON file. "
            "Default: OS config dir / ai_project_tree / config.json. "
            f"Also overridable via {CONFIG_ENV_VAR} env var."
        ),
        envvar=CONFIG_ENV_VAR,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr."),
) -> None:
    global _g_config_path, _config_cache
    if config != _g_config_path:
        _g_config_path = config
        _config_cache = None  # invalidate cache when path changes
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command()
def group(
    input_file: Optional[str] = typer.Option(
        None, "--input", "-i", help="Projects JSON file. Default: read stdin."
    ),
    mode: Optional[GroupingMode] = typer.Option(
        None, "--mode", "-m", help="Grouping mode. Default: grouping_mode from config."
    ),
    policy: Optional[HybridPolicy] = typer.Option(
        None, "--policy", "-p",
        help="Worktree policy: merge (git + tmp heuristic) or git_only. Default: from config.",
    ),
    fmt: str = typer.Option("tree", "--format", "-f", help="Output format: tree, json, plain."),
    by_name: bool = typer.Option(
        False, "--match-name", help="Match hidden patterns against project names instead of paths."
    ),
) -> None:
    """Group visible projects into worktree or directory trees.

    Examples:
        aipt group -i projects.json
        aipt group -i projects.json --mode directory
        scan-projects | aipt group --mode worktree --policy git_only -f json
    """
    projects = _load_projects(input_file)
    organizer = get_organizer(MatchTarget.NAME if by_name else MatchTarget.PATH)
    result = organizer.group(projects, mode=mode, policy=policy)

    try:
        formatter = get_formatter(fmt)
    except ValueError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(code=1)
    if isinstance(formatter, TreeFormatter):
        formatter.name_fn = organizer.display_name
        sys.stdout.write(formatter.format(result))
        return
    typer.echo(formatter.format(result))


@app.command()
def hidden(
    input_file: Optional[str] = typer.Option(
        None, "--input", "-i", help="Projects JSON file. Default: read stdin."
    ),
    fmt: str = typer.Option("table", "--format", "-f", help="Output format: table, json, plain."),
    by_name: bool = typer.Option(
        False, "--match-name", help="Match hidden patterns against project names instead of paths."
    ),
) -> None:
    """List projects hidden by an explicit flag or a hidden pattern.

    Examples:
        aipt hidden -i projects.json
        aipt hidden -i projects.json --match-name --format json
    """
    projects = _load_projects(input_file)
    organizer = get_organizer(MatchTarget.NAME if by_name else MatchTarget.PATH)
    visibility = organizer.visibility

    rows = []
    for project in organizer.hidden_projects(projects):
        if visibility.explicit_flag(project):
            reason = "hidden flag"
        else:
            reason = f"pattern {visibility.matching_pattern(project)}"
        rows.append({"name": project.name, "real_path": project.real_path, "reason": reason})
    _render_output(rows, fmt, _HIDDEN_SPEC, empty_msg="No hidden projects")


@app.command()
def decode(
    storage_paths: List[str] = typer.Argument(..., help="Session storage paths or encoded directory names."),
    fmt: str = typer.Option("plain", "--format", "-f", help="Output format: table, json, plain."),
) -> None:
    """Best-effort decode of storage paths to real project paths.

    Dashes inside real directory names cannot be recovered: "-Users-jack-my-app"
    decodes to "/Users/jack/my/app".

    Examples:
        aipt decode ~/.claude/projects/-Users-jack-client-app
    """
    rows = []
    for storage_path in storage_paths:
        # A bare encoded directory name has no marker; decode it relative to one.
        target = storage_path if "/" in storage_path else f".claude/projects/{storage_path}"
        rows.append({"storage_path": storage_path, "real_path": decode_project_path(target)})
    if fmt == "plain":
        for row in rows:
            typer.echo(row["real_path"])
        return
    _render_output(rows, fmt, _DECODE_SPEC)


@app.command()
def stats(
    input_file: Optional[str] = typer.Option(
        None, "--input", "-i", help="Projects JSON file. Default: read stdin."
    ),
) -> None:
    """Show counts of projects, hidden projects, sessions and messages."""
    projects = _load_projects(input_file)
    s = get_organizer().statistics(projects)
    console.print("[bold]Project Statistics[/bold]")
    console.print(f"  Projects:  {s.total_projects}")
    console.print(f"  Visible:   {s.visible_projects}")
    console.print(f"  Hidden:    {s.hidden_projects}")
    console.print(f"  Sessions:  {s.total_sessions}")
    console.print(f"  Messages:  {s.total_messages}")


# ── Config app ───────────────────────────────────────────────────────────────

@config_app.command("path")
def config_path() -> None:
    """Print the config file path (whether or not the file exists).

    Examples:
        aipt config path
        aipt --config /tmp/my.json config path   # show path after override
    """
    typer.echo(str(_get_config_file_path()))


@config_app.command("show")
def config_show(
    fmt: str = typer.Option("table", "--format", "-f", help="Output format: table, json, plain."),
) -> None:
    """Show the effective configuration (file contents + resolved path).

    Examples:
        aipt config show
        aipt config show --format json
    """
    config_file = _get_config_file_path()
    cfg = get_config()

    if fmt == "json":
        sys.stdout.write(json.dumps({
            "config_file": str(config_file),
            "exists": config_file.exists(),
            "config": cfg,
            "effective": UserSettings.from_dict(cfg).to_dict(),
        }, indent=2) + "\n")
        return

    console.print(f"Config file: [cyan]{config_file}[/cyan]")
    if not config_file.exists():
        console.print("[yellow]File does not exist. Run 'aipt config init' to create it.[/yellow]")
        return

    if not cfg:
        console.print("[dim]File exists but is empty (no keys set).[/dim]")
        return

    if fmt == "plain":
        for k, v in cfg.items():
            typer.echo(f"{k}: {v}")
        return

    from rich.table import Table
    table = Table(title=f"Config ({config_file.name})")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for k, v in cfg.items():
        table.add_row(k, json.dumps(v) if not isinstance(v, str) else v)
    console.print(table)


@config_app.command("init")
def config_init(
    force: bool = typer.Option(
        False, "--force",
        help="Overwrite the config file if it already exists.",
    ),
) -> None:
    """Create a starter config.json with documented default values.

    Will NOT overwrite an existing config file unless --force is given.

    Examples:
        aipt config init             # create if not exists
        aipt config init --force     # overwrite existing file
    """
    config_file = _get_config_file_path()

    if config_file.exists() and not force:
        err_console.print(
            f"[yellow]Config file already exists:[/yellow] {config_file}\n"
            "Use --force to overwrite."
        )
        raise typer.Exit(code=1)

    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(CONFIG_INIT_TEMPLATE, indent=2) + "\n", encoding="utf-8")

    # Invalidate cache so next command picks up the new file
    global _config_cache
    _config_cache = None

    console.print(f"[green]Created:[/green] {config_file}")
    console.print("[dim]Run 'aipt config show' to verify the active configuration.[/dim]")


# ── Entry point ───────────────────────────────────────────────────────────────

def cli_main():
    """CLI entry point."""
    app()
