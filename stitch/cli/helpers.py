# stitch/cli/helpers.py
# Shared CLI helpers for argument resolution, styled output lines & reporting

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from ..config.settings import StitchSettings
from ..resume.history import HistoryStore
from ..resume.scoring import KeywordScore
from ..stitch_io.console import console


# ---------------------------------------------------------------------------
# SETTINGS ACCESS PATTERNS
# ---------------------------------------------------------------------------
# Commands needing defaults:
#   settings = get_settings(ctx)
#   resume = resolve_path(resume, settings.resume_path)
#
# Config management commands only (mutations):
#   settings_manager.get("key")
#   settings_manager.set("key", value)
# ---------------------------------------------------------------------------


# * Raise BadParameter for any missing required argument
def validate_required_args(**kwargs: Any) -> None:
    for _, (value, description) in kwargs.items():
        if not value:
            raise typer.BadParameter(
                f"{description} is required (provide argument or set in config)"
            )


# explicit path wins; otherwise fall back to the configured default when it exists
def resolve_path(given: Optional[Path], default: Path) -> Optional[Path]:
    if given is not None:
        return given
    return default if default.exists() else None


# * History store rooted in the configured .stitch directory
def history_store(settings: StitchSettings) -> HistoryStore:
    return HistoryStore(settings.history_path)


# history key for a resume file (resolved path keeps keys stable across cwd)
def resume_key(path: Path) -> str:
    return str(Path(path).resolve())


# ---------------------------------------------------------------------------
# Styled output lines
# ---------------------------------------------------------------------------


def styled_success_line(label: str, value: str | None = None) -> list:
    """Pre-composed success line: checkmark + label [+ arrow + value].

    Returns list of renderables for console.print(*result).
    """
    parts: list[Any] = ["[green]✓[/]", f"[bold green]{label}[/]"]
    if value is not None:
        parts.extend(["[cyan]->[/]", value])
    return parts


def styled_setting_line(key: str, value: str) -> list:
    """Pre-composed setting display: bullet + key + arrow + value."""
    return ["[cyan]•[/]", f"[bold white]{key}[/]", "[cyan]->", value]


def format_setting_value(value: Any) -> str:
    if isinstance(value, str):
        return f'[cyan]"{value}"[/]'
    elif isinstance(value, bool):
        return f"[cyan]{str(value).lower()}[/]"
    elif isinstance(value, (int, float)):
        return f"[cyan]{value}[/]"
    else:
        return f"[cyan]{json.dumps(value)}[/]"


def styled_warning_line(message: str) -> str:
    return f"[yellow]![/] [yellow]{message}[/]"


# * Print a keyword score w/ matched & missing keywords
def print_score(label: str, score: KeywordScore, show_missing: int = 10) -> None:
    color = "green" if score.score >= 0.7 else "yellow" if score.score >= 0.4 else "red"
    console.print(f"[bold]{label}:[/] [{color}]{score.percent}%[/]")
    if score.missing:
        shown = ", ".join(score.missing[:show_missing])
        extra = len(score.missing) - show_missing
        suffix = f" [dim](+{extra} more)[/]" if extra > 0 else ""
        console.print(f"  [dim]missing:[/] {shown}{suffix}")
