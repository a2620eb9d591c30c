# stitch/cli/commands/config.py
# `stitch config` subcommands: list/get/set/reset/path over ~/.stitch/config.json

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

import typer

from ...config.settings import settings_manager, StitchSettings
from ...stitch_io.console import console
from ..app import app
from ..helpers import (
    format_setting_value,
    styled_setting_line,
    styled_success_line,
)
from ..params import ConfigKeyArg, ConfigValueArg

config_app = typer.Typer(rich_markup_mode="rich", help="[cyan]Manage Stitch settings[/]")
app.add_typer(config_app, name="config")

_DEFAULTS = asdict(StitchSettings())


def _require_key(key: str) -> str:
    if key not in _DEFAULTS:
        raise typer.BadParameter(f"Unknown setting: {key}")
    return key


# string settings keep the raw text ("123" stays a filename); others are read as JSON
def _parse_value(key: str, raw: str) -> Any:
    if isinstance(_DEFAULTS[key], str):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _print_current_settings() -> None:
    console.print()
    console.print("[bold cyan]Current Configuration[/]")
    console.print(f"[dim]Config file: {settings_manager.config_path}[/]")
    console.print()
    for key, value in settings_manager.list_settings().items():
        console.print(*styled_setting_line(key, format_setting_value(value)))
    console.print()
    console.print("[dim]Use [/][cyan]stitch config --help[/][dim] to see available commands[/]")


# * Bare `stitch config` lists current settings
@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        _print_current_settings()


# * Print one setting as JSON
@config_app.command()
def get(key: str = ConfigKeyArg()) -> None:
    console.print(f"[cyan]{json.dumps(settings_manager.get(_require_key(key)))}[/]")


# * Validate & persist one setting
@config_app.command(name="set")
def set_cmd(key: str = ConfigKeyArg(), value: str = ConfigValueArg()) -> None:
    parsed = _parse_value(_require_key(key), value)
    try:
        settings_manager.set(key, parsed)
    except (TypeError, ValueError) as e:
        raise typer.BadParameter(str(e))
    console.print(*styled_success_line(f"Set {key}", f"[cyan]{json.dumps(parsed)}[/]"))


@config_app.command()
def reset() -> None:
    """Reset all settings to defaults."""
    settings_manager.reset()
    console.print(*styled_success_line("Reset settings to defaults"))


@config_app.command()
def path() -> None:
    """Show the configuration file path."""
    console.print(f"[cyan]{settings_manager.config_path}[/]")


@config_app.command(name="list")
def list_cmd() -> None:
    """Show current settings."""
    _print_current_settings()
