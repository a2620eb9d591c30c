# stitch/cli/commands/path.py
# Field path subcommands (get/set/validate/parse) over resume JSON

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.markup import escape

from ...resume.field_path import (
    MISSING,
    get_field_value,
    parse_field_path,
    set_field_value,
    validate_field_path,
)
from ...resume.schema import RESUME_SCHEMA, schema_from_sample
from ...stitch_io.console import console
from ...stitch_io.generics import read_resume_json, write_json_safe
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import styled_success_line
from ..params import OutResumeOpt

# * Sub-app for field path commands; registered on root app
path_app = typer.Typer(
    rich_markup_mode="rich", help="[cyan]Read, write & check resume field paths[/]"
)
app.add_typer(path_app, name="path")


# coerce string value to JSON value (numbers, bools, null, lists, objects) or keep raw string
def _coerce_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


# * Print the value at a field path as JSON
@path_app.command()
@handle_stitch_error
def get(
    resume: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resume JSON"),
    field_path: str = typer.Argument(..., help="e.g. experiences[0].title"),
) -> None:
    data = read_resume_json(resume)
    parse_field_path(field_path)
    value = get_field_value(data, field_path, MISSING)
    if value is MISSING:
        console.print(f"[yellow]No value at[/] {escape(field_path)}")
        raise SystemExit(1)
    console.print_json(json.dumps(value, ensure_ascii=False))


# * Set the value at a field path (JSON-coerced) & write the resume back
@path_app.command(name="set")
@handle_stitch_error
def set_cmd(
    resume: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resume JSON"),
    field_path: str = typer.Argument(..., help="e.g. contact.email"),
    value: str = typer.Argument(..., help="New value; parsed as JSON when possible"),
    out: Optional[Path] = OutResumeOpt(),
) -> None:
    data = read_resume_json(resume)
    updated = set_field_value(data, field_path, _coerce_value(value))
    target = out or resume
    write_json_safe(updated, target)
    console.print(*styled_success_line(f"Set {escape(field_path)}", str(target)))


# * Check a field path against the resume schema (or a sample resume's shape)
@path_app.command()
@handle_stitch_error
def validate(
    field_path: str = typer.Argument(..., help="Field path to check"),
    sample: Optional[Path] = typer.Option(
        None,
        "--sample",
        exists=True,
        dir_okay=False,
        help="Validate against this resume's shape instead of the built-in schema",
    ),
) -> None:
    schema = schema_from_sample(read_resume_json(sample)) if sample else RESUME_SCHEMA
    result = validate_field_path(field_path, schema)
    if result.valid:
        console.print(*styled_success_line("Valid", escape(field_path)))
        return
    console.print(f"[red]Invalid:[/] {escape(result.error or '')}")
    if result.suggestions:
        console.print(f"[dim]Did you mean:[/] {', '.join(result.suggestions)}")
    raise SystemExit(1)


# * Show the parsed segments of a field path
@path_app.command()
@handle_stitch_error
def parse(field_path: str = typer.Argument(..., help="Field path to parse")) -> None:
    for segment in parse_field_path(field_path):
        if segment.type == "property":
            console.print(f"[cyan]property[/] {escape(segment.key or '')}")
        else:
            console.print(f"[cyan]{segment.type}[/] {segment.index}")
