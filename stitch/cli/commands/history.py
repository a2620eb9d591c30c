# stitch/cli/commands/history.py
# Modification history subcommands (list/revert) backed by .stitch/history.json

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ...config.settings import get_settings
from ...stitch_io.console import console
from ...stitch_io.generics import read_resume_json, write_json_safe
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import history_store, resume_key, styled_success_line
from ..params import JsonOutputOpt, OutResumeOpt

# * Sub-app for history commands; registered on root app
history_app = typer.Typer(
    rich_markup_mode="rich", help="[cyan]Browse & revert applied modifications[/]"
)
app.add_typer(history_app, name="history")


def _short(value: Any, width: int = 40) -> str:
    text = json.dumps(value, ensure_ascii=False) if not isinstance(value, str) else value
    return text if len(text) <= width else text[: width - 3] + "..."


# * List recorded modifications, newest first
@history_app.command(name="list")
@handle_stitch_error
def list_cmd(
    ctx: typer.Context,
    resume: Optional[Path] = typer.Option(
        None, "--resume", "-r", help="Only show changes to this resume"
    ),
    page: int = typer.Option(1, "--page", help="Page number (1-based)"),
    limit: int = typer.Option(20, "--limit", help="Records per page (max 100)"),
    since: Optional[str] = typer.Option(
        None, "--since", help="ISO date/datetime lower bound"
    ),
    until: Optional[str] = typer.Option(
        None, "--until", help="ISO date/datetime upper bound (a bare date covers the day)"
    ),
    as_json: bool = JsonOutputOpt(),
) -> None:
    settings = get_settings(ctx)
    key = resume_key(resume) if resume else None
    records, total = history_store(settings).list(
        resume=key, page=page, limit=limit, date_from=since, date_to=until
    )

    if as_json:
        payload = {
            "records": [r.to_dict() for r in records],
            "total": total,
            "page": page,
            "limit": limit,
        }
        console.print_json(json.dumps(payload, ensure_ascii=False))
        return

    if not records:
        console.print("[dim]No modifications recorded[/]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", no_wrap=True)
    table.add_column("When", no_wrap=True)
    table.add_column("Op")
    table.add_column("Field")
    table.add_column("Old")
    table.add_column("New")
    for rec in records:
        table.add_row(
            rec.id[:8],
            rec.created_at[:19].replace("T", " "),
            rec.operation_type,
            escape(rec.field_path),
            escape(_short(rec.old_value)) if rec.old_exists else "[dim]-[/]",
            escape(_short(rec.new_value)),
        )
    console.print(table)
    pages = max(1, -(-total // limit))
    console.print(f"[dim]Page {page}/{pages} ({total} total)[/]")


# * Restore the old value from a history record (full id or unique prefix)
@history_app.command()
@handle_stitch_error
def revert(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="History record id (or unique prefix)"),
    resume: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resume JSON"),
    out: Optional[Path] = OutResumeOpt(),
) -> None:
    settings = get_settings(ctx)
    store = history_store(settings)
    current = read_resume_json(resume)

    reverted, record = store.revert(store.resolve_id(record_id), current)

    target = out or resume
    write_json_safe(reverted, target)
    console.print(
        *styled_success_line(f"Reverted {escape(record.field_path)}", str(target))
    )
    console.print(f"[dim]Recorded as {record.id}[/]")
