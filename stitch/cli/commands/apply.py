# stitch/cli/commands/apply.py
# Apply command for executing a JSON list of modification operations on a resume

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.markup import escape

from ...config.settings import get_settings
from ...core.exceptions import ValidationError
from ...resume.field_path import MISSING, get_field_value
from ...resume.modifications import (
    ModificationOperation,
    affected_path,
    apply_modification,
    validate_modification,
)
from ...stitch_io.console import console
from ...stitch_io.generics import read_json_safe, read_resume_json, write_json_safe
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import history_store, resume_key, styled_success_line
from ..params import OutResumeOpt


# accept either a bare list or {"operations": [...]}
def _load_operations(path: Path) -> List[ModificationOperation]:
    data: Any = read_json_safe(path)
    raw_ops = data.get("operations") if isinstance(data, dict) else data
    if not isinstance(raw_ops, list):
        raise ValidationError(
            [f"{path} must hold a list of operations or an object w/ 'operations'"],
            recoverable=False,
        )

    operations: List[ModificationOperation] = []
    problems: List[str] = []
    for i, raw in enumerate(raw_ops):
        op = ModificationOperation.from_dict(raw)
        problems.extend(f"Op {i}: {p}" for p in validate_modification(op))
        operations.append(op)
    if problems:
        raise ValidationError(problems, recoverable=False)
    return operations


# * Apply operations from JSON to a resume, recording each change in history
@app.command(help="Apply modification operations from JSON to a resume")
@handle_stitch_error
def apply(
    ctx: typer.Context,
    resume: Path = typer.Argument(..., exists=True, dir_okay=False, help="Resume JSON"),
    ops_json: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON list of operations"
    ),
    out: Optional[Path] = OutResumeOpt(),
) -> None:
    settings = get_settings(ctx)
    data = read_resume_json(resume)
    operations = _load_operations(ops_json)
    history = history_store(settings)
    key = resume_key(resume)

    current = data
    for op in operations:
        updated = apply_modification(current, op)
        path = affected_path(op)
        before = get_field_value(current, path, MISSING)
        after = get_field_value(updated, path, MISSING)
        if updated != current:
            history.record(
                resume=key,
                operation_type=op.operation.value,
                field_path=path,
                old_value=None if before is MISSING else before,
                new_value=None if after is MISSING else after,
                old_exists=before is not MISSING,
            )
        current = updated
        console.print(*styled_success_line(escape(op.describe())))

    target = out or resume
    write_json_safe(current, target)
    console.print(
        *styled_success_line(f"Applied {len(operations)} operation(s)", str(target))
    )
