# stitch/cli/commands/export.py
# Export command: render resume JSON to DOCX, or bundle several renders into a zip

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import List

import typer

from ...core.exceptions import ValidationError
from ...core.validation import MAX_BULK_IDS, validate_id_list
from ...stitch_io.console import console
from ...stitch_io.documents import bundle_exports, write_resume_docx
from ...stitch_io.generics import read_resume_json
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import styled_success_line


# * Export one resume to .docx, or up to MAX_BULK_IDS resumes into a .zip of .docx files
@app.command(help=f"Export resume JSON to .docx (or up to {MAX_BULK_IDS} into a .zip)")
@handle_stitch_error
def export(
    resumes: List[Path] = typer.Argument(
        ..., exists=True, dir_okay=False, help="Resume JSON file(s)"
    ),
    out: Path = typer.Option(
        ..., "--out", "-o", help="Output .docx (single resume) or .zip", resolve_path=True
    ),
) -> None:
    ok, err = validate_id_list([str(p) for p in resumes])
    if not ok:
        raise ValidationError([err or "invalid resume list"], recoverable=False)

    suffix = out.suffix.lower()
    if suffix == ".docx":
        if len(resumes) != 1:
            raise ValidationError(
                ["Exporting several resumes requires a .zip output"], recoverable=False
            )
        write_resume_docx(read_resume_json(resumes[0]), out)
        console.print(*styled_success_line("Exported", str(out)))
        return

    if suffix != ".zip":
        raise ValidationError(
            [f"Unsupported output type '{out.suffix}' (use .docx or .zip)"],
            recoverable=False,
        )

    with tempfile.TemporaryDirectory() as tmp:
        rendered: List[Path] = []
        for path in resumes:
            target = Path(tmp) / f"{path.stem}.docx"
            # same stem from different folders gets a numbered name
            counter = 1
            while target in rendered:
                target = Path(tmp) / f"{path.stem}-{counter}.docx"
                counter += 1
            write_resume_docx(read_resume_json(path), target)
            rendered.append(target)
        bundle_exports(rendered, out)

    console.print(*styled_success_line(f"Exported {len(rendered)} resume(s)", str(out)))
