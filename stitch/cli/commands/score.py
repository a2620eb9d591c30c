# stitch/cli/commands/score.py
# Score command: keyword match of a resume against a job description

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from ...config.settings import get_settings
from ...core.validation import validate_score
from ...resume.scoring import score_resume
from ...stitch_io.console import console
from ...stitch_io.generics import read_resume_json, read_text
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import print_score, resolve_path, validate_required_args
from ..params import JobArg, JsonOutputOpt, ResumeArg


# * Score a resume against a job description; optional threshold for CI use
@app.command(help="Score resume keyword coverage against a job description")
@handle_stitch_error
def score(
    ctx: typer.Context,
    resume: Optional[Path] = ResumeArg(),
    job: Optional[Path] = JobArg(),
    min_score: Optional[float] = typer.Option(
        None, "--min-score", help="Exit non-zero when the score is below this (0.0-1.0)"
    ),
    as_json: bool = JsonOutputOpt(),
) -> None:
    settings = get_settings(ctx)
    resume = resolve_path(resume, settings.resume_path)
    job = resolve_path(job, settings.job_path)
    validate_required_args(
        resume=(resume, "Resume path"), job=(job, "Job description path")
    )
    assert resume is not None and job is not None

    if min_score is not None:
        ok, err = validate_score(min_score)
        if not ok:
            raise typer.BadParameter(f"--min-score: {err}")

    result = score_resume(read_resume_json(resume), read_text(job))

    if as_json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        print_score("Keyword match", result, show_missing=20)
        if result.matched:
            console.print(f"  [dim]matched:[/] {', '.join(result.matched)}")

    if min_score is not None and result.score < min_score:
        console.print(
            f"[red]Score {result.percent}% is below minimum {round(min_score * 100)}%[/]"
        )
        raise SystemExit(1)
