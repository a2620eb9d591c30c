# stitch/cli/commands/edit.py
# Edit command: chat-style resume edits w/ rule parsing, queued AI fallback & re-scoring

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ...ai.clients.factory import get_client
from ...assistant.edit_session import EditSessionResult, run_edit_session
from ...config.settings import get_settings
from ...core.verbose import vlog
from ...queue.request_queue import AIRequestQueue, QueueConfig
from ...stitch_io.console import console
from ...stitch_io.generics import read_resume_json, read_text, write_json_safe
from ..app import app
from ..decorators import handle_stitch_error
from ..helpers import (
    history_store,
    print_score,
    resolve_path,
    resume_key,
    styled_success_line,
    styled_warning_line,
    validate_required_args,
)
from ..params import JobOpt, JsonOutputOpt, ModelOpt, OutResumeOpt, ResumeArg


def _print_result(result: EditSessionResult) -> None:
    for outcome in result.outcomes:
        console.print(f"[bold]>[/] {escape(outcome.message)}")
        for op in outcome.applied:
            line = styled_success_line(escape(op.describe()))
            if outcome.source == "ai":
                line.append("[dim](ai)[/]")
            console.print(*line)
        for warning in outcome.warnings:
            console.print(styled_warning_line(escape(warning)))
        if outcome.clarification and not outcome.changed:
            console.print(f"[cyan]?[/] {escape(outcome.clarification)}")

    if result.score_before is not None:
        print_score("Score before", result.score_before)
    if result.score_after is not None and result.score_after is not result.score_before:
        print_score("Score after", result.score_after)

    stats = result.queue_stats
    if stats is not None and (stats.completed_requests or stats.failed_requests):
        vlog(
            "QUEUE",
            f"{stats.completed_requests} AI request(s) completed",
            f"failed={stats.failed_requests}, avg_wait={stats.average_wait_time}ms",
        )


# * Apply natural-language edit messages to a resume
@app.command(help="Apply chat-style edit messages to a resume JSON")
@handle_stitch_error
def edit(
    ctx: typer.Context,
    resume: Optional[Path] = ResumeArg(),
    messages: List[str] = typer.Option(
        ..., "--message", "-m", help="Edit request; repeat for several edits"
    ),
    job: Optional[Path] = JobOpt(),
    out: Optional[Path] = OutResumeOpt(),
    no_ai: bool = typer.Option(
        False, "--no-ai", help="Rule-based parsing only; never call the model"
    ),
    model: Optional[str] = ModelOpt(),
    as_json: bool = JsonOutputOpt(),
) -> None:
    settings = get_settings(ctx)
    resume = resolve_path(resume, settings.resume_path)
    validate_required_args(resume=(resume, "Resume path"))
    assert resume is not None

    data = read_resume_json(resume)
    job_text = read_text(job) if job else None

    use_ai = settings.ai_fallback and not no_ai
    model = model or settings.model
    client = get_client(model) if use_ai else None

    queue = AIRequestQueue(QueueConfig.from_settings(settings))
    result = asyncio.run(
        run_edit_session(
            data,
            messages,
            queue=queue,
            client=client,
            model=model if use_ai else None,
            job_text=job_text,
            history=history_store(settings),
            resume_key=resume_key(resume),
        )
    )

    target = out or resume
    if result.applied_count:
        write_json_safe(result.resume, target)

    if as_json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    _print_result(result)
    if result.applied_count:
        console.print(
            *styled_success_line(f"Applied {result.applied_count} change(s)", str(target))
        )
    else:
        console.print("[dim]No changes applied[/]")
