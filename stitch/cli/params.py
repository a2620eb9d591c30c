# stitch/cli/params.py
# CLI argument & option definitions shared across commands

from __future__ import annotations

from typing import Any

import typer


def ResumeArg() -> Any:
    return typer.Argument(
        None,
        help="Path to resume JSON; defaults to config data_dir/resume_filename",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    )


def JobArg() -> Any:
    return typer.Argument(
        None,
        help="Path to job description text; defaults to config data_dir/job_filename",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    )


def JobOpt() -> Any:
    return typer.Option(
        None,
        "--job",
        "-j",
        help="Job description to re-score against after edits",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    )


def ModelOpt() -> Any:
    return typer.Option(
        None,
        "--model",
        help="OpenAI model used for AI fallback; defaults to config",
    )


def OutResumeOpt() -> Any:
    return typer.Option(
        None,
        "--out",
        "-o",
        help="Where to write the updated resume JSON; defaults to overwriting the input",
        resolve_path=True,
    )


def JsonOutputOpt() -> Any:
    return typer.Option(
        False,
        "--json",
        help="Print the machine-readable result as JSON",
    )


def ConfigKeyArg() -> Any:
    return typer.Argument(
        help="Configuration setting name",
    )


def ConfigValueArg() -> Any:
    return typer.Argument(
        help="New value to assign to the setting",
    )
