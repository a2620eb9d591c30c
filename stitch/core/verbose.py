# stitch/core/verbose.py
# Category-tagged logging helpers for queue activity, AI calls, edits & file I/O

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.markup import escape

from .output import OutputLevel, get_output_manager, set_output_manager


# * Register the Rich-backed manager for this CLI session
def init_verbose(
    enabled: bool = False,
    log_file: Path | None = None,
    debug: bool = False,
) -> None:
    # ! lazy import keeps core free of CLI imports at module load
    from ..cli.output_manager import OutputManager

    set_output_manager(OutputManager(OutputLevel.from_flags(enabled, debug), log_file=log_file))


# messages are plain text; only the helpers below add markup
def vlog(category: str, message: str, detail: str | None = None) -> None:
    get_output_manager().emit(OutputLevel.VERBOSE, category, escape(message), detail)


def vlog_debug(category: str, message: str) -> None:
    get_output_manager().emit(OutputLevel.DEBUG, category, message)


def vlog_queue(message: str, **context: Any) -> None:
    manager = get_output_manager()
    if not manager.enabled(OutputLevel.VERBOSE):
        return
    detail = ", ".join(f"{k}={v}" for k, v in context.items()) or None
    manager.emit(OutputLevel.VERBOSE, "QUEUE", escape(message), detail)


def vlog_ai_request(
    provider: str,
    model: str,
    prompt_length: int,
    temperature: float | None = None,
) -> None:
    detail = f"Model: {model}, Prompt: {prompt_length:,} chars"
    if temperature is not None:
        detail += f", temp={temperature}"
    vlog("AI", f"Request to {provider}", detail)


# * Response summary; failures are highlighted & carry the error text as detail
def vlog_ai_response(
    provider: str,
    model: str,
    response_length: int,
    success: bool,
    duration_ms: float | None = None,
    error: str | None = None,
) -> None:
    took = f" in {duration_ms:.0f}ms" if duration_ms else ""
    if success:
        vlog("AI", f"Response from {provider}{took}", f"Model: {model}, Response: {response_length:,} chars")
        return
    get_output_manager().emit(
        OutputLevel.VERBOSE,
        "AI",
        f"[red]Error from {escape(provider)}[/]{took}",
        f"Model: {model}, Error: {error}",
    )


def vlog_modification(operation: str, field_path: str, detail: str | None = None) -> None:
    vlog("EDIT", f"{operation} {field_path}", detail)


# * Recoverable problem that did not stop the current operation
def vlog_warning(category: str, message: str, detail: str | None = None) -> None:
    get_output_manager().emit(OutputLevel.VERBOSE, category, f"[yellow]{escape(message)}[/]", detail)


def _size_suffix(size: int | None) -> str:
    return f" ({size:,} bytes)" if size is not None else ""


def vlog_file_read(path: Path, size: int | None = None) -> None:
    vlog("FILE", f"Read: {path}{_size_suffix(size)}")


def vlog_file_write(path: Path, size: int | None = None) -> None:
    vlog("FILE", f"Write: {path}{_size_suffix(size)}")


def cleanup_verbose() -> None:
    get_output_manager().close()
