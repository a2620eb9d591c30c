# stitch/cli/app.py
# Root Typer application & command registration
#
# ! Command imports at bottom of file are deferred to avoid circular dependencies.

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# load environment variables once at startup
load_dotenv()

from ..config.settings import settings_manager
from ..stitch_io.console import console


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=False,
    context_settings={"help_option_names": ["--help", "-h"]},
    help="[cyan]Stitch[/]: chat-style resume edits w/ field paths, queued AI calls & re-scoring",
)


# * Load settings & initialize logging; show help when no subcommand is used
@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging for debugging"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Include debug-level queue & AI logs (implies --verbose)"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Write verbose logs to file (enables verbose mode)"
    ),
) -> None:
    # respect injected ctx.obj from tests/embedding; only load if absent
    if getattr(ctx, "obj", None) is None:
        ctx.obj = settings_manager.load()

    from ..core.verbose import cleanup_verbose, init_verbose

    # log_file & debug imply verbose mode
    verbose_enabled = verbose or debug or log_file is not None
    init_verbose(enabled=verbose_enabled, log_file=log_file, debug=debug)
    ctx.call_on_close(cleanup_verbose)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


# ! import command modules here to avoid circular import w/ app object
from .commands import path as _path  # noqa: F401,E402
from .commands import edit as _edit  # noqa: F401,E402
from .commands import apply as _apply  # noqa: F401,E402
from .commands import score as _score  # noqa: F401,E402
from .commands import history as _history  # noqa: F401,E402
from .commands import export as _export  # noqa: F401,E402
from .commands import config as _config  # noqa: F401,E402
