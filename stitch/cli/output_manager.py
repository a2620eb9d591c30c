# stitch/cli/output_manager.py
# Rich console sink for verbose/debug records w/ an optional plain-text log file

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import IO, Optional

from rich.markup import escape
from rich.text import Text

from ..core.output import OutputLevel

_RULE = "=" * 60


class OutputManager:
    """Prints log records at or below `level` & mirrors them to `log_file`.

    Messages may carry Rich markup; detail lines are always escaped. The log
    file receives the markup-free text of each record, one detail line per
    indented row. A log file that cannot be opened is skipped silently so a
    bad `--log-file` never stops a command.
    """

    def __init__(self, level: OutputLevel = OutputLevel.NORMAL, log_file: Path | None = None) -> None:
        self.level = level
        self._started = time.monotonic()
        self._handle: IO[str] | None = None
        self.log_file_path: Path | None = None
        if log_file is not None:
            self._open_log(log_file)

    def _open_log(self, log_file: Path) -> None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._handle = open(log_file, "a", encoding="utf-8")
        except OSError:
            return
        self.log_file_path = log_file
        self._write_block(f"Session started: {datetime.now().isoformat()} (level={self.level.name})")

    def enabled(self, level: OutputLevel) -> bool:
        return self.level >= level

    def emit(
        self,
        level: OutputLevel,
        category: str,
        message: str,
        detail: Optional[str] = None,
    ) -> None:
        if not self.enabled(level):
            return
        from ..stitch_io.console import console

        elapsed = f"{time.monotonic() - self._started:.2f}s"
        detail_lines = detail.splitlines() if detail else []
        if level >= OutputLevel.DEBUG:
            console.print(f"[dim]\\[{category}] {escape(message)}[/]")
        else:
            console.print(f"[dim]{elapsed}[/] [bold cyan]\\[{category}][/] {message}")
        for line in detail_lines:
            console.print(f"  [dim]{escape(line)}[/]")

        plain = message if level >= OutputLevel.DEBUG else Text.from_markup(message).plain
        self._write(f"[{elapsed}] [{category}] {plain}")
        for line in detail_lines:
            self._write(f"  {line}")

    def close(self) -> None:
        if self._handle is None:
            return
        self._write_block(f"Session ended: {datetime.now().isoformat()}")
        try:
            self._handle.close()
        except OSError:
            pass
        self._handle = None

    def _write_block(self, line: str) -> None:
        self._write(_RULE)
        self._write(line)
        self._write(_RULE)

    def _write(self, line: str) -> None:
        if self._handle is None:
            return
        try:
            self._handle.write(line + "\n")
            self._handle.flush()
        except OSError:
            pass
