# stitch/stitch_io/console.py
# Shared Rich console; modules hold the proxy so the real Console can be swapped at runtime
#
# Tests call configure_console()/reset_console() or patch `stitch.stitch_io.console.console`.

from __future__ import annotations

from typing import Any

from rich.console import Console


class _ConsoleProxy:
    __slots__ = ("target",)

    def __init__(self, target: Console) -> None:
        self.target = target

    def __getattr__(self, name: str) -> Any:
        return getattr(self.target, name)


console = _ConsoleProxy(Console())


# * Replace the console behind the proxy; only the given options are passed to Rich
def configure_console(**options: Any) -> Console:
    console.target = Console(**{k: v for k, v in options.items() if v is not None})
    return console.target


def reset_console() -> Console:
    return configure_console()


__all__ = ["console", "configure_console", "reset_console"]
