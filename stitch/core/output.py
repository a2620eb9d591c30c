# stitch/core/output.py
# Output levels & the process-wide log sink registry (no console or file I/O here)
#
# Core modules (queue, history, AI clients) log through get_output_manager() so they never
# import the CLI. The Rich-backed OutputManager in stitch/cli/output_manager.py is registered
# at startup; until then every record lands on a NullOutputManager.

from __future__ import annotations

from contextlib import contextmanager
from enum import IntEnum
from typing import Iterator, Optional, Protocol, runtime_checkable


class OutputLevel(IntEnum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3

    # * Map CLI flags to a level (--debug only counts when verbose output is on)
    @classmethod
    def from_flags(cls, verbose: bool = False, debug: bool = False) -> "OutputLevel":
        if not verbose:
            return cls.NORMAL
        return cls.DEBUG if debug else cls.VERBOSE


@runtime_checkable
class OutputInterface(Protocol):
    level: OutputLevel

    def enabled(self, level: OutputLevel) -> bool: ...

    def emit(
        self,
        level: OutputLevel,
        category: str,
        message: str,
        detail: Optional[str] = None,
    ) -> None: ...

    def close(self) -> None: ...


# * Drops every record; enabled() is always False so callers can skip building detail
class NullOutputManager:
    level = OutputLevel.NORMAL

    def enabled(self, level: OutputLevel) -> bool:
        return False

    def emit(
        self,
        level: OutputLevel,
        category: str,
        message: str,
        detail: Optional[str] = None,
    ) -> None:
        return None

    def close(self) -> None:
        return None


_output_manager: OutputInterface = NullOutputManager()


def set_output_manager(manager: OutputInterface) -> None:
    global _output_manager
    _output_manager = manager


def get_output_manager() -> OutputInterface:
    return _output_manager


def reset_output_manager() -> None:
    set_output_manager(NullOutputManager())


# * Swap in a manager for the duration of a block, restoring the previous one after
@contextmanager
def use_output_manager(manager: OutputInterface) -> Iterator[OutputInterface]:
    previous = get_output_manager()
    set_output_manager(manager)
    try:
        yield manager
    finally:
        set_output_manager(previous)
