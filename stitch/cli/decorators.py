# stitch/cli/decorators.py
# CLI decorator mapping Stitch error families to Rich output & exit codes

import functools
from typing import Any, Callable, TypeVar, cast

import typer
from rich.markup import escape

from ..core.exceptions import (
    StitchError,
    APIError,
    ValidationError,
    JSONParsingError,
    QueueError,
    FieldPathError,
    ModificationError,
    ScoringError,
    HistoryError,
    AIError,
    ConfigurationError,
    DocumentError,
    FileOperationError,
    format_error_message,
)

F = TypeVar("F", bound=Callable[..., Any])

# first matching entry wins; order subclasses before their bases
_ERROR_LABELS: tuple[tuple[type[BaseException], str], ...] = (
    (ValidationError, "Validation Error"),
    (JSONParsingError, "JSON Parsing Error"),
    (QueueError, "Queue Error"),
    (FieldPathError, "Field Path Error"),
    (ModificationError, "Modification Error"),
    (ScoringError, "Scoring Error"),
    (HistoryError, "History Error"),
    (AIError, "AI Error"),
    (ConfigurationError, "Configuration Error"),
    (DocumentError, "Document Error"),
    (FileOperationError, "File Error"),
    (StitchError, "Error"),
)


def _label_for(error: BaseException) -> tuple[str, str]:
    if isinstance(error, APIError):
        return f"{error.code or 'API Error'} ({error.status_code})", error.message
    for error_type, label in _ERROR_LABELS:
        if isinstance(error, error_type):
            return label, str(error)
    return "Unexpected Error", str(error)


def _log_error(error: BaseException, command: str) -> None:
    # ! Lazy import to avoid circular dependencies
    from ..config.settings import settings_manager
    from ..core.errors import handle_error

    handle_error(error, {"environment": settings_manager.load().environment, "command": command})


# * Decorator for handling Stitch errors in CLI commands w/ Rich output & exit code 1
def handle_stitch_error(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        # ! Lazy import to avoid circular dependencies
        from ..stitch_io.console import console

        try:
            return func(*args, **kwargs)
        except (typer.BadParameter, typer.Exit):
            # usage errors keep Click's own formatting & exit codes
            raise
        except Exception as e:
            if isinstance(e, ValidationError) and e.recoverable:
                return None
            _log_error(e, func.__name__)
            label, message = _label_for(e)
            console.print(format_error_message(label, escape(message)))
            raise SystemExit(1)

    return cast(F, wrapper)
