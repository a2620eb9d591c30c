# stitch/stitch_io/generics.py
# UTF-8 JSON & text file helpers used by settings, history & the CLI

import json
from pathlib import Path
from typing import Any

from ..core.exceptions import FileReadError, JSONParsingError
from ..core.verbose import vlog_file_read, vlog_file_write

SNIPPET_CONTEXT_LINES = 2


# * Numbered excerpt around a decode error, w/ the failing line marked
def _error_snippet(text: str, error: json.JSONDecodeError) -> str:
    lines = text.splitlines()
    first = max(1, error.lineno - SNIPPET_CONTEXT_LINES)
    last = min(len(lines), error.lineno + SNIPPET_CONTEXT_LINES)
    return "\n".join(
        f"{'>>>' if n == error.lineno else '   '} {n:3}: {lines[n - 1]}"
        for n in range(first, last + 1)
    )


def ensure_parent(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def write_json_safe(obj: Any, path: Path) -> None:
    path = Path(path)
    ensure_parent(path)
    content = json.dumps(obj, indent=2, ensure_ascii=False)
    path.write_text(content, encoding="utf-8")
    vlog_file_write(path, len(content))


def read_json_safe(path: Path) -> Any:
    text = Path(path).read_text(encoding="utf-8")
    vlog_file_read(path, len(text))
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise JSONParsingError(f"Invalid JSON in {path}:\n{_error_snippet(text, e)}\nError: {e.msg}") from e


# * Read a resume JSON file; the top level must be an object
def read_resume_json(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileReadError(f"Resume file not found: {path}", path)
    data = read_json_safe(path)
    if not isinstance(data, dict):
        raise JSONParsingError(f"Resume JSON in {path} must be an object, got {type(data).__name__}")
    return data


def read_text(path: Path) -> str:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileReadError(f"File not found: {path}", path) from e
    except OSError as e:
        raise FileReadError(f"Could not read {path}: {e}", path) from e
    vlog_file_read(path, len(text))
    return text
