# stitch/stitch_io/__init__.py
# Package initialization & exports for Stitch I/O operations

from .generics import (
    ensure_parent,
    read_json_safe,
    read_resume_json,
    read_text,
    write_json_safe,
)

__all__ = [
    "ensure_parent",
    "read_json_safe",
    "read_resume_json",
    "read_text",
    "write_json_safe",
]
