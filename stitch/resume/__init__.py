# stitch/resume/__init__.py
# Resume JSON model: field paths, schema, modifications, scoring & history

from .field_path import (
    MISSING,
    get_field_value,
    parse_field_path,
    set_field_value,
    validate_field_path,
)
from .modifications import ModificationOperation, OperationType, apply_modification
from .schema import RESUME_SCHEMA

__all__ = [
    "MISSING",
    "get_field_value",
    "parse_field_path",
    "set_field_value",
    "validate_field_path",
    "ModificationOperation",
    "OperationType",
    "apply_modification",
    "RESUME_SCHEMA",
]
