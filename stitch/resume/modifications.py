# stitch/resume/modifications.py
# Apply structured modification operations (replace/prefix/suffix/append/insert/remove) to resume JSON

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List

from ..core.exceptions import FieldPathError, ModificationError
from ..core.verbose import vlog_modification
from .field_path import (
    MISSING,
    container_path,
    delete_field_value,
    get_field_value,
    parse_field_path,
    set_field_value,
)


# * Supported operation types
class OperationType(str, Enum):
    REPLACE = "replace"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    APPEND = "append"
    INSERT = "insert"
    REMOVE = "remove"


# operations that carry a new value
VALUE_OPERATIONS = {
    OperationType.REPLACE,
    OperationType.PREFIX,
    OperationType.SUFFIX,
    OperationType.APPEND,
    OperationType.INSERT,
}


# * One change to apply at a field path
@dataclass
class ModificationOperation:
    operation: OperationType
    field_path: str
    new_value: Any = field(default=MISSING)
    old_value: Any = field(default=MISSING)

    def __post_init__(self) -> None:
        try:
            self.operation = OperationType(self.operation)
        except ValueError:
            raise ModificationError(
                f"Invalid operation type: {self.operation}", str(self.operation)
            ) from None

    @property
    def has_new_value(self) -> bool:
        return self.new_value is not MISSING

    @property
    def has_old_value(self) -> bool:
        return self.old_value is not MISSING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModificationOperation":
        if not isinstance(data, dict):
            raise ModificationError(
                f"Operation must be an object, got {type(data).__name__}"
            )
        if "operation" not in data:
            raise ModificationError("operation is required")
        return cls(
            operation=data["operation"],
            field_path=data.get("field_path", ""),
            new_value=data.get("new_value", MISSING),
            old_value=data.get("old_value", MISSING),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "operation": self.operation.value,
            "field_path": self.field_path,
        }
        if self.has_new_value:
            out["new_value"] = self.new_value
        if self.has_old_value:
            out["old_value"] = self.old_value
        return out

    def describe(self) -> str:
        value = f" {self.new_value!r}" if self.has_new_value else ""
        if self.operation is OperationType.REMOVE and self.has_old_value:
            value = f" {self.old_value!r}"
        return f"{self.operation.value} {self.field_path}{value}"


# * Structural checks w/o touching data (returns list of problems)
def validate_modification(op: ModificationOperation) -> List[str]:
    errors: List[str] = []
    if not op.field_path or not str(op.field_path).strip():
        errors.append("field_path is required for modification operation")
        return errors

    try:
        segments = parse_field_path(op.field_path)
    except FieldPathError as e:
        errors.append(str(e))
        return errors

    if op.operation in VALUE_OPERATIONS and not op.has_new_value:
        errors.append(f"new_value is required for {op.operation.value} operation")
    if op.operation in (OperationType.PREFIX, OperationType.SUFFIX) and op.has_new_value:
        if not isinstance(op.new_value, str):
            errors.append(f"{op.operation.value} new_value must be a string")
    if op.operation is OperationType.INSERT and not segments[-1].is_index:
        errors.append("Insert operation requires array index in path")
    return errors


def _type_label(value: Any) -> str:
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _require_value(op: ModificationOperation) -> None:
    if not op.has_new_value:
        raise ModificationError(
            f"new_value is required for {op.operation.value} operation", op.operation.value
        )


def _apply_affix(data: Any, op: ModificationOperation) -> Any:
    _require_value(op)
    verb = op.operation.value
    current = get_field_value(data, op.field_path, MISSING)
    if not isinstance(current, str):
        raise ModificationError(
            f"Cannot {verb} non-string field. Current value type: {_type_label(current)}",
            verb,
        )
    text = str(op.new_value)
    if current == "":
        new_value = text
    elif op.operation is OperationType.PREFIX:
        new_value = text + current
    else:
        new_value = current + text
    return set_field_value(data, op.field_path, new_value)


def _apply_append(data: Any, op: ModificationOperation) -> Any:
    _require_value(op)
    current = get_field_value(data, op.field_path, MISSING)
    if current is MISSING or current is None:
        return set_field_value(data, op.field_path, [op.new_value])
    if not isinstance(current, list):
        raise ModificationError(
            f"Cannot append to non-array field. Current value type: {_type_label(current)}",
            "append",
        )
    return set_field_value(data, op.field_path, [*current, op.new_value])


def _apply_insert(data: Any, op: ModificationOperation) -> Any:
    _require_value(op)
    segments = parse_field_path(op.field_path)
    if not segments[-1].is_index:
        raise ModificationError("Insert operation requires array index in path", "insert")

    array_path = container_path(op.field_path)
    index = segments[-1].index
    current = get_field_value(data, array_path, MISSING)
    if not isinstance(current, list):
        raise ModificationError(
            f"Cannot insert into non-array field. Current value type: {_type_label(current)}",
            "insert",
        )
    if index > len(current):
        raise ModificationError(
            f"Invalid array index for insert: {index}. Array length: {len(current)}",
            "insert",
        )
    return set_field_value(data, array_path, [*current[:index], op.new_value, *current[index:]])


def _matches(item: Any, target: Any) -> bool:
    if isinstance(item, str) and isinstance(target, str):
        return item.strip().lower() == target.strip().lower()
    return item == target


def _apply_remove(data: Any, op: ModificationOperation) -> Any:
    current = get_field_value(data, op.field_path, MISSING)
    if current is MISSING:
        return copy.deepcopy(data)

    segments = parse_field_path(op.field_path)
    if segments[-1].is_index:
        array_path = container_path(op.field_path)
        index = segments[-1].index
        array = get_field_value(data, array_path, MISSING)
        if not isinstance(array, list):
            raise ModificationError("Cannot remove index from non-array field", "remove")
        return set_field_value(
            data, array_path, [v for i, v in enumerate(array) if i != index]
        )

    # value remove: drop matching list elements, keep the list itself
    if op.has_old_value and isinstance(current, list):
        kept = [v for v in current if not _matches(v, op.old_value)]
        return set_field_value(data, op.field_path, kept)

    return delete_field_value(data, op.field_path)


def _apply_replace(data: Any, op: ModificationOperation) -> Any:
    _require_value(op)
    return set_field_value(data, op.field_path, op.new_value)


_HANDLERS = {
    OperationType.REPLACE: _apply_replace,
    OperationType.PREFIX: _apply_affix,
    OperationType.SUFFIX: _apply_affix,
    OperationType.APPEND: _apply_append,
    OperationType.INSERT: _apply_insert,
    OperationType.REMOVE: _apply_remove,
}


# * Apply one operation; the input is never mutated
def apply_modification(resume: Any, op: ModificationOperation) -> Any:
    if not op.field_path or not str(op.field_path).strip():
        raise ModificationError(
            "field_path is required for modification operation", op.operation.value
        )
    # surface syntax errors before any soft read
    parse_field_path(op.field_path)
    result = _HANDLERS[op.operation](resume, op)
    vlog_modification(op.operation.value, op.field_path)
    return result


# * Apply operations in order, each against the previous result
def apply_modifications(resume: Any, ops: Iterable[ModificationOperation]) -> Any:
    result = resume
    for op in ops:
        result = apply_modification(result, op)
    return result


# * Path whose before/after values describe the change
def affected_path(op: ModificationOperation) -> str:
    if op.operation is OperationType.INSERT:
        return container_path(op.field_path)
    if op.operation is OperationType.REMOVE:
        try:
            segments = parse_field_path(op.field_path)
        except FieldPathError:
            return op.field_path
        if segments[-1].is_index:
            return container_path(op.field_path)
    return op.field_path
