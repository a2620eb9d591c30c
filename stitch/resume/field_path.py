# stitch/resume/field_path.py
# Dotted/bracketed field paths for resume JSON: parse, soft read, copy-on-write set & schema validation

# Path syntax:
#   summary                      -> property
#   contact.email                -> nested property
#   experiences[0].title         -> list index
#   experiences[latest].title    -> index 0 (lists are kept newest-first)

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..core.exceptions import FieldPathError, FieldPathIndexError, FieldPathSyntaxError
from .schema import ArraySchema, ObjectSchema, coerce_schema

# split on dots that are not inside brackets
_SPLIT_RE = re.compile(r"\.(?![^\[]*\])")
_INDEXED_RE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)\[(.+?)\]$")
_PROPERTY_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_TRAILING_INDEX_RE = re.compile(r"\[[^\[\]]*\]$")

LATEST = "latest"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# * Sentinel for "no value at this path" (distinct from a stored None)
MISSING: Any = _Missing()


# * One step of a parsed path
@dataclass(frozen=True)
class PathSegment:
    type: str  # "property" | "index" | "latest"
    key: Optional[str] = None
    index: int = 0

    @property
    def is_index(self) -> bool:
        return self.type in ("index", "latest")


# * Result of checking a path against a schema
@dataclass
class PathValidationResult:
    valid: bool
    error: Optional[str] = None
    suggestions: Optional[List[str]] = None


# * Parse a path string into segments (raises FieldPathSyntaxError)
def parse_field_path(path: str) -> List[PathSegment]:
    if not isinstance(path, str) or not path.strip():
        raise FieldPathSyntaxError("Field path cannot be empty", str(path or ""))

    trimmed = path.strip()
    segments: List[PathSegment] = []

    for part in _SPLIT_RE.split(trimmed):
        indexed = _INDEXED_RE.match(part)
        if indexed:
            name, index_text = indexed.groups()
            segments.append(PathSegment("property", key=name))
            if index_text == LATEST:
                segments.append(PathSegment("latest", index=0))
            elif index_text.isascii() and index_text.isdigit():
                segments.append(PathSegment("index", index=int(index_text)))
            else:
                raise FieldPathSyntaxError(f"Invalid array index: {index_text}", trimmed)
        elif _PROPERTY_RE.match(part):
            segments.append(PathSegment("property", key=part))
        elif "[" in part or "]" in part:
            raise FieldPathSyntaxError(f"Invalid path syntax: {part}", trimmed)
        else:
            raise FieldPathSyntaxError(f"Invalid path segment: {part}", trimmed)

    return segments


# * Soft read: any missing step or parse error returns default
def get_field_value(data: Any, path: str, default: Any = None) -> Any:
    try:
        segments = parse_field_path(path)
    except FieldPathError:
        return default

    current = data
    for segment in segments:
        if current is None:
            return default
        if segment.is_index:
            if not isinstance(current, list) or segment.index >= len(current):
                return default
            current = current[segment.index]
        else:
            if not isinstance(current, dict) or segment.key not in current:
                return default
            current = current[segment.key]
    return current


def _new_container(next_segment: PathSegment) -> Any:
    return [] if next_segment.is_index else {}


# * Copy-on-write set; creates missing containers, index == len appends
def set_field_value(data: Any, path: str, value: Any) -> Any:
    segments = parse_field_path(path)
    result = copy.deepcopy(data)
    if result is None:
        result = _new_container(segments[0])

    current = result
    for i, segment in enumerate(segments):
        is_last = i == len(segments) - 1
        if segment.is_index:
            if not isinstance(current, list):
                raise FieldPathError("Cannot access array index on non-array field", path)
            if segment.index > len(current):
                raise FieldPathIndexError(
                    f"Array index out of bounds: {segment.index}", path, segment.index
                )
            if is_last:
                if segment.index == len(current):
                    current.append(value)
                else:
                    current[segment.index] = value
                break
            if segment.index == len(current):
                current.append(_new_container(segments[i + 1]))
            elif current[segment.index] is None:
                current[segment.index] = _new_container(segments[i + 1])
            current = current[segment.index]
        else:
            if not isinstance(current, dict):
                raise FieldPathError(
                    f"Cannot set property '{segment.key}' on non-object", path
                )
            if is_last:
                current[segment.key] = value
                break
            if current.get(segment.key) is None:
                current[segment.key] = _new_container(segments[i + 1])
            current = current[segment.key]

    return result


# * Copy-on-write delete; an absent target returns an unchanged copy
def delete_field_value(data: Any, path: str) -> Any:
    segments = parse_field_path(path)
    result = copy.deepcopy(data)
    parent_path_segments, last = segments[:-1], segments[-1]

    parent = result
    for segment in parent_path_segments:
        if segment.is_index:
            if not isinstance(parent, list) or segment.index >= len(parent):
                return result
            parent = parent[segment.index]
        else:
            if not isinstance(parent, dict) or segment.key not in parent:
                return result
            parent = parent[segment.key]

    if last.is_index:
        if isinstance(parent, list) and last.index < len(parent):
            del parent[last.index]
    elif isinstance(parent, dict):
        parent.pop(last.key, None)
    return result


# * Validate a path against a schema tree (or a sample object shaped like one)
def validate_field_path(path: str, schema: Any) -> PathValidationResult:
    try:
        segments = parse_field_path(path)
    except FieldPathError as e:
        return PathValidationResult(valid=False, error=str(e))

    current = coerce_schema(schema)
    for segment in segments:
        if segment.is_index:
            if not isinstance(current, ArraySchema):
                return PathValidationResult(
                    valid=False, error="Cannot use array index on non-array field"
                )
            current = current.items
            continue

        if not isinstance(current, ObjectSchema):
            return PathValidationResult(
                valid=False,
                error=f"Cannot access property '{segment.key}' on non-object",
            )
        if segment.key not in current.fields:
            suggestions = [
                name
                for name in current.fields
                if levenshtein_distance(name, segment.key or "") <= 2
            ]
            return PathValidationResult(
                valid=False,
                error=f"Field '{segment.key}' not found in schema",
                suggestions=suggestions or None,
            )
        current = current.fields[segment.key]

    return PathValidationResult(valid=True)


def is_array_field(data: Any, path: str) -> bool:
    return isinstance(get_field_value(data, path), list)


def get_array_length(data: Any, path: str) -> int:
    value = get_field_value(data, path)
    return len(value) if isinstance(value, list) else 0


# * Split a trailing [n] off a path: "a.b[2]" -> ("a.b", 2); no index -> (path, None)
def split_trailing_index(path: str) -> tuple[str, Optional[int]]:
    segments = parse_field_path(path)
    if not segments[-1].is_index:
        return path.strip(), None
    return container_path(path), segments[-1].index


# * Strip a trailing [...] from a path
def container_path(path: str) -> str:
    return _TRAILING_INDEX_RE.sub("", path.strip())


# * Edit distance used for typo suggestions
def levenshtein_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


__all__ = [
    "MISSING",
    "PathSegment",
    "PathValidationResult",
    "container_path",
    "delete_field_value",
    "get_array_length",
    "get_field_value",
    "is_array_field",
    "levenshtein_distance",
    "parse_field_path",
    "set_field_value",
    "split_trailing_index",
    "validate_field_path",
]
