# stitch/resume/schema.py
# Tagged schema tree (leaf / object / array) describing the expected resume shape

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union


# * Scalar value of a named kind ("string", "number", "boolean", "any", ...)
@dataclass(frozen=True)
class LeafSchema:
    kind: str = "any"


# * Mapping of property names to child schemas
@dataclass(frozen=True)
class ObjectSchema:
    fields: Dict[str, "Schema"] = field(default_factory=dict)

    def field_names(self) -> list[str]:
        return list(self.fields)


# * Homogeneous list; items describes every element
@dataclass(frozen=True)
class ArraySchema:
    items: "Schema" = field(default_factory=LeafSchema)


Schema = Union[LeafSchema, ObjectSchema, ArraySchema]

_SCHEMA_TYPES = (LeafSchema, ObjectSchema, ArraySchema)


def _leaf_kind(value: Any) -> str:
    if value is None:
        return "any"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


# * Build a schema tree from a sample value (first list element describes the items)
def schema_from_sample(sample: Any) -> Schema:
    if isinstance(sample, dict):
        return ObjectSchema({str(k): schema_from_sample(v) for k, v in sample.items()})
    if isinstance(sample, list):
        if not sample:
            return ArraySchema(LeafSchema("any"))
        return ArraySchema(schema_from_sample(sample[0]))
    return LeafSchema(_leaf_kind(sample))


# * Accept either a schema tree or a sample value
def coerce_schema(value: Any) -> Schema:
    if isinstance(value, _SCHEMA_TYPES):
        return value
    return schema_from_sample(value)


def _strings() -> ArraySchema:
    return ArraySchema(LeafSchema("string"))


# * Canonical resume shape used for path validation & AI prompts
RESUME_SCHEMA: Schema = ObjectSchema(
    {
        "summary": LeafSchema("string"),
        "contact": ObjectSchema(
            {
                "name": LeafSchema("string"),
                "email": LeafSchema("string"),
                "phone": LeafSchema("string"),
                "location": LeafSchema("string"),
                "linkedin": LeafSchema("string"),
                "website": LeafSchema("string"),
            }
        ),
        "skills": ObjectSchema(
            {
                "technical": _strings(),
                "soft": _strings(),
            }
        ),
        "experiences": ArraySchema(
            ObjectSchema(
                {
                    "title": LeafSchema("string"),
                    "company": LeafSchema("string"),
                    "location": LeafSchema("string"),
                    "startDate": LeafSchema("string"),
                    "endDate": LeafSchema("string"),
                    "achievements": _strings(),
                }
            )
        ),
        "education": ArraySchema(
            ObjectSchema(
                {
                    "degree": LeafSchema("string"),
                    "field": LeafSchema("string"),
                    "institution": LeafSchema("string"),
                    "graduationDate": LeafSchema("string"),
                }
            )
        ),
        "certifications": _strings(),
        "projects": ArraySchema(
            ObjectSchema(
                {
                    "name": LeafSchema("string"),
                    "description": LeafSchema("string"),
                    "technologies": _strings(),
                }
            )
        ),
    }
)


# * Render a schema as a compact, JSON-like outline (used in AI prompts)
def describe_schema(schema: Schema, indent: int = 0) -> str:
    pad = "  " * indent
    if isinstance(schema, LeafSchema):
        return schema.kind
    if isinstance(schema, ArraySchema):
        return f"[{describe_schema(schema.items, indent)}]"
    lines = ["{"]
    for name, child in schema.fields.items():
        lines.append(f"{pad}  {name}: {describe_schema(child, indent + 1)}")
    lines.append(f"{pad}}}")
    return "\n".join(lines)
