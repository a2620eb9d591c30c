# tests/unit/resume/test_schema.py
# Unit tests for the tagged schema tree & sample-derived schemas

from stitch.resume.schema import (
    RESUME_SCHEMA,
    ArraySchema,
    LeafSchema,
    ObjectSchema,
    coerce_schema,
    describe_schema,
    schema_from_sample,
)


class TestSchemaFromSample:

    # * Objects, arrays & leaf kinds are inferred
    def test_infers_shape(self):
        schema = schema_from_sample(
            {"name": "x", "years": 3, "remote": True, "tags": ["a"], "extra": None}
        )
        assert isinstance(schema, ObjectSchema)
        assert schema.fields["name"] == LeafSchema("string")
        assert schema.fields["years"] == LeafSchema("number")
        assert schema.fields["remote"] == LeafSchema("boolean")
        assert schema.fields["tags"] == ArraySchema(LeafSchema("string"))
        assert schema.fields["extra"] == LeafSchema("any")

    # * Empty lists accept any items
    def test_empty_list(self):
        assert schema_from_sample([]) == ArraySchema(LeafSchema("any"))

    # * Schema trees pass through coerce_schema unchanged
    def test_coerce(self):
        assert coerce_schema(RESUME_SCHEMA) is RESUME_SCHEMA
        assert coerce_schema({"a": 1}) == ObjectSchema({"a": LeafSchema("number")})


class TestResumeSchema:

    # * Core resume sections are present
    def test_sections(self):
        assert isinstance(RESUME_SCHEMA, ObjectSchema)
        for name in ("summary", "contact", "skills", "experiences", "education"):
            assert name in RESUME_SCHEMA.field_names()

    # * Outline mentions nested fields for prompt use
    def test_describe(self):
        text = describe_schema(RESUME_SCHEMA)
        assert text.startswith("{")
        assert "achievements: [string]" in text
        assert "email: string" in text
