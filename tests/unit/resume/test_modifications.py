# tests/unit/resume/test_modifications.py
# Unit tests for structured modification operations on resume JSON

import copy

import pytest

from stitch.core.exceptions import FieldPathSyntaxError, ModificationError
from stitch.resume.field_path import MISSING
from stitch.resume.modifications import (
    ModificationOperation,
    OperationType,
    affected_path,
    apply_modification,
    apply_modifications,
    validate_modification,
)


def op(operation, path, new_value=MISSING, old_value=MISSING):
    return ModificationOperation(operation, path, new_value=new_value, old_value=old_value)


class TestModificationOperation:

    # * String operation names are coerced to OperationType
    def test_coerces_operation(self):
        assert op("prefix", "summary", "x").operation is OperationType.PREFIX

    # * Unknown operation names raise ModificationError
    def test_invalid_operation(self):
        with pytest.raises(ModificationError, match="Invalid operation type: explode"):
            op("explode", "summary")

    # * from_dict/to_dict keep only present values
    def test_dict_round(self):
        data = {"operation": "remove", "field_path": "skills.technical", "old_value": "jQuery"}
        parsed = ModificationOperation.from_dict(data)
        assert not parsed.has_new_value
        assert parsed.to_dict() == data

    # * from_dict rejects non-objects & missing operation
    def test_from_dict_errors(self):
        with pytest.raises(ModificationError, match="must be an object"):
            ModificationOperation.from_dict(["replace"])
        with pytest.raises(ModificationError, match="operation is required"):
            ModificationOperation.from_dict({"field_path": "summary"})

    # * Human-readable description
    def test_describe(self):
        assert op("prefix", "experiences[0].title", "Senior ").describe() == (
            "prefix experiences[0].title 'Senior '"
        )
        assert op("remove", "skills.technical", old_value="jQuery").describe() == (
            "remove skills.technical 'jQuery'"
        )


class TestValidateModification:

    # * Missing path, bad syntax & missing values are reported
    def test_problems(self):
        assert validate_modification(op("replace", "", "x")) == [
            "field_path is required for modification operation"
        ]
        assert "Invalid array index" in validate_modification(op("replace", "a[b]", "x"))[0]
        assert validate_modification(op("append", "skills.soft")) == [
            "new_value is required for append operation"
        ]
        assert validate_modification(op("suffix", "summary", 3)) == [
            "suffix new_value must be a string"
        ]
        assert validate_modification(op("insert", "skills.soft", "x")) == [
            "Insert operation requires array index in path"
        ]

    # * Well-formed operations have no problems
    def test_ok(self):
        assert validate_modification(op("remove", "skills.technical[0]")) == []
        assert validate_modification(op("insert", "skills.soft[0]", "Hiring")) == []


class TestApplyModification:

    # * Replace sets the value & leaves the input untouched
    def test_replace(self, sample_resume):
        original = copy.deepcopy(sample_resume)
        updated = apply_modification(sample_resume, op("replace", "contact.email", "j@new.dev"))
        assert updated["contact"]["email"] == "j@new.dev"
        assert sample_resume == original

    # * Prefix & suffix concatenate strings
    def test_affixes(self, sample_resume):
        updated = apply_modification(sample_resume, op("prefix", "experiences[0].title", "Senior "))
        assert updated["experiences"][0]["title"] == "Senior Software Engineer"
        updated = apply_modification(updated, op("suffix", "experiences[0].title", " II"))
        assert updated["experiences"][0]["title"] == "Senior Software Engineer II"

    # * Affix on an empty string yields the affix alone
    def test_affix_empty_string(self):
        assert apply_modification({"summary": ""}, op("suffix", "summary", "Hi")) == {
            "summary": "Hi"
        }

    # * Affix on non-strings names the current type
    def test_affix_non_string(self, sample_resume):
        with pytest.raises(ModificationError, match="Current value type: array"):
            apply_modification(sample_resume, op("prefix", "skills.technical", "x"))
        with pytest.raises(ModificationError, match="Current value type: missing"):
            apply_modification(sample_resume, op("suffix", "contact.fax", "x"))

    # * Append adds to lists & creates missing ones
    def test_append(self, sample_resume):
        updated = apply_modification(sample_resume, op("append", "skills.technical", "Go"))
        assert updated["skills"]["technical"][-1] == "Go"
        created = apply_modification(sample_resume, op("append", "awards", "Hackathon"))
        assert created["awards"] == ["Hackathon"]

    # * Append to a non-list raises
    def test_append_non_list(self, sample_resume):
        with pytest.raises(ModificationError, match="Cannot append to non-array field"):
            apply_modification(sample_resume, op("append", "summary", "x"))

    # * Insert shifts later elements; index == len appends
    def test_insert(self, sample_resume):
        updated = apply_modification(sample_resume, op("insert", "skills.soft[1]", "Hiring"))
        assert updated["skills"]["soft"] == ["Mentoring", "Hiring", "Communication"]
        at_end = apply_modification(sample_resume, op("insert", "skills.soft[2]", "Hiring"))
        assert at_end["skills"]["soft"][-1] == "Hiring"

    # * Insert past the end or without an index raises
    def test_insert_errors(self, sample_resume):
        with pytest.raises(ModificationError, match="Array length: 2"):
            apply_modification(sample_resume, op("insert", "skills.soft[5]", "x"))
        with pytest.raises(ModificationError, match="requires array index"):
            apply_modification(sample_resume, op("insert", "skills.soft", "x"))

    # * Remove by index, by value (case-insensitive) & whole field
    def test_remove(self, sample_resume):
        by_index = apply_modification(sample_resume, op("remove", "skills.technical[0]"))
        assert by_index["skills"]["technical"] == ["Django", "jQuery"]
        by_value = apply_modification(
            sample_resume, op("remove", "skills.technical", old_value="JQUERY")
        )
        assert by_value["skills"]["technical"] == ["Python", "Django"]
        whole = apply_modification(sample_resume, op("remove", "contact.phone"))
        assert "phone" not in whole["contact"]

    # * Removing an absent field is a no-op
    def test_remove_absent(self, sample_resume):
        assert apply_modification(sample_resume, op("remove", "contact.fax")) == sample_resume

    # * Missing new_value raises for value operations
    def test_replace_requires_value(self, sample_resume):
        with pytest.raises(ModificationError, match="new_value is required for replace"):
            apply_modification(sample_resume, op("replace", "summary"))

    # * Path syntax errors propagate as FieldPathSyntaxError
    def test_syntax_error(self, sample_resume):
        with pytest.raises(FieldPathSyntaxError):
            apply_modification(sample_resume, op("remove", "experiences[first]"))

    # * Empty path raises ModificationError
    def test_empty_path(self, sample_resume):
        with pytest.raises(ModificationError, match="field_path is required"):
            apply_modification(sample_resume, op("replace", " ", "x"))

    # * Operations chain, each against the previous result
    def test_apply_modifications(self, sample_resume):
        updated = apply_modifications(
            sample_resume,
            [
                op("prefix", "experiences[latest].title", "Senior "),
                op("append", "skills.technical", "Docker"),
                op("remove", "skills.technical", old_value="jQuery"),
            ],
        )
        assert updated["experiences"][0]["title"] == "Senior Software Engineer"
        assert updated["skills"]["technical"] == ["Python", "Django", "Docker"]


class TestAffectedPath:

    # * Indexed insert/remove report the containing list
    def test_paths(self):
        assert affected_path(op("insert", "skills.soft[1]", "x")) == "skills.soft"
        assert affected_path(op("remove", "skills.soft[0]")) == "skills.soft"
        assert affected_path(op("remove", "contact.phone")) == "contact.phone"
        assert affected_path(op("replace", "summary", "x")) == "summary"
