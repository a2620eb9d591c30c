# tests/integration/test_cli_apply.py
# Integration tests for `stitch apply` with JSON operation files

import json

from typer.testing import CliRunner

from stitch.cli.app import app

ENV = {"NO_COLOR": "1", "TERM": "dumb"}


def _write_ops(tmp_path, payload, name="ops.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


# * Operations apply sequentially & each change lands in history
def test_apply_operations(resume_file, tmp_path):
    ops = _write_ops(
        tmp_path,
        {
            "operations": [
                {"operation": "prefix", "field_path": "experiences[0].title", "new_value": "Senior "},
                {"operation": "insert", "field_path": "experiences[0].achievements[0]", "new_value": "Mentored 4 engineers"},
                {"operation": "remove", "field_path": "skills.technical", "old_value": "JQUERY"},
                {"operation": "replace", "field_path": "contact.linkedin", "new_value": "linkedin.com/in/jlee"},
            ]
        },
    )
    runner = CliRunner()
    result = runner.invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)

    assert result.exit_code == 0, result.output
    assert "Applied 4 operation(s)" in result.output
    data = json.loads(resume_file.read_text())
    assert data["experiences"][0]["title"] == "Senior Software Engineer"
    assert data["experiences"][0]["achievements"][0] == "Mentored 4 engineers"
    assert data["skills"]["technical"] == ["Python", "Django"]
    assert data["contact"]["linkedin"] == "linkedin.com/in/jlee"

    listing = json.loads(runner.invoke(app, ["history", "list", "--json"], env=ENV).output)
    assert listing["total"] == 4
    newest = listing["records"][0]
    assert newest["field_path"] == "contact.linkedin"
    assert newest["old_exists"] is False


def test_apply_bare_list(resume_file, tmp_path):
    ops = _write_ops(tmp_path, [{"operation": "suffix", "field_path": "summary", "new_value": " Open source maintainer."}])
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)
    assert result.exit_code == 0, result.output
    assert json.loads(resume_file.read_text())["summary"].endswith("Open source maintainer.")


# * Invalid operations are reported before anything is written
def test_apply_invalid_operations(resume_file, tmp_path, sample_resume):
    ops = _write_ops(
        tmp_path,
        [
            {"operation": "replace", "field_path": "summary"},
            {"operation": "insert", "field_path": "skills.technical", "new_value": "Go"},
        ],
    )
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)
    assert result.exit_code == 1
    assert "Validation Error" in result.output
    assert "Op 0: new_value is required for replace operation" in result.output
    assert "Op 1: Insert operation requires array index in path" in result.output
    assert json.loads(resume_file.read_text()) == sample_resume


def test_apply_unknown_operation(resume_file, tmp_path):
    ops = _write_ops(tmp_path, [{"operation": "rename", "field_path": "summary"}])
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)
    assert result.exit_code == 1
    assert "Modification Error" in result.output
    assert "Invalid operation type: rename" in result.output


def test_apply_not_a_list(resume_file, tmp_path):
    ops = _write_ops(tmp_path, {"ops": []})
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)
    assert result.exit_code == 1
    assert "must hold a list of operations" in result.output


# * Type errors stop the run w/ the offending operation
def test_apply_prefix_on_list_fails(resume_file, tmp_path):
    ops = _write_ops(tmp_path, [{"operation": "prefix", "field_path": "skills.technical", "new_value": "x"}])
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops)], env=ENV)
    assert result.exit_code == 1
    assert "Cannot prefix non-string field. Current value type: array" in result.output


def test_apply_out_file(resume_file, tmp_path, sample_resume):
    ops = _write_ops(tmp_path, [{"operation": "append", "field_path": "certifications", "new_value": "CKA"}])
    out = tmp_path / "out" / "resume.json"
    result = CliRunner().invoke(app, ["apply", str(resume_file), str(ops), "--out", str(out)], env=ENV)
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text())["certifications"][-1] == "CKA"
    assert json.loads(resume_file.read_text()) == sample_resume
