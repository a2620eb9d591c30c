# tests/integration/test_cli_help.py
# Integration tests for help output, root options & verbose logging

from typer.testing import CliRunner

from stitch.cli.app import app

ENV = {"NO_COLOR": "1", "TERM": "dumb"}


def test_no_command_shows_help():
    result = CliRunner().invoke(app, [], env=ENV)
    assert result.exit_code == 0
    for command in ("edit", "apply", "score", "history", "export", "config", "path"):
        assert command in result.output


def test_help_flag_alias():
    result = CliRunner().invoke(app, ["-h"], env=ENV)
    assert result.exit_code == 0
    assert "--verbose" in result.output


def test_subcommand_help():
    result = CliRunner().invoke(app, ["edit", "--help"], env=ENV)
    assert result.exit_code == 0
    assert "--message" in result.output
    assert "--no-ai" in result.output


# * --log-file captures verbose logs for the command
def test_log_file(resume_file, tmp_path):
    log_file = tmp_path / "stitch.log"
    result = CliRunner().invoke(
        app,
        ["--log-file", str(log_file), "edit", str(resume_file), "-m", "Add Senior to my title", "--no-ai"],
        env=ENV,
    )
    assert result.exit_code == 0, result.output
    content = log_file.read_text(encoding="utf-8")
    assert "[EDIT] prefix experiences" in content
    assert "[HISTORY] Recorded prefix" in content
    assert "[FILE] Write:" in content
