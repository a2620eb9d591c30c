# tests/unit/assistant/test_edit_session.py
# Unit tests for chat edit sessions: rule parsing, AI fallback, ordered apply, re-scoring & history

import asyncio
import copy
import json

from stitch.queue.request_queue import AIRequestQueue, QueueConfig
from stitch.resume.history import HistoryStore
from stitch.assistant.edit_session import run_edit_session


def _run(resume, messages, **kwargs):
    kwargs.setdefault("queue", AIRequestQueue(QueueConfig(max_concurrent=2)))
    return asyncio.run(run_edit_session(resume, messages, **kwargs))


class TestRuleEdits:

    # * Messages apply in order w/o mutating the input
    def test_applies_in_order(self, sample_resume):
        original = copy.deepcopy(sample_resume)
        result = _run(sample_resume, ["Add Senior to my title", "Add Docker to my skills"])

        assert result.applied_count == 2
        assert result.resume["experiences"][0]["title"] == "Senior Software Engineer"
        assert result.resume["skills"]["technical"][-1] == "Docker"
        assert sample_resume == original
        assert all(o.source == "rules" for o in result.outcomes)
        assert all(o.changed for o in result.outcomes)

    def test_clarification_without_client(self, sample_resume):
        result = _run(sample_resume, ["Update my title"])
        outcome = result.outcomes[0]
        assert result.applied_count == 0
        assert outcome.clarification.startswith("Would you like to add text")
        assert outcome.changed is False
        assert result.resume == sample_resume

    def test_non_modification_reports_error(self, sample_resume):
        result = _run(sample_resume, ["Thanks for the help"])
        assert result.outcomes[0].clarification == (
            "Message does not appear to be a modification request"
        )

    def test_empty_message_warning(self, sample_resume):
        result = _run(sample_resume, ["   "])
        assert result.outcomes[0].intent is None
        assert result.outcomes[0].warnings == ["Empty message is not allowed"]

    # * Removing a soft skill falls through from technical to soft
    def test_soft_skill_retry(self, sample_resume):
        result = _run(sample_resume, ["Remove Mentoring from my skills"])
        applied = result.outcomes[0].applied
        assert len(applied) == 1
        assert applied[0].field_path == "skills.soft"
        assert result.resume["skills"]["soft"] == ["Communication"]

    def test_no_change_warning(self, sample_resume):
        result = _run(sample_resume, ["Remove Fortran from my skills"])
        assert result.applied_count == 0
        assert result.outcomes[0].warnings == ["No change from remove skills.technical 'Fortran'"]

    # * Failing operations are skipped; later messages still apply
    def test_failed_operation_skipped(self):
        resume = {"experiences": [{"company": "Acme"}], "summary": "Engineer."}
        result = _run(resume, ["Add Senior to my title", "Change my summary to Lead engineer."])

        assert result.outcomes[0].warnings[0].startswith("Skipped prefix experiences[0].title")
        assert result.resume["summary"] == "Lead engineer."
        assert result.applied_count == 1

    def test_duplicate_skill_not_sent_to_ai(self, sample_resume, scripted_client):
        client = scripted_client()
        result = _run(
            sample_resume, ["Add Python to my skills"], client=client, model="gpt-5-mini"
        )
        assert client.prompts == []
        assert result.outcomes[0].warnings == ["Python already exists in skills"]


class TestScoring:

    def test_rescored_after_edits(self, sample_resume, sample_job_description):
        result = _run(
            sample_resume,
            ["Add Docker and Kubernetes to my skills"],
            job_text=sample_job_description,
        )
        assert result.score_after.score > result.score_before.score
        assert "docker" in result.score_after.matched
        assert "docker" in result.score_before.missing

    def test_no_job_text_no_score(self, sample_resume):
        result = _run(sample_resume, ["Add Senior to my title"])
        assert result.score_before is None
        assert result.score_after is None

    # * Unscorable job text keeps the edit
    def test_unscorable_job_text(self, sample_resume):
        result = _run(sample_resume, ["Add Senior to my title"], job_text="the and of")
        assert result.applied_count == 1
        assert result.score_after is None


class TestAIFallback:

    def test_unresolved_message_goes_to_ai(self, sample_resume, scripted_client):
        client = scripted_client(
            {
                "Polish": json.dumps(
                    {
                        "operations": [
                            {"operation": "replace", "field_path": "summary", "new_value": "Backend engineer building fast APIs."}
                        ]
                    }
                )
            }
        )
        result = _run(
            sample_resume,
            ["Polish my summary wording", "Add Senior to my title"],
            client=client,
            model="gpt-5-mini",
        )

        first, second = result.outcomes
        assert first.source == "ai"
        assert first.clarification is None
        assert result.resume["summary"] == "Backend engineer building fast APIs."
        assert second.source == "rules"
        assert len(client.prompts) == 1
        assert result.queue_stats.completed_requests == 1

    def test_ai_failure_becomes_warning(self, sample_resume, scripted_client):
        client = scripted_client(default="!raise upstream down")
        result = _run(sample_resume, ["Update my title"], client=client, model="gpt-5-mini")

        outcome = result.outcomes[0]
        assert outcome.source == "rules"
        assert outcome.warnings[0].startswith("AI fallback failed:")
        assert "upstream down" in outcome.warnings[0]
        assert outcome.clarification is not None

    def test_ai_warnings_kept(self, sample_resume, scripted_client):
        client = scripted_client(
            default=json.dumps(
                {"operations": [{"operation": "replace", "field_path": "hobbies", "new_value": "x"}]}
            )
        )
        result = _run(sample_resume, ["Update my title"], client=client, model="gpt-5-mini")
        assert "Op 0: Field 'hobbies' not found in schema" in result.outcomes[0].warnings
        assert result.applied_count == 0


class TestHistory:

    def test_records_each_applied_change(self, tmp_path, sample_resume, sample_job_description):
        store = HistoryStore(tmp_path / "history.json")
        result = _run(
            sample_resume,
            ["Add Senior to my title", "Remove the first achievement"],
            job_text=sample_job_description,
            history=store,
            resume_key="resume.json",
        )

        assert len(result.history) == 2
        title, achievements = result.history
        assert title.field_path == "experiences[0].title"
        assert title.old_value == "Software Engineer"
        assert title.new_value == "Senior Software Engineer"
        # several changes share the session scores, so none are attributed to one record
        assert (title.score_before, title.score_after) == (None, None)
        assert (achievements.score_before, achievements.score_after) == (None, None)
        # index removes record the whole list
        assert achievements.field_path == "experiences[latest].achievements"
        assert achievements.new_value == ["Led migration to PostgreSQL"]

        records, total = store.list(resume="resume.json")
        assert total == 2

    # * A lone change carries the session scores, so reverting it restores them
    def test_single_change_records_scores(self, tmp_path, sample_resume, sample_job_description):
        store = HistoryStore(tmp_path / "history.json")
        result = _run(
            sample_resume,
            ["Add Docker to my skills"],
            job_text=sample_job_description,
            history=store,
            resume_key="resume.json",
        )

        (entry,) = result.history
        assert entry.score_before == result.score_before.score
        assert entry.score_after == result.score_after.score
        assert entry.score_after > entry.score_before

        _, revert_record = store.revert(entry.id, result.resume)
        assert (revert_record.score_before, revert_record.score_after) == (
            entry.score_after,
            entry.score_before,
        )

    def test_to_dict(self, sample_resume):
        data = _run(sample_resume, ["Add Senior to my title"]).to_dict()
        assert data["queue_stats"]["completedRequests"] == 0
        assert data["outcomes"][0]["applied"][0]["operation"] == "prefix"
        assert data["history"] == []
