# stitch/assistant/edit_session.py
# Chat-style edit orchestration: rule parsing, queued AI fallback, sequential apply, re-scoring & history

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..ai.clients.base import BaseClient
from ..core.exceptions import FieldPathError, ModificationError, ScoringError, StitchError
from ..core.verbose import vlog, vlog_warning
from ..queue.request_queue import AIRequestQueue, Priority, QueueStats
from ..resume.field_path import MISSING, get_field_value
from ..resume.history import HistoryStore, ModificationRecord
from ..resume.modifications import (
    ModificationOperation,
    OperationType,
    affected_path,
    apply_modification,
)
from ..resume.schema import RESUME_SCHEMA, Schema
from ..resume.scoring import KeywordScore, score_resume
from .ai_fallback import resolve_with_ai
from .intent_parser import ModificationIntent, parse_modification_intent


# * What happened to one chat message
@dataclass
class EditOutcome:
    message: str
    intent: Optional[ModificationIntent] = None
    operations: List[ModificationOperation] = field(default_factory=list)
    applied: List[ModificationOperation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    clarification: Optional[str] = None
    source: str = "rules"  # "rules" | "ai"

    @property
    def changed(self) -> bool:
        return bool(self.applied)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "source": self.source,
            "operations": [op.to_dict() for op in self.operations],
            "applied": [op.to_dict() for op in self.applied],
            "warnings": list(self.warnings),
            "clarification": self.clarification,
        }


# * Final state of an edit session
@dataclass
class EditSessionResult:
    resume: Dict[str, Any]
    outcomes: List[EditOutcome] = field(default_factory=list)
    score_before: Optional[KeywordScore] = None
    score_after: Optional[KeywordScore] = None
    queue_stats: Optional[QueueStats] = None
    history: List[ModificationRecord] = field(default_factory=list)

    @property
    def applied_count(self) -> int:
        return sum(len(o.applied) for o in self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resume": self.resume,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "score_before": self.score_before.to_dict() if self.score_before else None,
            "score_after": self.score_after.to_dict() if self.score_after else None,
            "queue_stats": self.queue_stats.to_dict() if self.queue_stats else None,
            "history": [r.to_dict() for r in self.history],
        }


def _safe_score(resume: Dict[str, Any], job_text: Optional[str]) -> Optional[KeywordScore]:
    if not job_text:
        return None
    try:
        return score_resume(resume, job_text)
    except ScoringError as e:
        # keep the edit, skip the score update
        vlog_warning("SCORE", "Re-scoring skipped", str(e))
        return None


def _soft_skill_retry(op: ModificationOperation) -> Optional[ModificationOperation]:
    if (
        op.operation is OperationType.REMOVE
        and op.has_old_value
        and op.field_path == "skills.technical"
    ):
        return ModificationOperation(
            OperationType.REMOVE, "skills.soft", old_value=op.old_value
        )
    return None


def _apply_one(
    resume: Dict[str, Any], op: ModificationOperation
) -> tuple[Dict[str, Any], Optional[ModificationOperation]]:
    # returns (new resume, op actually applied or None when nothing changed)
    updated = apply_modification(resume, op)
    if updated != resume:
        return updated, op
    retry = _soft_skill_retry(op)
    if retry is not None:
        updated = apply_modification(resume, retry)
        if updated != resume:
            return updated, retry
    return resume, None


async def _resolve_pending(
    pending: List[EditOutcome],
    resume: Dict[str, Any],
    queue: AIRequestQueue,
    client: BaseClient,
    model: str,
    schema: Schema,
) -> None:
    results = await asyncio.gather(
        *(
            resolve_with_ai(
                o.message,
                resume,
                queue=queue,
                client=client,
                model=model,
                schema=schema,
                priority=Priority.HIGH,
            )
            for o in pending
        ),
        return_exceptions=True,
    )
    for outcome, result in zip(pending, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            outcome.warnings.append(f"AI fallback failed: {result}")
            vlog_warning("EDIT", "AI fallback failed", str(result))
            continue
        operations, warnings = result
        outcome.warnings.extend(warnings)
        if operations:
            outcome.operations = operations
            outcome.source = "ai"
            outcome.clarification = None


# * Run a batch of chat edit messages against a resume
async def run_edit_session(
    resume: Dict[str, Any],
    messages: Sequence[str],
    *,
    queue: AIRequestQueue,
    client: Optional[BaseClient] = None,
    model: Optional[str] = None,
    job_text: Optional[str] = None,
    schema: Schema = RESUME_SCHEMA,
    history: Optional[HistoryStore] = None,
    resume_key: str = "resume",
) -> EditSessionResult:
    outcomes: List[EditOutcome] = []

    # 1. rule parsing
    for message in messages:
        outcome = EditOutcome(message=message)
        try:
            intent = parse_modification_intent(message, resume)
        except ModificationError as e:
            outcome.warnings.append(str(e))
            outcomes.append(outcome)
            continue
        outcome.intent = intent
        outcome.warnings.extend(intent.warnings)
        outcome.operations = intent.to_operations()
        if intent.requires_clarification:
            outcome.clarification = intent.clarification_question
        elif not intent.is_modification and intent.error:
            outcome.clarification = intent.error
        outcomes.append(outcome)

    # 2. AI fallback for unresolved messages
    pending = [
        o
        for o in outcomes
        if o.intent is not None
        and not o.operations
        and not o.intent.should_skip
        and (not o.intent.is_modification or o.intent.requires_clarification)
    ]
    if pending and client is not None and model:
        vlog("EDIT", f"Resolving {len(pending)} message(s) with AI", f"model={model}")
        await _resolve_pending(pending, resume, queue, client, model, schema)

    # 3. apply in message order
    score_before = _safe_score(resume, job_text)
    current = resume
    applied_ops: List[tuple[ModificationOperation, Any, Any, str]] = []
    for outcome in outcomes:
        for op in outcome.operations:
            try:
                updated, used = _apply_one(current, op)
            except (ModificationError, FieldPathError) as e:
                outcome.warnings.append(f"Skipped {op.describe()}: {e}")
                vlog_warning("EDIT", f"Skipped {op.describe()}", str(e))
                continue
            if used is None:
                outcome.warnings.append(f"No change from {op.describe()}")
                continue
            path = affected_path(used)
            before = get_field_value(current, path, MISSING)
            after = get_field_value(updated, path, MISSING)
            applied_ops.append((used, before, after, path))
            outcome.applied.append(used)
            current = updated

    # 4. re-score
    score_after = _safe_score(current, job_text) if applied_ops else score_before

    # 5. history; scores describe a single change, so multi-change sessions record none
    records: List[ModificationRecord] = []
    single_change = len(applied_ops) == 1
    record_before = score_before.score if single_change and score_before else None
    record_after = score_after.score if single_change and score_after else None
    if history is not None:
        for used, before, after, path in applied_ops:
            try:
                records.append(
                    history.record(
                        resume=resume_key,
                        operation_type=used.operation.value,
                        field_path=path,
                        old_value=None if before is MISSING else before,
                        new_value=None if after is MISSING else after,
                        score_before=record_before,
                        score_after=record_after,
                        old_exists=before is not MISSING,
                    )
                )
            except StitchError as e:
                vlog_warning("HISTORY", "Could not record modification", str(e))

    return EditSessionResult(
        resume=current,
        outcomes=outcomes,
        score_before=score_before,
        score_after=score_after,
        queue_stats=queue.get_stats(),
        history=records,
    )
