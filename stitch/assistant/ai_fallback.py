# stitch/assistant/ai_fallback.py
# Resolve chat edits the rule parser cannot handle by asking the model, routed through the request queue

from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Tuple

from ..ai.clients.base import BaseClient
from ..ai.prompts import build_modification_prompt
from ..core.exceptions import AIError, ModificationError
from ..core.verbose import vlog, vlog_warning
from ..queue.request_queue import AIRequestQueue, Priority
from ..resume.field_path import validate_field_path
from ..resume.modifications import ModificationOperation, validate_modification
from ..resume.schema import RESUME_SCHEMA, Schema


# * Convert model JSON into validated operations; bad entries become warnings
def parse_ai_operations(
    data: Any, schema: Schema = RESUME_SCHEMA
) -> Tuple[List[ModificationOperation], List[str]]:
    operations: List[ModificationOperation] = []
    warnings: List[str] = []

    raw_ops = data.get("operations") if isinstance(data, dict) else None
    if not isinstance(raw_ops, list):
        return [], ["AI response did not include an operations list"]

    for i, raw in enumerate(raw_ops):
        try:
            op = ModificationOperation.from_dict(raw)
        except ModificationError as e:
            warnings.append(f"Op {i}: {e}")
            continue

        problems = validate_modification(op)
        if problems:
            warnings.append(f"Op {i}: {'; '.join(problems)}")
            continue

        check = validate_field_path(op.field_path, schema)
        if not check.valid:
            hint = (
                f" (did you mean: {', '.join(check.suggestions)}?)"
                if check.suggestions
                else ""
            )
            warnings.append(f"Op {i}: {check.error}{hint}")
            continue

        operations.append(op)

    return operations, warnings


# * Ask the model for operations, through the queue so concurrent sessions share the limit
async def resolve_with_ai(
    message: str,
    resume: dict[str, Any],
    *,
    queue: AIRequestQueue,
    client: BaseClient,
    model: str,
    schema: Schema = RESUME_SCHEMA,
    priority: int = Priority.HIGH,
    timeout_ms: Optional[int] = None,
) -> Tuple[List[ModificationOperation], List[str]]:
    prompt = build_modification_prompt(message, resume, schema)

    # run_generate is blocking; keep the event loop free while it runs
    result = await queue.enqueue(
        lambda: asyncio.to_thread(client.run_generate, prompt, model),
        priority=priority,
        timeout_ms=timeout_ms,
    )

    if not result.success:
        raise AIError(f"AI could not resolve edit request: {result.error}")

    operations, warnings = parse_ai_operations(result.data, schema)
    explanation = (result.data or {}).get("explanation")
    vlog(
        "AI",
        f"Resolved {len(operations)} operation(s) from model",
        str(explanation) if explanation else None,
    )
    for warning in warnings:
        vlog_warning("AI", "Dropped AI operation", warning)
    return operations, warnings
