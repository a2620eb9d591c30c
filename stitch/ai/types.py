# stitch/ai/types.py
# Value objects passed between provider clients & their callers

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# * Raw provider reply handed from make_call() to response processing
@dataclass(slots=True)
class APICallContext:
    raw_text: str
    provider_name: str
    model: str


# * Outcome of one generate call; failures carry `error` instead of raising
@dataclass(slots=True)
class GenerateResult:
    success: bool
    data: dict[str, Any] | None = None
    raw_text: str = ""
    json_text: str = ""
    error: str = ""
    provider: str = ""
    model: str = ""
    duration_ms: float = 0.0
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        provider: str = "",
        model: str = "",
        raw_text: str = "",
        json_text: str = "",
    ) -> "GenerateResult":
        return cls(
            success=False,
            error=error,
            provider=provider,
            model=model,
            raw_text=raw_text,
            json_text=json_text,
        )
