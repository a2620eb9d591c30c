# stitch/ai/clients/base.py
# Provider-agnostic generate flow; subclasses only implement make_call()

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import ClassVar

from ..types import APICallContext, GenerateResult
from ..utils import parse_json
from ...config.settings import settings_manager
from ...config.env_validator import missing_env_message, provider_env_ready
from ...core.exceptions import AIError, ConfigurationError
from ...core.verbose import (
    vlog_ai_request,
    vlog_ai_response,
    vlog_debug,
    vlog_warning,
)


class BaseClient(ABC):
    """Base for provider clients.

    `run_generate` runs preflight, model validation, the provider call & JSON
    parsing in that order. It never raises: every failure is reported through
    a `GenerateResult` with `success=False`.
    """

    provider_name: str = ""
    required_env_vars: ClassVar[list[str]] = []

    def run_generate(self, prompt: str, model: str) -> GenerateResult:
        started = time.perf_counter()

        def elapsed_ms() -> float:
            return (time.perf_counter() - started) * 1000

        try:
            self.preflight()
            model = self.validate_model(model)
            vlog_ai_request(
                provider=self.provider_name,
                model=model,
                prompt_length=len(prompt),
                temperature=settings_manager.load().temperature,
            )
            vlog_debug("AI", f"Prompt preview: {prompt[:200]!r}")
            ctx = self.make_call(prompt, model)
        except ConfigurationError as e:
            vlog_warning("AI", f"Configuration error for {self.provider_name}", str(e))
            return GenerateResult.failure(str(e), provider=self.provider_name, model=model)
        except AIError as e:
            return self._report(GenerateResult.failure(str(e), provider=self.provider_name, model=model), elapsed_ms())
        except Exception as e:
            error = f"Unexpected error in {self.provider_name}: {e}"
            return self._report(GenerateResult.failure(error, provider=self.provider_name, model=model), elapsed_ms())

        return self._report(self._process_response(ctx), elapsed_ms())

    # credential check by default; override for extra setup
    def preflight(self) -> None:
        self.validate_credentials()

    def validate_credentials(self) -> None:
        if self.required_env_vars and not provider_env_ready(self.provider_name):
            raise ConfigurationError(missing_env_message(self.provider_name))

    def validate_model(self, model: str) -> str:
        name = (model or "").strip()
        if not name:
            raise ConfigurationError("Model name cannot be empty")
        return name

    # * Provider call; map SDK errors onto AIError subclasses
    @abstractmethod
    def make_call(self, prompt: str, model: str) -> APICallContext:
        ...

    def _process_response(self, ctx: APICallContext) -> GenerateResult:
        parsed = parse_json(ctx.raw_text)
        return GenerateResult(
            success=parsed.data is not None,
            data=parsed.data,
            raw_text=ctx.raw_text,
            json_text=parsed.json_text,
            error=parsed.error,
            provider=ctx.provider_name,
            model=ctx.model,
        )

    def _report(self, result: GenerateResult, duration_ms: float) -> GenerateResult:
        result.duration_ms = duration_ms
        vlog_ai_response(
            provider=self.provider_name,
            model=result.model,
            response_length=len(result.raw_text),
            success=result.success,
            duration_ms=duration_ms,
            error=None if result.success else result.error,
        )
        return result
