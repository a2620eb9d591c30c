# stitch/ai/clients/openai_client.py
# OpenAI Responses API client

from __future__ import annotations

from typing import Any

from .base import BaseClient
from ..types import APICallContext
from ...config.settings import settings_manager
from ...core.exceptions import AIError, ProviderError, RateLimitError

# model families that reject a temperature argument
_FIXED_TEMPERATURE_PREFIXES = ("gpt-5", "o1", "o3", "o4")


class OpenAIClient(BaseClient):

    provider_name = "openai"
    required_env_vars = ["OPENAI_API_KEY"]

    def _request_kwargs(self, prompt: str, model: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": model, "input": prompt}
        if not model.startswith(_FIXED_TEMPERATURE_PREFIXES):
            kwargs["temperature"] = settings_manager.load().temperature
        return kwargs

    def make_call(self, prompt: str, model: str) -> APICallContext:
        import openai

        try:
            resp = openai.OpenAI().responses.create(**self._request_kwargs(prompt, model))
        except Exception as e:
            raise _translate_error(e) from e
        return APICallContext(raw_text=resp.output_text or "", provider_name=self.provider_name, model=model)


# * Map an SDK exception onto the stitch AI error family
def _translate_error(e: Exception) -> AIError:
    import openai

    if isinstance(e, openai.RateLimitError):
        retry_after = e.response.headers.get("retry-after") if e.response is not None else None
        return RateLimitError(
            f"OpenAI rate limit exceeded: {e}",
            provider="openai",
            retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
        )
    if isinstance(e, openai.APIStatusError):
        return ProviderError(f"OpenAI API error ({e.status_code}): {e.message}", provider="openai")
    if isinstance(e, openai.APIConnectionError):
        return ProviderError(f"OpenAI connection error: {e}", provider="openai")
    return AIError(f"OpenAI API error: {e}")
