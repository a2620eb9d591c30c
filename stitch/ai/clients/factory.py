# stitch/ai/clients/factory.py
# AI client factory for routing a model name to its provider client

from __future__ import annotations

from typing import Callable, Type

from ...core.exceptions import ConfigurationError
from .base import BaseClient


# lazy client factory for OpenAI (tests can monkeypatch this)
def _get_openai_client_class() -> Type[BaseClient]:
    from .openai_client import OpenAIClient

    return OpenAIClient


# * Registry mapping provider IDs to client factory functions
CLIENT_REGISTRY: dict[str, Callable[[], Type[BaseClient]]] = {
    "openai": _get_openai_client_class,
}

# model-name prefixes served by each provider
_PROVIDER_PREFIXES: dict[str, tuple[str, ...]] = {
    "openai": ("gpt-", "o1", "o3", "o4", "chatgpt-"),
}


# * Determine provider ID for a model name (None if unrecognized)
def provider_for_model(model: str) -> str | None:
    name = (model or "").strip().lower()
    for provider, prefixes in _PROVIDER_PREFIXES.items():
        if name.startswith(prefixes):
            return provider
    return None


# * Build the client for a model; unknown models raise ConfigurationError
def get_client(model: str) -> BaseClient:
    provider = provider_for_model(model)
    if provider is None:
        supported = ", ".join(sorted(CLIENT_REGISTRY))
        raise ConfigurationError(
            f"No provider available for model '{model}' (supported providers: {supported})"
        )
    client_factory = CLIENT_REGISTRY[provider]
    return client_factory()()
