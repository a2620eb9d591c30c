# tests/unit/ai/clients/test_factory.py
# Unit tests for model-to-provider routing

import pytest

from stitch.ai.clients import factory
from stitch.ai.clients.factory import get_client, provider_for_model
from stitch.ai.clients.openai_client import OpenAIClient
from stitch.core.exceptions import ConfigurationError


class TestProviderForModel:

    @pytest.mark.parametrize("model", ["gpt-5-mini", "GPT-4o", "o3-mini", "o1", "chatgpt-4o-latest"])
    def test_openai_models(self, model):
        assert provider_for_model(model) == "openai"

    @pytest.mark.parametrize("model", ["claude-sonnet-4", "llama3", "", None])
    def test_unknown_models(self, model):
        assert provider_for_model(model) is None


class TestGetClient:

    def test_openai_client(self):
        assert isinstance(get_client("gpt-5-mini"), OpenAIClient)

    def test_unknown_model_raises(self):
        with pytest.raises(ConfigurationError, match="No provider available for model 'llama3'"):
            get_client("llama3")

    # * Registry entries can be swapped for tests
    def test_registry_override(self, monkeypatch):
        sentinel = object()
        monkeypatch.setitem(factory.CLIENT_REGISTRY, "openai", lambda: (lambda: sentinel))
        assert get_client("gpt-5") is sentinel
