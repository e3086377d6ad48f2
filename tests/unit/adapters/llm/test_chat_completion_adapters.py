"""
Tests for the OpenAI and Groq LLM adapters (SDK clients mocked).
"""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import groq
import httpx
import openai
import pytest

from callkit.adapters.outbound.llm.groq_llm_adapter import GroqLLMAdapter
from callkit.adapters.outbound.llm.openai_llm_adapter import OpenAILLMAdapter
from callkit.core.exceptions import ProviderRequestError
from callkit.domain.ports.provider_config import LLMProviderConfig

ADAPTERS = [
    pytest.param(OpenAILLMAdapter, openai, "openai", id="openai"),
    pytest.param(GroqLLMAdapter, groq, "groq", id="groq"),
]


def _completion(content, tool_calls=None, usage=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)


def _mock_client(completion=None, side_effect=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion, side_effect=side_effect)
    return client


def _config(provider: str) -> LLMProviderConfig:
    return LLMProviderConfig(
        provider=provider,
        api_key="test_key",
        model="small-model",
        structured_model="big-model",
    )


def _status_error(sdk, status: int, body: str):
    request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
    response = httpx.Response(status, request=request, text=body)
    return sdk.APIStatusError(f"Error code: {status}", response=response, body=None)


@pytest.mark.unit
@pytest.mark.parametrize("adapter_cls,sdk,provider", ADAPTERS)
class TestChatCompletionAdapters:

    @pytest.mark.asyncio
    async def test_complete_normalizes_reply(self, adapter_cls, sdk, provider):
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        tool_call = {"id": "t1", "type": "function", "function": {"name": "lookup", "arguments": "{}"}}
        client = _mock_client(_completion("Hello!", tool_calls=[tool_call], usage=usage))
        adapter = adapter_cls(_config(provider), client=client)

        result = await adapter.complete(
            [{"role": "user", "content": "Hi"}],
            temperature=0.2,
            max_tokens=50,
            tools=[{"type": "function", "function": {"name": "lookup"}}],
        )

        assert result.content == "Hello!"
        assert result.tool_calls == [tool_call]
        assert result.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}

        params = client.chat.completions.create.await_args.kwargs
        assert params["model"] == "small-model"
        assert params["temperature"] == 0.2
        assert params["max_tokens"] == 50
        assert params["tool_choice"] == "auto"
        assert "response_format" not in params

    @pytest.mark.asyncio
    async def test_complete_with_empty_content(self, adapter_cls, sdk, provider):
        client = _mock_client(_completion(None))
        adapter = adapter_cls(_config(provider), client=client)

        result = await adapter.complete([{"role": "user", "content": "Hi"}])

        assert result.content == ""
        assert result.tool_calls == []
        assert result.usage == {}

    @pytest.mark.asyncio
    async def test_generate_script_requests_json_from_structured_model(self, adapter_cls, sdk, provider):
        reply = json.dumps({"openingLine": "Hi!", "talkingPoints": [], "objectionHandlers": [], "closingStrategy": "Close"})
        client = _mock_client(_completion(reply))
        adapter = adapter_cls(_config(provider), client=client)

        script = await adapter.generate_script("book a demo", industry="roofing", rate_range={"min": 1, "max": 2})

        assert script.opening_line == "Hi!"
        params = client.chat.completions.create.await_args.kwargs
        assert params["model"] == "big-model"
        assert params["temperature"] == 0.8
        assert params["response_format"] == {"type": "json_object"}
        assert params["messages"][0]["role"] == "system"
        assert "roofing" in params["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_negotiate_rate_degrades_on_malformed_json(self, adapter_cls, sdk, provider):
        client = _mock_client(_completion("I think you should ask for more."))
        adapter = adapter_cls(_config(provider), client=client)

        strategy = await adapter.negotiate_rate({"name": "Acme"}, current_rate=2.0, target_rate=2.5)

        assert strategy.strategy == "I think you should ask for more."
        assert strategy.suggested_rate == 2.5
        assert strategy.walk_away_point is None
        assert strategy.confidence == 50
        assert client.chat.completions.create.await_args.kwargs["temperature"] == 0.5

    @pytest.mark.asyncio
    async def test_summarize_uses_default_model(self, adapter_cls, sdk, provider):
        client = _mock_client(_completion('```json\n{"summary": "ok", "sentiment": "negative"}\n```'))
        adapter = adapter_cls(_config(provider), client=client)

        summary = await adapter.summarize("long transcript")

        assert summary.summary == "ok"
        assert summary.sentiment == "negative"
        params = client.chat.completions.create.await_args.kwargs
        assert params["model"] == "small-model"
        assert params["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_status_error_is_not_degraded(self, adapter_cls, sdk, provider):
        client = _mock_client(side_effect=_status_error(sdk, 429, '{"error": "rate limited"}'))
        adapter = adapter_cls(_config(provider), client=client)

        with pytest.raises(ProviderRequestError) as exc_info:
            await adapter.summarize("text")

        assert exc_info.value.provider == provider
        assert exc_info.value.status_code == 429
        assert "rate limited" in exc_info.value.raw_body

    @pytest.mark.asyncio
    async def test_connection_error_has_no_status(self, adapter_cls, sdk, provider):
        request = httpx.Request("POST", "https://llm.example.com/v1/chat/completions")
        client = _mock_client(side_effect=sdk.APIConnectionError(request=request))
        adapter = adapter_cls(_config(provider), client=client)

        with pytest.raises(ProviderRequestError) as exc_info:
            await adapter.complete([{"role": "user", "content": "Hi"}])

        assert exc_info.value.status_code is None


@pytest.mark.unit
class TestSdkClientConstruction:

    def test_openai_client_has_retries_disabled(self):
        adapter = OpenAILLMAdapter(_config("openai"))
        assert adapter.client.max_retries == 0

    def test_groq_client_has_retries_disabled(self):
        adapter = GroqLLMAdapter(_config("groq"))
        assert adapter.client.max_retries == 0

    def test_structured_model_defaults_to_model(self):
        adapter = GroqLLMAdapter(LLMProviderConfig(provider="groq", api_key="k", model="llama"), client=MagicMock())
        assert adapter.structured_model == "llama"
