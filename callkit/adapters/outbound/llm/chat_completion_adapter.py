"""
Base for LLM adapters backed by an OpenAI-compatible chat completions SDK.

Subclasses provide _create_completion() (SDK call + error translation);
this class normalizes replies and implements the structured operations
on top of complete().
"""

import logging
from typing import Any, Optional

from callkit.core.decorators import track_latency
from callkit.domain.ports import CallScript, CompletionResult, LLMPort, RateStrategy, Summary
from callkit.domain.ports.provider_config import LLMProviderConfig

from . import prompts
from .structured_output import rate_strategy_from_reply, script_from_reply, summary_from_reply

logger = logging.getLogger(__name__)

JSON_RESPONSE_FORMAT = {"type": "json_object"}


def _as_dict(obj: Any) -> dict:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dump(exclude_none=True)
    return dict(vars(obj))


class ChatCompletionLLMAdapter(LLMPort):
    """Shared logic for chat-completions providers (OpenAI, Groq)."""

    provider_name = "chat"

    def __init__(self, config: LLMProviderConfig):
        self.config = config
        self.default_model = config.model
        self.structured_model = config.structured_model or config.model

        if not config.api_key:
            logger.warning(f"⚠️ [{self.provider_name}] API Key missing. Adapter may fail.")

    async def _create_completion(self, **params: Any) -> Any:
        """Call the SDK. Must raise ProviderRequestError on API failure."""
        raise self._unimplemented("complete")

    async def _chat(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        tools: Optional[list] = None,
        response_format: Optional[dict] = None,
    ) -> CompletionResult:
        params: dict[str, Any] = {
            "model": model or self.default_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if tools:
            params["tools"] = tools
            params["tool_choice"] = "auto"
        if response_format:
            params["response_format"] = response_format

        completion = await self._create_completion(**params)

        choices = getattr(completion, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        tool_calls = getattr(message, "tool_calls", None) or []

        return CompletionResult(
            content=getattr(message, "content", None) or "",
            tool_calls=[_as_dict(call) for call in tool_calls],
            usage=_as_dict(getattr(completion, "usage", None)),
        )

    async def complete(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        tools: Optional[list] = None,
    ) -> CompletionResult:
        return await self._chat(messages, model, temperature, max_tokens, tools)

    async def _complete_json(self, system_prompt: str, prompt: str, temperature: float, model: str) -> str:
        result = await self._chat(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            model=model,
            temperature=temperature,
            max_tokens=self.config.max_tokens,
            response_format=JSON_RESPONSE_FORMAT,
        )
        return result.content

    @track_latency("llm_script")
    async def generate_script(
        self,
        purpose: str,
        industry: Optional[str] = None,
        rate_range: Optional[dict] = None,
        context: str = "",
    ) -> CallScript:
        content = await self._complete_json(
            prompts.SCRIPT_SYSTEM_PROMPT,
            prompts.build_script_prompt(purpose, industry, rate_range, context),
            temperature=0.8,
            model=self.structured_model,
        )
        return script_from_reply(content)

    @track_latency("llm_negotiation")
    async def negotiate_rate(
        self,
        lead_data: dict,
        current_rate: float,
        target_rate: float,
        history: Optional[list] = None,
        market_context: str = "",
    ) -> RateStrategy:
        content = await self._complete_json(
            prompts.NEGOTIATION_SYSTEM_PROMPT,
            prompts.build_negotiation_prompt(lead_data, current_rate, target_rate, history, market_context),
            temperature=0.5,
            model=self.structured_model,
        )
        return rate_strategy_from_reply(content, target_rate)

    @track_latency("llm_summary")
    async def summarize(
        self,
        text: str,
        summary_type: str = "call",
        extract_action_items: bool = True,
    ) -> Summary:
        content = await self._complete_json(
            prompts.SUMMARY_SYSTEM_PROMPT,
            prompts.build_summary_prompt(text, summary_type, extract_action_items),
            temperature=0.3,
            model=self.default_model,
        )
        return summary_from_reply(content)
