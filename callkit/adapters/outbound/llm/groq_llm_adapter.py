"""
Adaptador Groq LLM - Implementación de LLMPort.

Same contract as the OpenAI adapter, over the official Groq async client.
"""

import logging
from typing import Any, Optional

import groq
from groq import AsyncGroq

from callkit.core.decorators import track_latency
from callkit.core.exceptions import ProviderRequestError
from callkit.domain.ports.provider_config import LLMProviderConfig

from .chat_completion_adapter import ChatCompletionLLMAdapter

logger = logging.getLogger(__name__)

# REASONING MODELS: emit <think> tags inside the reply, which breaks strict JSON
REASONING_MODELS = [
    "deepseek-r1-distill-llama-70b",
    "deepseek-chat",
    "deepseek-reasoner",
]


class GroqLLMAdapter(ChatCompletionLLMAdapter):
    """LLMPort over Groq."""

    provider_name = "groq"

    def __init__(self, config: LLMProviderConfig, client: Optional[AsyncGroq] = None):
        super().__init__(config)
        if self.structured_model in REASONING_MODELS:
            logger.warning(
                f"⚠️ REASONING MODEL ALERT: '{self.structured_model}' generates <think> tags! "
                f"Structured replies will likely degrade."
            )
        self.client = client or AsyncGroq(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
        )

    @track_latency("groq_llm")
    async def _create_completion(self, **params: Any) -> Any:
        try:
            return await self.client.chat.completions.create(**params)
        except groq.APIStatusError as e:
            logger.error(f"❌ [LLM Groq] API error {e.status_code}: {e.message}")
            raise ProviderRequestError(
                self.provider_name, e.status_code, e.response.text, original_error=e
            ) from e
        except groq.APIConnectionError as e:
            logger.error(f"❌ [LLM Groq] Connection error: {e}")
            raise ProviderRequestError(self.provider_name, None, str(e), original_error=e) from e
