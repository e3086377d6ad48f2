"""
Adaptador OpenAI LLM - Implementación de LLMPort.

Chat completions, script generation, rate negotiation and summarization
over the official OpenAI async client.
"""

import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from callkit.core.decorators import track_latency
from callkit.core.exceptions import ProviderRequestError
from callkit.domain.ports.provider_config import LLMProviderConfig

from .chat_completion_adapter import ChatCompletionLLMAdapter

logger = logging.getLogger(__name__)


class OpenAILLMAdapter(ChatCompletionLLMAdapter):
    """LLMPort over OpenAI. SDK retries are disabled; retry policy belongs to the caller."""

    provider_name = "openai"

    def __init__(self, config: LLMProviderConfig, client: Optional[AsyncOpenAI] = None):
        super().__init__(config)
        self.client = client or AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
        )

    @track_latency("openai_llm")
    async def _create_completion(self, **params: Any) -> Any:
        try:
            return await self.client.chat.completions.create(**params)
        except openai.APIStatusError as e:
            logger.error(f"❌ [LLM OpenAI] API error {e.status_code}: {e.message}")
            raise ProviderRequestError(
                self.provider_name, e.status_code, e.response.text, original_error=e
            ) from e
        except openai.APIConnectionError as e:
            logger.error(f"❌ [LLM OpenAI] Connection error: {e}")
            raise ProviderRequestError(self.provider_name, None, str(e), original_error=e) from e
