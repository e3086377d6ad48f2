"""
Provider Registry - Config-driven adapter selection.

One factory table per capability. New providers can be added by:
1. Creating the adapter class (subclass of the capability port)
2. Registering a factory function here or at startup
3. Setting the ENV var (e.g., TELEPHONY_PROVIDER=twilio)
"""
import logging
from collections.abc import Callable
from typing import Any

from callkit.adapters.outbound.llm.groq_llm_adapter import GroqLLMAdapter
from callkit.adapters.outbound.llm.mock_llm_adapter import MockLLMAdapter
from callkit.adapters.outbound.llm.openai_llm_adapter import OpenAILLMAdapter
from callkit.adapters.outbound.stt.deepgram_stt_adapter import DeepgramSTTAdapter
from callkit.adapters.outbound.stt.mock_stt_adapter import MockSTTAdapter
from callkit.adapters.outbound.telephony.mock_telephony_adapter import MockTelephonyAdapter
from callkit.adapters.outbound.telephony.twilio_telephony_adapter import TwilioTelephonyAdapter
from callkit.adapters.outbound.telephony.vapi_telephony_adapter import VapiTelephonyAdapter
from callkit.adapters.outbound.tts.elevenlabs_tts_adapter import ElevenLabsTTSAdapter
from callkit.adapters.outbound.tts.mock_tts_adapter import MockVoiceAdapter
from callkit.core.exceptions import UnknownProviderError
from callkit.domain.ports import Capability, LLMPort, STTPort, TelephonyPort, VoicePort, verify_contract
from callkit.domain.ports.base import CapabilityPort

logger = logging.getLogger(__name__)

PORTS: dict[Capability, type[CapabilityPort]] = {
    Capability.TELEPHONY: TelephonyPort,
    Capability.VOICE: VoicePort,
    Capability.LLM: LLMPort,
    Capability.STT: STTPort,
}


class ProviderRegistry:
    """Registry of provider factories, keyed by capability then provider name."""

    def __init__(self):
        self._factories: dict[Capability, dict[str, Callable[[Any], CapabilityPort]]] = {
            capability: {} for capability in Capability
        }

    def register(self, capability: Capability | str, provider_name: str, factory_fn: Callable):
        """Register (or replace) a provider factory."""
        capability = Capability(capability)
        name = provider_name.strip().lower()
        self._factories[capability][name] = factory_fn
        logger.debug(f"✅ [Registry] Registered {capability.value} provider: {name}")

    def is_registered(self, capability: Capability | str, provider_name: str) -> bool:
        return provider_name.strip().lower() in self._factories[Capability(capability)]

    def create(self, capability: Capability | str, provider_name: str, config: Any = None) -> CapabilityPort:
        """
        Create an adapter and check it against its port.

        Raises:
            UnknownProviderError: If provider not registered
            UnimplementedCapabilityError: If the adapter misses a port operation
        """
        capability = Capability(capability)
        name = provider_name.strip().lower()
        factories = self._factories[capability]

        if name not in factories:
            raise UnknownProviderError(capability.value, name, list(factories.keys()))

        logger.info(f"🏭 [Registry] Creating {capability.value} adapter: {name}")
        adapter = factories[name](config)
        return verify_contract(PORTS[capability], adapter)

    def get_available_providers(self) -> dict[str, list[str]]:
        """Get list of registered providers."""
        return {capability.value: list(factories.keys()) for capability, factories in self._factories.items()}


def register_builtin_providers(registry: ProviderRegistry):
    """Register the bundled providers (idempotent)."""
    # Telephony
    registry.register(Capability.TELEPHONY, "vapi", lambda cfg: VapiTelephonyAdapter(config=cfg))
    registry.register(Capability.TELEPHONY, "twilio", lambda cfg: TwilioTelephonyAdapter(config=cfg))
    registry.register(Capability.TELEPHONY, "mock", lambda cfg: MockTelephonyAdapter(config=cfg))

    # Voice
    registry.register(Capability.VOICE, "elevenlabs", lambda cfg: ElevenLabsTTSAdapter(config=cfg))
    registry.register(Capability.VOICE, "mock", lambda cfg: MockVoiceAdapter(config=cfg))

    # LLM
    registry.register(Capability.LLM, "openai", lambda cfg: OpenAILLMAdapter(config=cfg))
    registry.register(Capability.LLM, "groq", lambda cfg: GroqLLMAdapter(config=cfg))
    registry.register(Capability.LLM, "mock", lambda cfg: MockLLMAdapter(config=cfg))

    # STT
    registry.register(Capability.STT, "deepgram", lambda cfg: DeepgramSTTAdapter(config=cfg))
    registry.register(Capability.STT, "mock", lambda cfg: MockSTTAdapter(config=cfg))


# Global registry instance
_registry = ProviderRegistry()
register_builtin_providers(_registry)


def get_provider_registry() -> ProviderRegistry:
    """Get global provider registry."""
    return _registry
