"""
Adapter Factory - the only entry point services use to obtain adapters.

Switch providers by changing the environment:
    TELEPHONY_PROVIDER=vapi|twilio|mock
    VOICE_PROVIDER=elevenlabs|mock
    LLM_PROVIDER=openai|groq|mock
    STT_PROVIDER=deepgram|mock
    CALLING_MOCK_MODE=true  (overrides all to mock)

The process-wide bundle is created on first use, replaced wholesale on
force_refresh and cleared by reset_adapter_bundle().
"""
import asyncio
import logging
import threading
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from callkit.core.config import Settings, load_settings
from callkit.core.exceptions import InvalidArgumentError, UnknownProviderError
from callkit.core.secure_logging import mask_api_keys
from callkit.domain.ports import Capability, LLMPort, STTPort, TelephonyPort, VoicePort
from callkit.domain.ports.provider_config import (
    LLMProviderConfig,
    STTProviderConfig,
    TelephonyProviderConfig,
    VoiceProviderConfig,
)
from callkit.infrastructure.provider_registry import get_provider_registry

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS: dict[Capability, str] = {
    Capability.TELEPHONY: "vapi",
    Capability.VOICE: "elevenlabs",
    Capability.LLM: "openai",
    Capability.STT: "deepgram",
}

MOCK_PROVIDER = "mock"

# Override fields that are shown masked when logged
CREDENTIAL_FIELDS = ("api_key", "account_sid", "api_key_sid", "api_key_secret", "webhook_secret")


@dataclass(frozen=True)
class AdapterBundle:
    """One adapter per capability, resolved together from one settings snapshot."""
    telephony: TelephonyPort
    voice: VoicePort
    llm: LLMPort
    stt: STTPort
    mock_mode: bool = False

    def info(self) -> dict:
        return {
            "telephony": self.telephony.provider_name,
            "voice": self.voice.provider_name,
            "llm": self.llm.provider_name,
            "stt": self.stt.provider_name,
            "mock_mode": self.mock_mode,
        }


# -----------------------------------------------------------------------------
# Provider resolution
# -----------------------------------------------------------------------------

def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def resolve_provider_names(settings: Settings, overrides: Optional[dict] = None) -> dict[Capability, str]:
    """
    Pick one provider per capability.

    Precedence: CALLING_MOCK_MODE > overrides[<cap>]["provider"] > <CAP>_PROVIDER > default.
    """
    overrides = overrides or {}
    configured = {
        Capability.TELEPHONY: settings.TELEPHONY_PROVIDER,
        Capability.VOICE: settings.VOICE_PROVIDER,
        Capability.LLM: settings.LLM_PROVIDER,
        Capability.STT: settings.STT_PROVIDER,
    }

    names = {}
    for capability in Capability:
        if settings.CALLING_MOCK_MODE:
            names[capability] = MOCK_PROVIDER
            continue
        override = _normalize((overrides.get(capability.value) or {}).get("provider"))
        names[capability] = override or _normalize(configured[capability]) or DEFAULT_PROVIDERS[capability]
    return names


# -----------------------------------------------------------------------------
# Config builders (settings -> provider config dataclasses)
# -----------------------------------------------------------------------------

def _telephony_config(provider: str, settings: Settings) -> TelephonyProviderConfig:
    return TelephonyProviderConfig(
        provider=provider,
        api_key=settings.VAPI_API_KEY,
        phone_number_id=settings.VAPI_PHONE_NUMBER_ID,
        webhook_base_url=settings.WEBHOOK_BASE_URL,
        webhook_secret=settings.VAPI_WEBHOOK_SECRET,
        account_sid=settings.TWILIO_ACCOUNT_SID,
        api_key_sid=settings.TWILIO_API_KEY_SID,
        api_key_secret=settings.TWILIO_API_KEY_SECRET,
        phone_number=settings.TWILIO_PHONE_NUMBER,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def _voice_config(provider: str, settings: Settings) -> VoiceProviderConfig:
    return VoiceProviderConfig(
        provider=provider,
        api_key=settings.ELEVENLABS_API_KEY,
        voice_id=settings.ELEVENLABS_VOICE_ID,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def _llm_config(provider: str, settings: Settings) -> LLMProviderConfig:
    if provider == "groq":
        return LLMProviderConfig(
            provider=provider,
            api_key=settings.GROQ_API_KEY,
            model=settings.GROQ_MODEL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return LLMProviderConfig(
        provider=provider,
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        structured_model=settings.OPENAI_STRUCTURED_MODEL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def _stt_config(provider: str, settings: Settings) -> STTProviderConfig:
    return STTProviderConfig(
        provider=provider,
        api_key=settings.DEEPGRAM_API_KEY,
        model=settings.DEEPGRAM_MODEL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


CONFIG_BUILDERS = {
    Capability.TELEPHONY: _telephony_config,
    Capability.VOICE: _voice_config,
    Capability.LLM: _llm_config,
    Capability.STT: _stt_config,
}


def build_provider_config(
    capability: Capability,
    provider: str,
    settings: Settings,
    override: Optional[dict] = None,
) -> Any:
    """Build the config for one capability; override values win over settings."""
    config = CONFIG_BUILDERS[capability](provider, settings)
    values = {k: v for k, v in (override or {}).items() if k != "provider" and v is not None}
    if not values:
        return config

    known = {f.name for f in fields(config)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidArgumentError(
            f"Unknown {capability.value} config field(s): {', '.join(unknown)}",
            details={"capability": capability.value, "fields": unknown},
        )
    return replace(config, **values)


# -----------------------------------------------------------------------------
# Bundle construction
# -----------------------------------------------------------------------------

def create_adapter_bundle(overrides: Optional[dict] = None, settings: Optional[Settings] = None) -> AdapterBundle:
    """
    Build a fresh bundle. Never touches the cached singleton.

    Args:
        overrides: Per-capability config values, e.g. a tenant's own keys:
            {"llm": {"provider": "groq", "api_key": "gsk_..."}, "voice": {"api_key": "..."}}
        settings: Settings snapshot (read from the environment if None)

    Raises:
        UnknownProviderError: If a resolved provider is not registered
        InvalidArgumentError: If an override names an unknown config field
    """
    settings = settings or load_settings()
    overrides = overrides or {}
    registry = get_provider_registry()
    names = resolve_provider_names(settings, overrides)
    if overrides:
        credentials = {
            capability: {k: v for k, v in (values or {}).items() if k in CREDENTIAL_FIELDS}
            for capability, values in overrides.items()
        }
        logger.info(
            f"🔧 [Factory] Building bundle with overrides for {', '.join(sorted(overrides))}; "
            f"credentials={mask_api_keys(credentials)}"
        )

    # Validate all names first so a bad capability never half-builds a bundle
    for capability, name in names.items():
        if not registry.is_registered(capability, name):
            available = registry.get_available_providers()[capability.value]
            raise UnknownProviderError(capability.value, name, available)

    adapters = {
        capability: registry.create(
            capability,
            name,
            build_provider_config(capability, name, settings, overrides.get(capability.value)),
        )
        for capability, name in names.items()
    }

    return AdapterBundle(
        telephony=adapters[Capability.TELEPHONY],
        voice=adapters[Capability.VOICE],
        llm=adapters[Capability.LLM],
        stt=adapters[Capability.STT],
        mock_mode=settings.CALLING_MOCK_MODE,
    )


# -----------------------------------------------------------------------------
# Process-wide singleton
# -----------------------------------------------------------------------------

_bundle: Optional[AdapterBundle] = None
_pending: Optional[asyncio.Future] = None
_lock = threading.Lock()


def _build_and_store() -> AdapterBundle:
    global _bundle
    bundle = create_adapter_bundle()
    with _lock:
        _bundle = bundle
    info = bundle.info()
    logger.info(
        f"🔌 Adapters loaded: telephony={info['telephony']}, voice={info['voice']}, "
        f"llm={info['llm']}, stt={info['stt']}"
    )
    return bundle


def get_adapter_bundle(force_refresh: bool = False) -> AdapterBundle:
    """
    Get the process-wide bundle, building it on first use.

    Raises:
        UnknownProviderError: If configuration names an unregistered provider
            (the previously cached bundle, if any, is kept)
    """
    if _bundle is not None and not force_refresh:
        return _bundle
    return _build_and_store()


async def get_adapter_bundle_async(force_refresh: bool = False) -> AdapterBundle:
    """
    Async variant for event-loop callers.

    Concurrent callers that arrive while a build is in flight await the same
    task, so only one bundle is constructed. Cancelling one caller never
    cancels the build the others are waiting on.
    """
    global _pending

    if _bundle is not None and not force_refresh:
        return _bundle
    if _pending is None:
        _pending = asyncio.create_task(asyncio.to_thread(_build_and_store))
        _pending.add_done_callback(_clear_pending)
    return await asyncio.shield(_pending)


def _clear_pending(task: asyncio.Task) -> None:
    global _pending
    if _pending is task:
        _pending = None


def get_adapter_info() -> dict:
    """Provider names of the cached bundle (resolving it once if empty)."""
    return get_adapter_bundle().info()


def reset_adapter_bundle():
    """Clear the singleton slot. Next access rebuilds from the environment."""
    global _bundle
    with _lock:
        _bundle = None
    logger.debug("🔌 Adapter bundle cleared")
