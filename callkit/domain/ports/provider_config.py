"""
Provider Configuration Objects - Pure Domain Models.

Adapters receive config objects from the factory, not raw settings, so
credentials are captured once at construction time.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TelephonyProviderConfig:
    """Configuration for telephony providers."""
    provider: str  # "vapi", "twilio", "mock"
    api_key: str = ""
    phone_number_id: str = ""
    webhook_base_url: str = "http://localhost:3002"
    webhook_secret: str = ""
    default_voice_id: str = "adam"

    # Twilio credentials (also used by Vapi for SMS)
    account_sid: str = ""
    api_key_sid: str = ""
    api_key_secret: str = ""
    phone_number: str = ""

    base_url: Optional[str] = None
    timeout: float = 30.0

    # Provider-specific options (extensible)
    provider_options: dict = field(default_factory=dict)


@dataclass
class VoiceProviderConfig:
    """Configuration for voice synthesis providers."""
    provider: str  # "elevenlabs", "mock"
    api_key: str = ""
    voice_id: str = "rachel"
    model: str = "eleven_multilingual_v2"
    output_format: str = "mp3_44100_128"
    base_url: Optional[str] = None
    timeout: float = 30.0

    provider_options: dict = field(default_factory=dict)


@dataclass
class LLMProviderConfig:
    """Configuration for LLM providers."""
    provider: str  # "openai", "groq", "mock"
    api_key: str = ""
    model: str = "gpt-4o-mini"
    structured_model: Optional[str] = None  # model for script/negotiation prompts
    temperature: float = 0.7
    max_tokens: int = 2000
    base_url: Optional[str] = None
    timeout: float = 30.0

    provider_options: dict = field(default_factory=dict)


@dataclass
class STTProviderConfig:
    """Configuration for STT providers."""
    provider: str  # "deepgram", "mock"
    api_key: str = ""
    model: str = "nova-2"
    language: str = "en"
    base_url: Optional[str] = None
    stream_url: Optional[str] = None
    timeout: float = 30.0

    provider_options: dict = field(default_factory=dict)
