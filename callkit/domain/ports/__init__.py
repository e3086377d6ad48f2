"""Exports de todos los puertos del dominio."""

from .base import Capability, CapabilityPort, verify_contract
from .telephony_port import (
    TelephonyPort,
    CallHandle,
    BatchCallItem,
    BatchCallResult,
    CallStatus,
    CallActionResult,
    WebhookEvent,
    PhoneNumber,
    SmsReceipt,
)
from .voice_port import VoicePort, SynthesisResult, VoiceInfo, ClonedVoice
from .llm_port import LLMPort, CompletionResult, CallScript, RateStrategy, Summary
from .stt_port import (
    STTPort,
    Transcript,
    TranscriptWord,
    StreamingTranscript,
    StreamingSession,
    require_audio_source,
)
from .cache_port import CachePort

__all__ = [
    # Base
    "Capability",
    "CapabilityPort",
    "verify_contract",
    # Telephony
    "TelephonyPort",
    "CallHandle",
    "BatchCallItem",
    "BatchCallResult",
    "CallStatus",
    "CallActionResult",
    "WebhookEvent",
    "PhoneNumber",
    "SmsReceipt",
    # Voice
    "VoicePort",
    "SynthesisResult",
    "VoiceInfo",
    "ClonedVoice",
    # LLM
    "LLMPort",
    "CompletionResult",
    "CallScript",
    "RateStrategy",
    "Summary",
    # STT
    "STTPort",
    "Transcript",
    "TranscriptWord",
    "StreamingTranscript",
    "StreamingSession",
    "require_audio_source",
    # Cache
    "CachePort",
]
