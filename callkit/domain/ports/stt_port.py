"""
Puerto (Interface) para proveedores de Speech-to-Text (STT).

Define el contrato para transcripción por lotes y el descriptor de sesión
de streaming. La conexión de streaming pertenece al llamador: el adaptador
solo describe el endpoint y decodifica los frames.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from callkit.core.exceptions import InvalidArgumentError

from .base import Capability, CapabilityPort


@dataclass
class TranscriptWord:
    word: str
    start: Optional[float] = None
    end: Optional[float] = None
    confidence: Optional[float] = None
    speaker: Optional[int] = None


@dataclass
class Transcript:
    """Transcripción normalizada, independiente del formato del proveedor."""
    text: str
    words: list[TranscriptWord] = field(default_factory=list)
    paragraphs: list[dict] = field(default_factory=list)
    confidence: float = 0.0
    duration: Optional[float] = None


@dataclass
class StreamingTranscript:
    """Frame de streaming decodificado."""
    text: str
    is_final: bool
    confidence: float = 0.0
    words: list = field(default_factory=list)


MessageParser = Callable[[Any], Optional[StreamingTranscript]]


@dataclass(frozen=True)
class StreamingSession:
    """
    Descriptor de una sesión de transcripción en streaming.

    Holds connection parameters, the caller's callback and a pure frame
    decoder. It owns no socket and no task: the caller opens the WebSocket,
    feeds frames to parse_message and closes it.
    """
    ws_url: str
    headers: dict
    on_transcript: Optional[Callable]
    parse_message: MessageParser
    provider: str = "unknown"


class STTPort(CapabilityPort):
    """
    Puerto para proveedores de Speech-to-Text.

    Implementaciones: DeepgramSTTAdapter, MockSTTAdapter
    """

    capability = Capability.STT
    OPERATIONS = ("transcribe", "stream_transcribe")

    async def transcribe(
        self,
        audio_url: Optional[str] = None,
        audio_buffer: Optional[bytes] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> Transcript:
        """
        Transcribe audio completo (no streaming).

        Exactly one of audio_url / audio_buffer must be given.

        Raises:
            InvalidArgumentError: Si no hay fuente de audio (antes de cualquier I/O)
            ProviderRequestError: Si el proveedor responde con error
        """
        raise self._unimplemented("transcribe")

    async def stream_transcribe(
        self,
        on_transcript: Optional[Callable] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> StreamingSession:
        """
        Describe una sesión de streaming sin abrir la conexión.

        Returns:
            StreamingSession (endpoint, headers, callback, parse_message)
        """
        raise self._unimplemented("stream_transcribe")


def require_audio_source(audio_url: Optional[str], audio_buffer: Optional[bytes]) -> None:
    """Validate that exactly one audio source was supplied."""
    if not audio_url and not audio_buffer:
        raise InvalidArgumentError(
            "Either audio_url or audio_buffer is required",
            details={"audio_url": audio_url, "audio_buffer": None},
        )
    if audio_url and audio_buffer:
        raise InvalidArgumentError(
            "Provide only one of audio_url or audio_buffer",
            details={"audio_url": audio_url, "audio_buffer": f"<{len(audio_buffer)} bytes>"},
        )
