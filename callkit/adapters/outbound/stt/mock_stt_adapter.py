"""Mock STT Adapter - canned transcripts, no network."""
import json
import logging
from typing import Any, Callable, Optional

from callkit.domain.ports import (
    StreamingSession,
    StreamingTranscript,
    STTPort,
    Transcript,
    require_audio_source,
)

logger = logging.getLogger(__name__)

MOCK_STREAM_URL = "ws://mock/transcribe"


def parse_mock_message(data: Any) -> Optional[StreamingTranscript]:
    """Every frame is a final transcript, except JSON control frames ({"type": ...})."""
    if isinstance(data, (str, bytes, bytearray)):
        try:
            message = json.loads(data)
        except ValueError:
            message = None
        if isinstance(message, dict) and message.get("type") not in (None, "Results"):
            return None
    return StreamingTranscript(text="Mock streaming text", is_final=True, confidence=0.95)


class MockSTTAdapter(STTPort):
    """Deterministic STT for development and tests."""

    provider_name = "mock"

    def __init__(self, config: Any = None):
        self.config = config

    async def transcribe(
        self,
        audio_url: Optional[str] = None,
        audio_buffer: Optional[bytes] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> Transcript:
        require_audio_source(audio_url, audio_buffer)
        source = audio_url or "audio buffer"
        return Transcript(
            text=(
                f"[Mock Transcription] Hello, this is a simulated transcription from {source}. "
                f"The client discussed pricing and expressed interest in our services."
            ),
            words=[],
            confidence=0.95,
            duration=120,
        )

    async def stream_transcribe(
        self,
        on_transcript: Optional[Callable] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> StreamingSession:
        return StreamingSession(
            ws_url=MOCK_STREAM_URL,
            headers={},
            on_transcript=on_transcript,
            parse_message=parse_mock_message,
            provider=self.provider_name,
        )
