import logging
from itertools import count
from typing import Any, Optional

from callkit.domain.ports import ClonedVoice, SynthesisResult, VoiceInfo, VoicePort
from callkit.domain.ports.voice_port import AudioFile

logger = logging.getLogger(__name__)

SECONDS_PER_CHARACTER = 0.05


class MockVoiceAdapter(VoicePort):
    """Synthetic TTS: fixed audio bytes, duration estimated from text length."""

    provider_name = "mock"

    def __init__(self, config: Any = None):
        self.config = config
        self._clone_sequence = count(1)

    async def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> SynthesisResult:
        return SynthesisResult(
            audio_buffer=b"mock-audio",
            content_type="audio/mp3",
            duration=round(len(text or "") * SECONDS_PER_CHARACTER, 2),
        )

    async def get_voices(self) -> list[VoiceInfo]:
        return [
            VoiceInfo(id="mock_rachel", name="Rachel (Mock)", language="en"),
            VoiceInfo(id="mock_adam", name="Adam (Mock)", language="en"),
        ]

    async def clone_voice(
        self,
        name: str,
        audio_files: list[AudioFile],
        description: str = "",
    ) -> ClonedVoice:
        return ClonedVoice(voice_id=f"mock_clone_{next(self._clone_sequence)}", name=name)
