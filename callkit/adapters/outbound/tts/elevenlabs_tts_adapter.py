import logging
from typing import Optional

import httpx

from callkit.core.decorators import track_latency
from callkit.core.exceptions import InvalidArgumentError
from callkit.domain.ports import ClonedVoice, SynthesisResult, VoiceInfo, VoicePort
from callkit.domain.ports.provider_config import VoiceProviderConfig
from callkit.domain.ports.voice_port import AudioFile

from ..http_adapter import HTTPProviderAdapter

logger = logging.getLogger(__name__)

ELEVENLABS_BASE_URL = "https://api.elevenlabs.io/v1"

DEFAULT_VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
    "style": 0.5,
    "use_speaker_boost": True,
}


def content_type_for(output_format: str) -> str:
    """mp3_44100_128 -> audio/mp3, pcm_16000 -> audio/pcm."""
    return f"audio/{output_format.split('_')[0]}"


def _as_upload(index: int, audio_file: AudioFile) -> tuple:
    if isinstance(audio_file, (bytes, bytearray)):
        return ("files", (f"sample_{index}.mp3", bytes(audio_file), "audio/mpeg"))
    if isinstance(audio_file, tuple) and len(audio_file) in (2, 3):
        return ("files", audio_file)
    raise InvalidArgumentError(
        "audio_files entries must be bytes or (filename, bytes[, content_type]) tuples",
        details={"index": index, "type": type(audio_file).__name__},
    )


class ElevenLabsTTSAdapter(HTTPProviderAdapter, VoicePort):
    """
    Adapter for ElevenLabs TTS API.

    Voice settings: Stability, Similarity, Style, Speaker Boost (fixed defaults,
    overridable via provider_options["voice_settings"]).
    """

    provider_name = "elevenlabs"

    def __init__(self, config: VoiceProviderConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.api_key = config.api_key
        self.default_voice_id = config.voice_id or "rachel"
        self.default_model = config.model
        self.default_output_format = config.output_format
        self.voice_settings = {**DEFAULT_VOICE_SETTINGS, **config.provider_options.get("voice_settings", {})}

        if not self.api_key:
            logger.error("❌ [ELEVENLABS] No API Key found. Requests will be rejected.")

        super().__init__(config.base_url or ELEVENLABS_BASE_URL, timeout=config.timeout, client=client)

    def _auth_headers(self) -> dict:
        return {"xi-api-key": self.api_key}

    @track_latency("elevenlabs_tts")
    async def synthesize(
        self,
        text: str,
        voice_id: Optional[str] = None,
        model: Optional[str] = None,
        output_format: Optional[str] = None,
    ) -> SynthesisResult:
        if not text:
            raise InvalidArgumentError("text is required for synthesis")

        vid = voice_id or self.default_voice_id
        fmt = output_format or self.default_output_format
        logger.info(f"🗣️ [ELEVENLABS] Synthesizing: '{text[:30]}...' with Voice: {vid}")

        response = await self._send(
            "POST",
            f"/text-to-speech/{vid}",
            params={"output_format": fmt},
            json={
                "text": text,
                "model_id": model or self.default_model,
                "voice_settings": self.voice_settings,
            },
        )

        # ElevenLabs doesn't report duration
        return SynthesisResult(
            audio_buffer=response.content,
            content_type=content_type_for(fmt),
            duration=None,
        )

    async def get_voices(self) -> list[VoiceInfo]:
        result = await self._request_json("GET", "/voices")
        voices = []
        for v in result.get("voices") or []:
            labels = v.get("labels") or {}
            voices.append(VoiceInfo(
                id=v.get("voice_id"),
                name=v.get("name"),
                language=labels.get("language") or "en",
                preview_url=v.get("preview_url"),
                category=v.get("category"),
                description=labels.get("description") or "",
            ))
        return voices

    @track_latency("elevenlabs_clone")
    async def clone_voice(
        self,
        name: str,
        audio_files: list[AudioFile],
        description: str = "",
    ) -> ClonedVoice:
        if not audio_files:
            raise InvalidArgumentError("clone_voice requires at least one audio sample")

        files = [_as_upload(i, f) for i, f in enumerate(audio_files)]
        result = await self._request_json(
            "POST",
            "/voices/add",
            data={"name": name, "description": description},
            files=files,
        )
        logger.info(f"✅ [ELEVENLABS] Cloned voice '{name}' -> {result.get('voice_id')}")
        return ClonedVoice(voice_id=result["voice_id"], name=name)
