"""
Deepgram STT Adapter - pre-recorded transcription and streaming sessions.

Streaming is descriptor-only: stream_transcribe() returns the WebSocket
URL, auth headers and a frame decoder. The caller owns the socket.
"""
import json
import logging
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import httpx

from callkit.core.decorators import track_latency
from callkit.domain.ports import (
    StreamingSession,
    StreamingTranscript,
    STTPort,
    Transcript,
    TranscriptWord,
    require_audio_source,
)
from callkit.domain.ports.provider_config import STTProviderConfig

from ..http_adapter import HTTPProviderAdapter

logger = logging.getLogger(__name__)

DEEPGRAM_BASE_URL = "https://api.deepgram.com/v1"
DEEPGRAM_STREAM_URL = "wss://api.deepgram.com/v1/listen"

# Pre-recorded: diarization + paragraph segmentation
TRANSCRIBE_OPTIONS = {
    "smart_format": "true",
    "punctuate": "true",
    "diarize": "true",
    "utterances": "true",
    "paragraphs": "true",
}

# Streaming: interim results, 300ms endpointing, VAD events
STREAM_OPTIONS = {
    "smart_format": "true",
    "punctuate": "true",
    "interim_results": "true",
    "endpointing": "300",
    "vad_events": "true",
}


def parse_deepgram_message(data: Any) -> Optional[StreamingTranscript]:
    """
    Decode one Deepgram WebSocket frame.

    Returns a StreamingTranscript for "Results" frames and None for anything
    else (Metadata, SpeechStarted, UtteranceEnd, malformed JSON).
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        message = json.loads(data) if isinstance(data, str) else data
    except ValueError:
        return None
    if not isinstance(message, dict) or message.get("type") != "Results":
        return None

    alternatives = (message.get("channel") or {}).get("alternatives") or [{}]
    alt = alternatives[0] or {}
    return StreamingTranscript(
        text=alt.get("transcript") or "",
        is_final=bool(message.get("is_final", False)),
        confidence=alt.get("confidence") or 0.0,
        words=alt.get("words") or [],
    )


def _normalize_transcript(result: dict) -> Transcript:
    channels = (result.get("results") or {}).get("channels") or [{}]
    alternatives = (channels[0] or {}).get("alternatives") or [{}]
    alt = alternatives[0] or {}

    words = [
        TranscriptWord(
            word=w.get("word", ""),
            start=w.get("start"),
            end=w.get("end"),
            confidence=w.get("confidence"),
            speaker=w.get("speaker"),
        )
        for w in alt.get("words") or []
    ]
    return Transcript(
        text=alt.get("transcript") or "",
        words=words,
        paragraphs=(alt.get("paragraphs") or {}).get("paragraphs") or [],
        confidence=alt.get("confidence") or 0.0,
        duration=(result.get("metadata") or {}).get("duration"),
    )


class DeepgramSTTAdapter(HTTPProviderAdapter, STTPort):
    """Adapter for Deepgram Speech-to-Text (Nova models)."""

    provider_name = "deepgram"

    def __init__(self, config: STTProviderConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.api_key = config.api_key
        self.default_model = config.model or "nova-2"
        self.stream_url = config.stream_url or DEEPGRAM_STREAM_URL

        if not self.api_key:
            logger.warning("⚠️ [DEEPGRAM] API Key missing. Requests will be rejected.")

        super().__init__(config.base_url or DEEPGRAM_BASE_URL, timeout=config.timeout, client=client)

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Token {self.api_key}"}

    @track_latency("deepgram_stt")
    async def transcribe(
        self,
        audio_url: Optional[str] = None,
        audio_buffer: Optional[bytes] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> Transcript:
        require_audio_source(audio_url, audio_buffer)

        params = {"model": model or self.default_model, "language": language, **TRANSCRIBE_OPTIONS}
        if audio_url:
            result = await self._request_json("POST", "/listen", params=params, json={"url": audio_url})
        else:
            result = await self._request_json(
                "POST",
                "/listen",
                params=params,
                headers={"Content-Type": "audio/wav"},
                content=audio_buffer,
            )

        transcript = _normalize_transcript(result or {})
        logger.info(
            f"✅ [DEEPGRAM] Transcribed {len(transcript.text)} chars "
            f"(confidence={transcript.confidence}, duration={transcript.duration})"
        )
        return transcript

    async def stream_transcribe(
        self,
        on_transcript: Optional[Callable] = None,
        language: str = "en",
        model: Optional[str] = None,
    ) -> StreamingSession:
        params = {"model": model or self.default_model, "language": language, **STREAM_OPTIONS}
        return StreamingSession(
            ws_url=f"{self.stream_url}?{urlencode(params)}",
            headers=self._auth_headers(),
            on_transcript=on_transcript,
            parse_message=parse_deepgram_message,
            provider=self.provider_name,
        )
