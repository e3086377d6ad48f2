"""
Tests for DeepgramSTTAdapter and its streaming frame decoder.
"""
import json
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from callkit.adapters.outbound.stt.deepgram_stt_adapter import DeepgramSTTAdapter, parse_deepgram_message
from callkit.core.exceptions import InvalidArgumentError, ProviderRequestError
from callkit.domain.ports.provider_config import STTProviderConfig

DEEPGRAM_RESPONSE = {
    "metadata": {"duration": 12.5},
    "results": {
        "channels": [{
            "alternatives": [{
                "transcript": "hello world",
                "confidence": 0.98,
                "words": [
                    {"word": "hello", "start": 0.1, "end": 0.4, "confidence": 0.99, "speaker": 0},
                    {"word": "world", "start": 0.5, "end": 0.9, "confidence": 0.97, "speaker": 1},
                ],
                "paragraphs": {"paragraphs": [{"speaker": 0, "sentences": []}]},
            }]
        }]
    },
}


def _config() -> STTProviderConfig:
    return STTProviderConfig(provider="deepgram", api_key="dg_secret")


@pytest.mark.unit
class TestDeepgramTranscribe:

    @pytest.mark.asyncio
    async def test_transcribe_url_normalizes_response(self, http_recorder):
        client, requests = http_recorder(lambda r: httpx.Response(200, json=DEEPGRAM_RESPONSE))
        adapter = DeepgramSTTAdapter(_config(), client=client)

        transcript = await adapter.transcribe(audio_url="https://rec/1.wav")

        assert transcript.text == "hello world"
        assert transcript.confidence == 0.98
        assert transcript.duration == 12.5
        assert [w.word for w in transcript.words] == ["hello", "world"]
        assert transcript.words[1].speaker == 1
        assert transcript.paragraphs == [{"speaker": 0, "sentences": []}]

        request = requests[0]
        assert request.url.path == "/v1/listen"
        assert request.headers["Authorization"] == "Token dg_secret"
        assert json.loads(request.content) == {"url": "https://rec/1.wav"}
        params = request.url.params
        assert params["model"] == "nova-2"
        assert params["diarize"] == "true"
        assert params["paragraphs"] == "true"

    @pytest.mark.asyncio
    async def test_transcribe_buffer_sends_raw_audio(self, http_recorder):
        client, requests = http_recorder(lambda r: httpx.Response(200, json=DEEPGRAM_RESPONSE))
        adapter = DeepgramSTTAdapter(_config(), client=client)

        await adapter.transcribe(audio_buffer=b"RIFFdata", language="es", model="nova-3")

        request = requests[0]
        assert request.content == b"RIFFdata"
        assert request.headers["Content-Type"] == "audio/wav"
        assert request.url.params["language"] == "es"
        assert request.url.params["model"] == "nova-3"

    @pytest.mark.asyncio
    async def test_transcribe_empty_result(self, http_recorder):
        client, _ = http_recorder(lambda r: httpx.Response(200, json={"results": {"channels": []}}))
        adapter = DeepgramSTTAdapter(_config(), client=client)

        transcript = await adapter.transcribe(audio_url="https://rec/silence.wav")

        assert transcript.text == ""
        assert transcript.words == []
        assert transcript.confidence == 0.0
        assert transcript.duration is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [{}, {"audio_url": "https://a", "audio_buffer": b"x"}])
    async def test_transcribe_rejects_bad_source_before_network(self, http_recorder, kwargs):
        client, requests = http_recorder(lambda r: httpx.Response(200, json=DEEPGRAM_RESPONSE))
        adapter = DeepgramSTTAdapter(_config(), client=client)

        with pytest.raises(InvalidArgumentError):
            await adapter.transcribe(**kwargs)

        assert requests == []

    @pytest.mark.asyncio
    async def test_transcribe_error_propagates(self, http_recorder):
        client, _ = http_recorder(lambda r: httpx.Response(402, text="insufficient credits"))
        adapter = DeepgramSTTAdapter(_config(), client=client)

        with pytest.raises(ProviderRequestError) as exc_info:
            await adapter.transcribe(audio_url="https://rec/1.wav")

        assert exc_info.value.status_code == 402


@pytest.mark.unit
class TestDeepgramStreaming:

    @pytest.mark.asyncio
    async def test_stream_transcribe_describes_session(self):
        adapter = DeepgramSTTAdapter(_config())
        callback = lambda transcript: None  # noqa: E731

        session = await adapter.stream_transcribe(on_transcript=callback, language="en-US")

        url = urlsplit(session.ws_url)
        params = {k: v[0] for k, v in parse_qs(url.query).items()}
        assert f"{url.scheme}://{url.netloc}{url.path}" == "wss://api.deepgram.com/v1/listen"
        assert params == {
            "model": "nova-2",
            "language": "en-US",
            "smart_format": "true",
            "punctuate": "true",
            "interim_results": "true",
            "endpointing": "300",
            "vad_events": "true",
        }
        assert session.headers == {"Authorization": "Token dg_secret"}
        assert session.on_transcript is callback
        assert session.provider == "deepgram"
        assert session.parse_message is parse_deepgram_message

    def test_parse_results_frame(self):
        frame = json.dumps({
            "type": "Results",
            "is_final": True,
            "channel": {"alternatives": [{"transcript": "yes please", "confidence": 0.91, "words": [{"word": "yes"}]}]},
        })

        transcript = parse_deepgram_message(frame)

        assert transcript.text == "yes please"
        assert transcript.is_final is True
        assert transcript.confidence == 0.91
        assert transcript.words == [{"word": "yes"}]

    def test_parse_interim_bytes_frame(self):
        frame = json.dumps({"type": "Results", "channel": {"alternatives": [{"transcript": "ye"}]}}).encode()

        transcript = parse_deepgram_message(frame)

        assert transcript.text == "ye"
        assert transcript.is_final is False
        assert transcript.confidence == 0.0

    @pytest.mark.parametrize("frame", [
        json.dumps({"type": "Metadata", "request_id": "abc"}),
        json.dumps({"type": "SpeechStarted"}),
        json.dumps({"type": "UtteranceEnd"}),
        "{not json",
        b"\xff\xfe\x00",
        json.dumps(["Results"]),
    ])
    def test_parse_non_results_returns_none(self, frame):
        assert parse_deepgram_message(frame) is None
