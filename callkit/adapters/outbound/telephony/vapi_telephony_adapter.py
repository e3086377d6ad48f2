"""
Vapi AI Telephony Adapter.

Outbound AI calling via the Vapi API. Vapi runs the whole conversation
(STT + LLM + TTS); the assistant is configured from the opaque
assistant_config forwarded by the caller. SMS goes through Twilio since
Vapi has no SMS API.
"""
import asyncio
import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

import httpx

from callkit.core.decorators import track_latency
from callkit.core.exceptions import ProviderRequestError
from callkit.domain.ports import (
    BatchCallItem,
    BatchCallResult,
    CallActionResult,
    CallHandle,
    CallStatus,
    PhoneNumber,
    SmsReceipt,
    TelephonyPort,
    WebhookEvent,
)
from callkit.domain.ports.provider_config import TelephonyProviderConfig

from ..http_adapter import HTTPProviderAdapter
from .twilio_telephony_adapter import TwilioTelephonyAdapter

logger = logging.getLogger(__name__)

VAPI_BASE_URL = "https://api.vapi.ai"

# Named voice presets: callers may pass a preset name or a raw ElevenLabs voice ID
VOICE_PRESETS = {
    "adam": "pNInz6obpgDQGcFmaJgB",
    "josh": "TxGEqnHWrfWFTfGW9XjX",
    "rachel": "21m00Tcm4TlvDq8ikWAM",
    "arnold": "VR6AewLTigWG4xSOukaG",
    "bella": "EXAVITQu4vr4xnSDxMaL",
}

DEFAULT_END_CALL_PHRASES = [
    "goodbye",
    "bye",
    "not interested",
    "stop calling",
    "don't call again",
    "remove my number",
    "take me off the list",
]

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional sales agent. Keep responses short (1-2 sentences). "
    "Be friendly and conversational."
)

WEBHOOK_STATUS_MAP = {
    "call-started": "ringing",
    "status-update": "in-progress",
    "speech-update": "in-progress",
    "transcript": "in-progress",
    "tool-calls": "in-progress",
    "end-of-call-report": "completed",
    "hang": "completed",
    "call-failed": "failed",
}

CALL_STATUS_MAP = {
    "queued": "queued",
    "ringing": "ringing",
    "in-progress": "in-progress",
    "forwarding": "in-progress",
    "ended": "completed",
}


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _call_duration(call: dict) -> Optional[int]:
    started, ended = call.get("startedAt"), call.get("endedAt")
    if not (started and ended):
        return None
    try:
        return round((_parse_timestamp(ended) - _parse_timestamp(started)).total_seconds())
    except ValueError:
        return None


class VapiTelephonyAdapter(HTTPProviderAdapter, TelephonyPort):
    """Vapi adapter implementing TelephonyPort (niche-agnostic: all content comes from assistant_config)."""

    provider_name = "vapi"
    DEFAULT_BATCH_DELAY_MS = 15000

    def __init__(self, config: TelephonyProviderConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.api_key = config.api_key
        self.phone_number_id = config.phone_number_id
        self.webhook_base_url = config.webhook_base_url.rstrip("/")
        self.webhook_secret = config.webhook_secret or None
        self.default_voice_id = config.default_voice_id

        if not self.api_key:
            logger.warning("⚠️ [Vapi] API Key missing. Adapter may fail.")

        super().__init__(config.base_url or VAPI_BASE_URL, timeout=config.timeout, client=client)
        self._sms: Optional[TwilioTelephonyAdapter] = None

    def _auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_assistant(self, assistant_config: dict) -> dict:
        """Translate the opaque assistant_config into Vapi's assistant payload."""
        raw_voice = assistant_config.get("voiceId") or self.default_voice_id or "adam"
        voice_id = VOICE_PRESETS.get(raw_voice, raw_voice)

        agent_name = assistant_config.get("agentName") or "there"
        business_name = assistant_config.get("businessName") or ""
        contact_name = assistant_config.get("contractorName") or "there"
        first_message = assistant_config.get("openingLine") or (
            f"Hi {contact_name}, this is {agent_name}"
            f"{' from ' + business_name if business_name else ''}. How are you doing today?"
        )

        assistant = {
            "firstMessage": first_message,
            "model": {
                "provider": assistant_config.get("llmProvider") or "openai",
                "model": assistant_config.get("llmModel") or "gpt-4o-mini",
                "messages": [
                    {"role": "system", "content": assistant_config.get("systemPrompt") or DEFAULT_SYSTEM_PROMPT},
                ],
                "temperature": assistant_config.get("temperature", 0.7),
                "maxTokens": assistant_config.get("maxTokens", 150),
            },
            "voice": {
                "provider": "11labs",
                "voiceId": voice_id,
                "stability": assistant_config.get("voiceStability", 0.5),
                "similarityBoost": assistant_config.get("voiceSimilarity", 0.75),
            },
            "transcriber": {
                "provider": "deepgram",
                "model": "nova-2",
                "language": assistant_config.get("language") or "en-US",
            },
            "endCallFunctionEnabled": True,
            "endCallMessage": assistant_config.get("endCallMessage")
            or "Thanks for your time! Have a great day. Goodbye.",
            "endCallPhrases": assistant_config.get("endCallPhrases") or DEFAULT_END_CALL_PHRASES,
            "silenceTimeoutSeconds": assistant_config.get("silenceTimeout", 15),
            "maxDurationSeconds": assistant_config.get("maxDuration", 300),
            "backgroundSound": "off",
            "serverUrl": f"{self.webhook_base_url}/api/calls/vapi/webhook",
        }
        if self.webhook_secret:
            assistant["serverUrlSecret"] = self.webhook_secret
        return assistant

    @track_latency("vapi_telephony")
    async def initiate_call(
        self,
        phone_number: str,
        lead_id: Any,
        script_id: Optional[str] = None,
        assistant_config: Optional[dict] = None,
    ) -> CallHandle:
        payload = {
            "phoneNumberId": self.phone_number_id,
            "customer": {"number": phone_number},
            "assistant": self.build_assistant(assistant_config or {}),
            "metadata": {"leadId": lead_id, "scriptId": script_id},
        }

        result = await self._request_json("POST", "/call/phone", json=payload, required=("id",))
        logger.info(f"📞 [Vapi] Call placed lead={lead_id} id={result.get('id')}")

        return CallHandle(
            call_id=result["id"],
            provider_call_id=result["id"],
            status=result.get("status") or "queued",
        )

    async def batch_call(
        self,
        leads: list[dict],
        script_id: Optional[str] = None,
        delay_ms: Optional[int] = None,
        assistant_config: Optional[dict] = None,
    ) -> BatchCallResult:
        delay_ms = self.DEFAULT_BATCH_DELAY_MS if delay_ms is None else delay_ms
        results: list[BatchCallItem] = []

        for i, lead in enumerate(leads):
            contact = (lead.get("contactPerson") or "").split(" ")[0] or "there"
            try:
                handle = await self.initiate_call(
                    phone_number=lead.get("phone"),
                    lead_id=lead.get("id"),
                    script_id=script_id,
                    assistant_config={**(assistant_config or {}), "contractorName": contact},
                )
                results.append(BatchCallItem(
                    lead_id=lead.get("id"),
                    success=True,
                    call_id=handle.call_id,
                    provider_call_id=handle.provider_call_id,
                    status=handle.status,
                ))
                if i < len(leads) - 1 and delay_ms > 0:
                    await asyncio.sleep(delay_ms / 1000)
            except Exception as e:
                logger.warning(f"⚠️ [Vapi] Batch call failed for lead {lead.get('id')}: {e}")
                results.append(BatchCallItem(lead_id=lead.get("id"), success=False, error=str(e)))

        queued = sum(1 for r in results if r.success)
        return BatchCallResult(
            batch_id=f"batch_{int(time.time() * 1000)}",
            queued=queued,
            failed=len(results) - queued,
            results=results,
        )

    async def get_call_status(self, provider_call_id: str) -> CallStatus:
        result = await self._request_json("GET", f"/call/{provider_call_id}")
        vapi_status = result.get("status")
        return CallStatus(
            status=CALL_STATUS_MAP.get(vapi_status, vapi_status or "unknown"),
            duration=_call_duration(result),
            recording_url=result.get("recordingUrl"),
            transcript=result.get("transcript"),
            summary=result.get("summary"),
            cost=result.get("cost"),
        )

    async def end_call(self, provider_call_id: str) -> CallActionResult:
        try:
            await self._send("DELETE", f"/call/{provider_call_id}")
            return CallActionResult(success=True)
        except ProviderRequestError as e:
            logger.warning(f"⚠️ [Vapi] end_call failed for {provider_call_id}: {e}")
            return CallActionResult(success=False, error=str(e))

    async def handle_webhook(self, payload: dict) -> WebhookEvent:
        message = payload.get("message") or {}
        call = message.get("call") or {}
        event_type = message.get("type")
        return WebhookEvent(
            type=event_type,
            provider_call_id=call.get("id"),
            status=WEBHOOK_STATUS_MAP.get(event_type, "unknown"),
            duration=call.get("duration"),
            recording_url=message.get("recordingUrl"),
            transcript=message.get("transcript"),
            summary=message.get("summary"),
            ended_reason=message.get("endedReason"),
            metadata=call.get("metadata") or {},
        )

    async def get_phone_numbers(self) -> list[PhoneNumber]:
        result = await self._request_json("GET", "/phone-number")
        return [
            PhoneNumber(
                id=p.get("id"),
                number=p.get("number"),
                capabilities=p.get("capabilities") or ["voice"],
                friendly_name=p.get("name"),
            )
            for p in result or []
        ]

    async def send_sms(self, to: str, body: str) -> SmsReceipt:
        if self._sms is None:
            self._sms = TwilioTelephonyAdapter(replace(self.config, base_url=None), client=self._client)
        return await self._sms.send_sms(to, body)
