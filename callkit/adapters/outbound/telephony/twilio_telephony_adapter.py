"""
Twilio Telephony Adapter.

Outbound calling and SMS via the Twilio REST API (form-encoded), using API key
authentication (Account SID + API key SID/secret).
"""
import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

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

logger = logging.getLogger(__name__)

TWILIO_API_ROOT = "https://api.twilio.com"

TWILIO_STATUS_MAP = {
    "queued": "queued",
    "initiated": "ringing",
    "ringing": "ringing",
    "in-progress": "in-progress",
    "completed": "completed",
    "failed": "failed",
    "busy": "busy",
    "no-answer": "no-answer",
    "canceled": "failed",
}

TERMINAL_REASONS = {"busy", "no-answer", "failed"}


def map_twilio_status(twilio_status: Optional[str]) -> str:
    return TWILIO_STATUS_MAP.get(twilio_status or "", "unknown")


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


class TwilioTelephonyAdapter(HTTPProviderAdapter, TelephonyPort):
    """Twilio REST adapter implementing TelephonyPort."""

    provider_name = "twilio"
    DEFAULT_BATCH_DELAY_MS = 5000

    def __init__(self, config: TelephonyProviderConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.account_sid = config.account_sid
        self.phone_number = config.phone_number
        self.webhook_base_url = config.webhook_base_url.rstrip("/")
        self._auth = (config.api_key_sid, config.api_key_secret)

        if not (config.account_sid and config.api_key_sid and config.api_key_secret):
            logger.warning("⚠️ [Twilio] Credentials missing. Adapter may fail.")

        base_url = config.base_url or f"{TWILIO_API_ROOT}/2010-04-01/Accounts/{self.account_sid}"
        super().__init__(base_url, timeout=config.timeout, client=client)

    async def _twilio(self, endpoint: str, method: str = "GET", form: Optional[dict] = None, **kwargs) -> dict:
        return await self._request_json(method, endpoint, auth=self._auth, data=form, **kwargs)

    @track_latency("twilio_telephony")
    async def initiate_call(
        self,
        phone_number: str,
        lead_id: Any,
        script_id: Optional[str] = None,
        assistant_config: Optional[dict] = None,
    ) -> CallHandle:
        assistant_config = assistant_config or {}
        twiml_endpoint = "stream" if assistant_config.get("useMediaStreams") is True else "twiml"
        twiml_url = (
            f"{self.webhook_base_url}/api/calls/twilio/{twiml_endpoint}"
            f"?leadId={quote(str(lead_id), safe='')}&scriptId={quote(str(script_id or ''), safe='')}"
        )

        call_params = {
            "To": phone_number,
            "From": self.phone_number,
            "Url": twiml_url,
            "StatusCallback": f"{self.webhook_base_url}/api/calls/twilio/status",
            "StatusCallbackEvent": "initiated ringing answered completed",
            "StatusCallbackMethod": "POST",
            "Record": "true",
            "RecordingStatusCallback": f"{self.webhook_base_url}/api/calls/twilio/recording",
            "RecordingStatusCallbackMethod": "POST",
        }

        # Answering Machine Detection
        if assistant_config.get("enableAMD", True) is not False:
            call_params.update({
                "MachineDetection": "DetectMessageEnd",
                "MachineDetectionTimeout": "5",
                "MachineDetectionSilenceTimeout": "3000",
                "AsyncAmd": "true",
                "AsyncAmdStatusCallback": f"{self.webhook_base_url}/api/calls/twilio/amd",
                "AsyncAmdStatusCallbackMethod": "POST",
            })

        result = await self._twilio("/Calls.json", "POST", call_params, required=("sid",))
        logger.info(f"📞 [Twilio] Call placed lead={lead_id} sid={result.get('sid')}")

        return CallHandle(
            call_id=result["sid"],
            provider_call_id=result["sid"],
            status=map_twilio_status(result.get("status")),
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
            try:
                handle = await self.initiate_call(
                    phone_number=lead.get("phone"),
                    lead_id=lead.get("id"),
                    script_id=script_id,
                    assistant_config=assistant_config,
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
                logger.warning(f"⚠️ [Twilio] Batch call failed for lead {lead.get('id')}: {e}")
                results.append(BatchCallItem(lead_id=lead.get("id"), success=False, error=str(e)))

        queued = sum(1 for r in results if r.success)
        return BatchCallResult(
            batch_id=f"batch_{int(time.time() * 1000)}",
            queued=queued,
            failed=len(results) - queued,
            results=results,
        )

    async def get_call_status(self, provider_call_id: str) -> CallStatus:
        result = await self._twilio(f"/Calls/{provider_call_id}.json")

        recording_url = None
        try:
            recordings = await self._twilio(f"/Calls/{provider_call_id}/Recordings.json")
            items = recordings.get("recordings") or []
            if items:
                recording_url = f"{TWILIO_API_ROOT}{items[0]['uri'].replace('.json', '.mp3')}"
        except ProviderRequestError as e:
            logger.debug(f"[Twilio] No recordings yet for {provider_call_id}: {e.status_code}")

        return CallStatus(
            status=map_twilio_status(result.get("status")),
            duration=_to_int(result.get("duration")),
            recording_url=recording_url,
            cost=_to_float(result.get("price")),
        )

    async def end_call(self, provider_call_id: str) -> CallActionResult:
        try:
            await self._twilio(f"/Calls/{provider_call_id}.json", "POST", {"Status": "completed"})
            return CallActionResult(success=True)
        except ProviderRequestError as e:
            logger.warning(f"⚠️ [Twilio] end_call failed for {provider_call_id}: {e}")
            return CallActionResult(success=False, error=str(e))

    async def handle_webhook(self, payload: dict) -> WebhookEvent:
        call_status = payload.get("CallStatus")
        return WebhookEvent(
            type="twilio-status",
            provider_call_id=payload.get("CallSid"),
            status=map_twilio_status(call_status),
            duration=_to_int(payload.get("CallDuration")),
            recording_url=payload.get("RecordingUrl") or None,
            ended_reason=call_status if call_status in TERMINAL_REASONS else None,
            metadata={
                "from": payload.get("From"),
                "to": payload.get("To"),
                "direction": payload.get("Direction"),
                "account_sid": payload.get("AccountSid"),
            },
        )

    async def get_phone_numbers(self) -> list[PhoneNumber]:
        result = await self._twilio("/IncomingPhoneNumbers.json")
        return [
            PhoneNumber(
                id=p.get("sid"),
                number=p.get("phone_number"),
                friendly_name=p.get("friendly_name"),
                capabilities=[k for k, v in (p.get("capabilities") or {}).items() if v],
            )
            for p in result.get("incoming_phone_numbers") or []
        ]

    @track_latency("twilio_sms")
    async def send_sms(self, to: str, body: str) -> SmsReceipt:
        result = await self._twilio("/Messages.json", "POST", {
            "To": to,
            "From": self.phone_number,
            "Body": body,
        })
        return SmsReceipt(sid=result.get("sid"), status=result.get("status"))
