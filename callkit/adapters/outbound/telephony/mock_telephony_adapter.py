"""
Mock Telephony Adapter - deterministic, no network.

Calls progress ringing -> in-progress -> completed, one step per
get_call_status() poll.
"""
import logging
from itertools import count
from typing import Any, Optional

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

logger = logging.getLogger(__name__)

STATUS_PROGRESSION = ("ringing", "in-progress", "completed")
MOCK_DURATION_SECONDS = 95


class MockTelephonyAdapter(TelephonyPort):
    """Simulated telephony provider for development and tests."""

    provider_name = "mock"

    def __init__(self, config: Any = None):
        self.config = config
        self._sequence = count(1)
        self._calls: dict[str, dict] = {}
        self.sent_sms: list[dict] = []

    async def initiate_call(
        self,
        phone_number: str,
        lead_id: Any,
        script_id: Optional[str] = None,
        assistant_config: Optional[dict] = None,
    ) -> CallHandle:
        call_id = f"mock_call_{next(self._sequence)}"
        self._calls[call_id] = {
            "step": 0,
            "status": STATUS_PROGRESSION[0],
            "phone_number": phone_number,
            "lead_id": lead_id,
            "script_id": script_id,
        }
        logger.info(f"📞 [MockTelephony] Simulated call {call_id} -> {phone_number}")
        return CallHandle(call_id=call_id, provider_call_id=call_id, status="ringing")

    async def batch_call(
        self,
        leads: list[dict],
        script_id: Optional[str] = None,
        delay_ms: Optional[int] = None,
        assistant_config: Optional[dict] = None,
    ) -> BatchCallResult:
        # delay_ms accepted for signature parity; mocks never sleep
        results = []
        for lead in leads:
            handle = await self.initiate_call(
                phone_number=lead.get("phone") or "555-0000",
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
        return BatchCallResult(
            batch_id=f"mock_batch_{next(self._sequence)}",
            queued=len(results),
            failed=0,
            results=results,
        )

    async def get_call_status(self, provider_call_id: str) -> CallStatus:
        call = self._calls.get(provider_call_id)
        if call is None:
            return CallStatus(status="not-found")

        if call["status"] != "completed":
            call["step"] = min(call["step"] + 1, len(STATUS_PROGRESSION) - 1)
            call["status"] = STATUS_PROGRESSION[call["step"]]

        if call["status"] != "completed":
            return CallStatus(status=call["status"])

        return CallStatus(
            status="completed",
            duration=MOCK_DURATION_SECONDS,
            recording_url=f"https://mock-recordings.test/{provider_call_id}.mp3",
            transcript="Mock transcript: The client expressed interest in our premium plan.",
            summary="Client is interested. Follow up in 2 days.",
        )

    async def end_call(self, provider_call_id: str) -> CallActionResult:
        call = self._calls.get(provider_call_id)
        if call:
            call["status"] = "completed"
            call["step"] = len(STATUS_PROGRESSION) - 1
        return CallActionResult(success=True)

    async def handle_webhook(self, payload: dict) -> WebhookEvent:
        return WebhookEvent(type="mock", provider_call_id="mock", status="completed", metadata={})

    async def get_phone_numbers(self) -> list[PhoneNumber]:
        return [PhoneNumber(id="mock_phone_1", number="+1-555-MOCK", capabilities=["voice"])]

    async def send_sms(self, to: str, body: str) -> SmsReceipt:
        sid = f"mock_sms_{next(self._sequence)}"
        self.sent_sms.append({"sid": sid, "to": to, "body": body})
        return SmsReceipt(sid=sid, status="sent")
