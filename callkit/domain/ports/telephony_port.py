"""
Puerto (Interface) para proveedores de telefonía saliente.

Define el contrato para Vapi, Twilio y el mock de desarrollo.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .base import Capability, CapabilityPort


@dataclass
class CallHandle:
    """Result of placing an outbound call."""
    call_id: str
    provider_call_id: str
    status: str


@dataclass
class BatchCallItem:
    """Per-lead outcome inside a batch."""
    lead_id: Any
    success: bool
    call_id: Optional[str] = None
    provider_call_id: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None


@dataclass
class BatchCallResult:
    batch_id: str
    queued: int
    failed: int
    results: list[BatchCallItem] = field(default_factory=list)


@dataclass
class CallStatus:
    """Normalized call status. Unknown values are None."""
    status: str
    duration: Optional[int] = None
    recording_url: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    cost: Optional[float] = None


@dataclass
class CallActionResult:
    success: bool
    error: Optional[str] = None


@dataclass
class WebhookEvent:
    """Provider webhook normalized to one shape."""
    type: Optional[str]
    provider_call_id: Optional[str]
    status: str
    duration: Optional[int] = None
    recording_url: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    ended_reason: Optional[str] = None
    metadata: dict = field(default_factory=dict)


@dataclass
class PhoneNumber:
    id: str
    number: str
    capabilities: list[str] = field(default_factory=list)
    friendly_name: Optional[str] = None


@dataclass
class SmsReceipt:
    sid: str
    status: str


class TelephonyPort(CapabilityPort):
    """
    Puerto para proveedores de telefonía.

    Implementaciones: VapiTelephonyAdapter, TwilioTelephonyAdapter, MockTelephonyAdapter
    """

    capability = Capability.TELEPHONY
    OPERATIONS = (
        "initiate_call",
        "batch_call",
        "get_call_status",
        "end_call",
        "handle_webhook",
        "get_phone_numbers",
        "send_sms",
    )

    async def initiate_call(
        self,
        phone_number: str,
        lead_id: Any,
        script_id: Optional[str] = None,
        assistant_config: Optional[dict] = None,
    ) -> CallHandle:
        """
        Inicia una llamada saliente a un lead.

        Args:
            phone_number: Número destino (E.164)
            lead_id: Referencia opaca al lead
            script_id: Referencia opaca al guion
            assistant_config: Configuración del asistente, reenviada al proveedor

        Returns:
            CallHandle con el id del proveedor y estado inicial

        Raises:
            ProviderRequestError: Si el proveedor responde con error
        """
        raise self._unimplemented("initiate_call")

    async def batch_call(
        self,
        leads: list[dict],
        script_id: Optional[str] = None,
        delay_ms: Optional[int] = None,
        assistant_config: Optional[dict] = None,
    ) -> BatchCallResult:
        """
        Encola llamadas a varios leads ({"id", "phone"}).

        Per-lead failures are captured in the result, never raised.
        """
        raise self._unimplemented("batch_call")

    async def get_call_status(self, provider_call_id: str) -> CallStatus:
        """Obtiene el estado de una llamada por id del proveedor."""
        raise self._unimplemented("get_call_status")

    async def end_call(self, provider_call_id: str) -> CallActionResult:
        """Termina una llamada activa."""
        raise self._unimplemented("end_call")

    async def handle_webhook(self, payload: dict) -> WebhookEvent:
        """Normaliza un webhook del proveedor."""
        raise self._unimplemented("handle_webhook")

    async def get_phone_numbers(self) -> list[PhoneNumber]:
        """Lista números disponibles."""
        raise self._unimplemented("get_phone_numbers")

    async def send_sms(self, to: str, body: str) -> SmsReceipt:
        """Envía un SMS."""
        raise self._unimplemented("send_sms")
