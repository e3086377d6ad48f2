"""
Puerto (Interface) para proveedores de Large Language Models (LLM).

Define el contrato para integración de modelos de lenguaje como
OpenAI o Groq, incluyendo las operaciones de salida estructurada
(guiones, negociación de tarifas, resúmenes).
"""

from dataclasses import dataclass, field
from typing import Optional

from .base import Capability, CapabilityPort


@dataclass
class CompletionResult:
    content: str
    tool_calls: list = field(default_factory=list)
    usage: dict = field(default_factory=dict)


@dataclass
class CallScript:
    """Guion de llamada. talking_points: {topic, script, fallback}; objection_handlers: {objection, response}."""
    opening_line: str
    talking_points: list[dict] = field(default_factory=list)
    objection_handlers: list[dict] = field(default_factory=list)
    closing_strategy: str = ""


@dataclass
class RateStrategy:
    strategy: str
    suggested_rate: Optional[float]
    reasoning: str = ""
    counter_arguments: list[str] = field(default_factory=list)
    walk_away_point: Optional[float] = None
    confidence: float = 50


@dataclass
class Summary:
    summary: str
    sentiment: str = "neutral"
    action_items: list[dict] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)


class LLMPort(CapabilityPort):
    """
    Puerto para proveedores de LLM.

    Implementaciones: OpenAILLMAdapter, GroqLLMAdapter, MockLLMAdapter

    Structured operations never raise on a malformed model reply; they
    return a degraded result with the same shape.
    """

    capability = Capability.LLM
    OPERATIONS = ("complete", "generate_script", "negotiate_rate", "summarize")

    async def complete(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        tools: Optional[list] = None,
    ) -> CompletionResult:
        """
        Genera una respuesta de chat.

        Args:
            messages: [{"role": ..., "content": ...}]
            model: Modelo (default del proveedor si es None)
            temperature: Temperatura de muestreo
            max_tokens: Límite de tokens de salida
            tools: Definiciones de herramientas (function calling)

        Raises:
            ProviderRequestError: Si el proveedor responde con error
        """
        raise self._unimplemented("complete")

    async def generate_script(
        self,
        purpose: str,
        industry: Optional[str] = None,
        rate_range: Optional[dict] = None,
        context: str = "",
    ) -> CallScript:
        """Genera un guion de llamada de ventas."""
        raise self._unimplemented("generate_script")

    async def negotiate_rate(
        self,
        lead_data: dict,
        current_rate: float,
        target_rate: float,
        history: Optional[list] = None,
        market_context: str = "",
    ) -> RateStrategy:
        """Genera una estrategia de negociación de tarifa."""
        raise self._unimplemented("negotiate_rate")

    async def summarize(
        self,
        text: str,
        summary_type: str = "call",
        extract_action_items: bool = True,
    ) -> Summary:
        """Resume una transcripción o notas."""
        raise self._unimplemented("summarize")
