"""Mock LLM Adapter - canned replies, no network."""
import logging
from typing import Any, Optional

from callkit.domain.ports import CallScript, CompletionResult, LLMPort, RateStrategy, Summary

logger = logging.getLogger(__name__)

MOCK_USAGE = {"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150}


class MockLLMAdapter(LLMPort):
    """Deterministic LLM for development and tests."""

    provider_name = "mock"

    def __init__(self, config: Any = None):
        self.config = config

    async def complete(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        tools: Optional[list] = None,
    ) -> CompletionResult:
        last = (messages[-1].get("content") or "") if messages else ""
        return CompletionResult(
            content=f'[Mock LLM Response] Processed: "{last[:50]}..."',
            tool_calls=[],
            usage=dict(MOCK_USAGE),
        )

    async def generate_script(
        self,
        purpose: str,
        industry: Optional[str] = None,
        rate_range: Optional[dict] = None,
        context: str = "",
    ) -> CallScript:
        return CallScript(
            opening_line=(
                f"Hi there! I'm calling about our {industry or 'business'} services. "
                f"Do you have a quick moment?"
            ),
            talking_points=[
                {
                    "topic": "Introduction",
                    "script": "Brief company introduction and value prop.",
                    "fallback": "Can I send you more info via email?",
                },
                {
                    "topic": "Pain Points",
                    "script": "What challenges are you facing with your current solution?",
                    "fallback": "Many in your industry struggle with...",
                },
                {
                    "topic": "Our Solution",
                    "script": "Here's how we can help...",
                    "fallback": "Would a quick demo be helpful?",
                },
            ],
            objection_handlers=[
                {
                    "objection": "Too expensive",
                    "response": "I understand budget concerns. Our ROI typically covers the cost within 3 months.",
                },
                {
                    "objection": "Not interested",
                    "response": "No problem! Could I send a brief case study relevant to your industry?",
                },
                {
                    "objection": "Already have a solution",
                    "response": "That's great! Many clients use us alongside their current tools for enhanced results.",
                },
            ],
            closing_strategy=(
                f"Based on what you've shared, I'd recommend our {purpose or 'standard'} package. "
                f"Would you like to schedule a detailed walkthrough this week?"
            ),
        )

    async def negotiate_rate(
        self,
        lead_data: dict,
        current_rate: float,
        target_rate: float,
        history: Optional[list] = None,
        market_context: str = "",
    ) -> RateStrategy:
        return RateStrategy(
            strategy="Anchor high, concede gradually with value-adds",
            suggested_rate=round(target_rate * 1.1, 2),
            reasoning="Starting slightly above target allows negotiation room",
            counter_arguments=[
                "Industry benchmark supports this rate",
                "Includes premium support",
                "ROI-positive within 60 days",
            ],
            walk_away_point=round(target_rate * 0.85, 2),
            confidence=72,
        )

    async def summarize(
        self,
        text: str,
        summary_type: str = "call",
        extract_action_items: bool = True,
    ) -> Summary:
        action_items = []
        if extract_action_items:
            action_items = [{"task": "Send proposal", "assignee": "Sales Rep", "deadline": "This week"}]
        return Summary(
            summary=(
                f"[Mock Summary] {summary_type} covered key topics. "
                f"Client showed moderate interest. Follow-up recommended."
            ),
            sentiment="positive",
            action_items=action_items,
            decisions=["Client open to demo call", "Budget discussion in follow-up"],
        )
