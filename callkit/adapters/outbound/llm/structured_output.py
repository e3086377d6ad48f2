"""
Parsing of structured (JSON) LLM replies.

Models sometimes answer with prose or wrap JSON in markdown fences. Every
parser here returns a contract-shaped result: on a reply that is not a JSON
object it falls back to a degraded value built from the raw text.
"""
import json
import logging
import re
from typing import Any, Optional

from callkit.domain.ports import CallScript, RateStrategy, Summary

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)

OPENING_LINE_MAX_CHARS = 200
DEFAULT_CONFIDENCE = 50
SENTIMENTS = {"positive", "neutral", "negative"}


def extract_json_object(raw: Optional[str]) -> Optional[dict]:
    """Return the JSON object in raw, or None if raw is not a JSON object."""
    if not raw:
        return None
    text = raw.strip()
    fenced = FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _pick(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.replace("$", "").replace(",", "").strip())
        except ValueError:
            return default
    return default


def script_from_reply(raw: str) -> CallScript:
    data = extract_json_object(raw)
    if data is None:
        logger.warning("⚠️ [LLM] Script reply is not valid JSON. Returning degraded script.")
        raw = raw or ""
        return CallScript(
            opening_line=raw[:OPENING_LINE_MAX_CHARS],
            talking_points=[],
            objection_handlers=[],
            closing_strategy=raw,
        )
    return CallScript(
        opening_line=_as_text(_pick(data, "openingLine", "opening_line")),
        talking_points=_as_list(_pick(data, "talkingPoints", "talking_points")),
        objection_handlers=_as_list(_pick(data, "objectionHandlers", "objection_handlers")),
        closing_strategy=_as_text(_pick(data, "closingStrategy", "closing_strategy")),
    )


def rate_strategy_from_reply(raw: str, target_rate: float) -> RateStrategy:
    data = extract_json_object(raw)
    if data is None:
        logger.warning("⚠️ [LLM] Negotiation reply is not valid JSON. Returning degraded strategy.")
        return RateStrategy(
            strategy=raw or "",
            suggested_rate=target_rate,
            reasoning="",
            counter_arguments=[],
            walk_away_point=None,
            confidence=DEFAULT_CONFIDENCE,
        )
    return RateStrategy(
        strategy=_as_text(_pick(data, "strategy")),
        suggested_rate=_as_number(_pick(data, "suggestedRate", "suggested_rate"), target_rate),
        reasoning=_as_text(_pick(data, "reasoning")),
        counter_arguments=[_as_text(a) for a in _as_list(_pick(data, "counterArguments", "counter_arguments"))],
        walk_away_point=_as_number(_pick(data, "walkAwayPoint", "walk_away_point")),
        confidence=_as_number(_pick(data, "confidence"), DEFAULT_CONFIDENCE),
    )


def summary_from_reply(raw: str) -> Summary:
    data = extract_json_object(raw)
    if data is None:
        logger.warning("⚠️ [LLM] Summary reply is not valid JSON. Returning degraded summary.")
        return Summary(summary=raw or "", sentiment="neutral", action_items=[], decisions=[])

    sentiment = _as_text(_pick(data, "sentiment"), "neutral").lower()
    return Summary(
        summary=_as_text(_pick(data, "summary")),
        sentiment=sentiment if sentiment in SENTIMENTS else "neutral",
        action_items=_as_list(_pick(data, "actionItems", "action_items")),
        decisions=_as_list(_pick(data, "decisions")),
    )
