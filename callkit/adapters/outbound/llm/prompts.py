"""
Prompt templates for the structured LLM operations.

Each prompt asks for a bare JSON object; replies are parsed by
structured_output, which tolerates prose and markdown fences.
"""
import json
from typing import Optional

SCRIPT_SYSTEM_PROMPT = "You are an expert sales script writer. Always respond with valid JSON."
NEGOTIATION_SYSTEM_PROMPT = "You are an expert rate negotiator. Always respond with valid JSON."
SUMMARY_SYSTEM_PROMPT = "You are a professional meeting note summarizer. Always respond with valid JSON."

SUMMARY_MAX_CHARS = 8000


def build_script_prompt(
    purpose: str,
    industry: Optional[str] = None,
    rate_range: Optional[dict] = None,
    context: str = "",
) -> str:
    lines = [
        "Generate a professional outbound sales call script.",
        "",
        f"Purpose: {purpose}",
        f"Industry: {industry or 'General'}",
    ]
    if rate_range:
        lines.append(
            f"Rate Range: ${rate_range.get('min')} - ${rate_range.get('max')} "
            f"(target: ${rate_range.get('target')} {rate_range.get('currency') or 'USD'})"
        )
    if context:
        lines.append(f"Additional Context: {context}")
    lines += [
        "",
        "Return a JSON object with:",
        "- openingLine: A warm, professional greeting (1-2 sentences)",
        "- talkingPoints: Array of { topic, script, fallback } (3-5 points)",
        "- objectionHandlers: Array of { objection, response } (3-5 common objections)",
        "- closingStrategy: How to close the deal (1-2 paragraphs)",
        "",
        "Return ONLY valid JSON, no markdown.",
    ]
    return "\n".join(lines)


def build_negotiation_prompt(
    lead_data: dict,
    current_rate: float,
    target_rate: float,
    history: Optional[list] = None,
    market_context: str = "",
) -> str:
    lead_data = lead_data or {}
    lines = [
        "You are a rate negotiation strategist. Analyze and suggest the best approach.",
        "",
        f"Lead: {lead_data.get('name', 'Unknown')} ({lead_data.get('industry') or 'unknown industry'})",
        f"Current Proposed Rate: ${current_rate}",
        f"Our Target Rate: ${target_rate}",
    ]
    if history:
        lines.append(f"Negotiation History: {json.dumps(history, default=str)}")
    if market_context:
        lines.append(f"Market Context: {market_context}")
    lines += [
        "",
        "Return a JSON object with:",
        "- strategy: Brief strategy description",
        "- suggestedRate: Number - the rate to propose",
        "- reasoning: Why this rate works",
        "- counterArguments: Array of strings - arguments to support our rate",
        "- walkAwayPoint: Number - the minimum acceptable rate",
        "- confidence: Number 0-100 - confidence in closing",
        "",
        "Return ONLY valid JSON.",
    ]
    return "\n".join(lines)


def build_summary_prompt(text: str, summary_type: str = "call", extract_action_items: bool = True) -> str:
    lines = [
        f"Summarize this {summary_type} transcription/content concisely.",
        "",
        "Content:",
        (text or "")[:SUMMARY_MAX_CHARS],
        "",
        "Return a JSON object with:",
        "- summary: 2-3 sentence summary of key points",
        "- sentiment: 'positive', 'neutral', or 'negative'",
    ]
    if extract_action_items:
        lines += [
            "- actionItems: Array of { task, assignee, deadline } (if any mentioned)",
            "- decisions: Array of strings - key decisions made",
        ]
    lines += ["", "Return ONLY valid JSON."]
    return "\n".join(lines)
