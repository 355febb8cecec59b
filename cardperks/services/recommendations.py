"""Lifestyle-based top-3 benefit recommendations.

Model output goes through two independent stages:

1. `parse_model_recommendations` pulls the first JSON object out of free
   text and returns whatever recommendation entries it can find.
2. `repair_recommendations` keeps only entries that reference benefits from
   the request, renumbers them, and backfills from unused benefits so the
   response always holds min(len(benefits), 3) distinct picks.

Any gateway failure feeds stage 2 an empty candidate list.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from cardperks.llm.gateway import GatewayClient, GatewayError
from cardperks.services.sanitize import sanitize_text

TOP_N = 3
TNC_PREVIEW_CHARS = 150

LIFESTYLE_CONTEXT: Dict[str, str] = {
    "student": "budget-conscious, values discounts and shopping benefits, may travel for studies",
    "professional": (
        "busy schedule, values convenience, travel frequently for work, "
        "appreciates concierge services"
    ),
    "traveler": "travels often for leisure, values airport lounges, travel insurance, and hotel benefits",
    "family": (
        "values protection benefits, shopping discounts, family experiences, "
        "and security features"
    ),
}

LANGUAGE_INSTRUCTIONS = {
    "en": "Provide reasons in simple, clear English.",
    "ta": "Provide reasons in simple, natural Tamil (தமிழ்).",
}

SYSTEM_PROMPT = """You are a personal financial advisor helping credit card users discover their most valuable benefits based on their lifestyle.

Rules:
- Select exactly 3 benefits that best match the user's lifestyle
- Rank them 1-3 (1 being most relevant)
- Provide a brief, personalized reason for each (1-2 sentences)
- Be factual - only mention benefits that actually exist
- {language_instruction}

Output format (JSON):
{{
  "recommendations": [
    {{ "benefitId": "id", "rank": 1, "reason": "..." }},
    {{ "benefitId": "id", "rank": 2, "reason": "..." }},
    {{ "benefitId": "id", "rank": 3, "reason": "..." }}
  ]
}}"""


@dataclass(frozen=True)
class BenefitSummary:
    id: str
    name: str
    category: str
    tnc: str


@dataclass(frozen=True)
class Recommendation:
    benefit_id: str
    rank: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"benefitId": self.benefit_id, "rank": self.rank, "reason": self.reason}


def template_reason(benefit: BenefitSummary, lifestyle: str) -> str:
    category = sanitize_text(benefit.category).lower() or "card"
    return f"This {category} benefit suits your {lifestyle} needs."


def format_benefit_list(benefits: Sequence[BenefitSummary]) -> str:
    entries = []
    for i, b in enumerate(benefits, start=1):
        preview = sanitize_text(b.tnc)[:TNC_PREVIEW_CHARS]
        entries.append(
            f"{i}. ID: {b.id}\n"
            f"   Name: {sanitize_text(b.name)}\n"
            f"   Category: {sanitize_text(b.category)}\n"
            f"   Summary: {preview}..."
        )
    return "\n\n".join(entries)


def build_recommendation_messages(
    lifestyle: str,
    benefits: Sequence[BenefitSummary],
    location: Optional[str] = None,
    language: str = "en",
) -> List[Dict[str, str]]:
    instruction = LANGUAGE_INSTRUCTIONS.get(language, LANGUAGE_INSTRUCTIONS["en"])
    profile = [f"- Lifestyle: {lifestyle} ({LIFESTYLE_CONTEXT[lifestyle]})"]
    if location:
        profile.append(f"- Location: {location}")
    user_prompt = (
        "User Profile:\n"
        + "\n".join(profile)
        + "\n\nAvailable Benefits:\n"
        + format_benefit_list(benefits)
        + "\n\nSelect the top 3 most relevant benefits for this user and explain why each matters to them."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(language_instruction=instruction)},
        {"role": "user", "content": user_prompt},
    ]


def _first_json_object(text: str) -> Optional[Dict[str, Any]]:
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except ValueError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def parse_model_recommendations(text: Optional[str]) -> List[Dict[str, Any]]:
    """Tolerant stage: never raises, returns raw recommendation dicts."""
    if not text:
        return []
    parsed = _first_json_object(text)
    if parsed is None:
        return []
    entries = parsed.get("recommendations")
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def _rank_key(entry: Dict[str, Any]) -> float:
    rank = entry.get("rank")
    if isinstance(rank, bool):
        return float("inf")
    try:
        value = float(rank)
    except (TypeError, ValueError, OverflowError):
        return float("inf")
    return value if value == value else float("inf")


def repair_recommendations(
    candidates: Sequence[Dict[str, Any]],
    benefits: Sequence[BenefitSummary],
    lifestyle: str,
) -> List[Recommendation]:
    """Strict stage: referential integrity, unique ranks 1..k, backfill."""
    by_id = {b.id: b for b in benefits}
    used = set()
    valid: List[Dict[str, Any]] = []
    for entry in sorted(candidates, key=_rank_key):
        benefit_id = entry.get("benefitId")
        if not isinstance(benefit_id, str) or benefit_id not in by_id or benefit_id in used:
            continue
        used.add(benefit_id)
        valid.append(entry)
        if len(valid) == TOP_N:
            break

    results: List[Recommendation] = []
    for entry in valid:
        reason = entry.get("reason")
        reason = reason.strip() if isinstance(reason, str) else ""
        benefit = by_id[entry["benefitId"]]
        results.append(
            Recommendation(
                benefit_id=benefit.id,
                rank=len(results) + 1,
                reason=reason or template_reason(benefit, lifestyle),
            )
        )

    for benefit in benefits:
        if len(results) >= TOP_N:
            break
        if benefit.id in used:
            continue
        used.add(benefit.id)
        results.append(
            Recommendation(
                benefit_id=benefit.id,
                rank=len(results) + 1,
                reason=template_reason(benefit, lifestyle),
            )
        )
    return results


def recommend_benefits(
    client: Optional[GatewayClient],
    lifestyle: str,
    benefits: Sequence[BenefitSummary],
    location: Optional[str] = None,
    language: str = "en",
) -> List[Recommendation]:
    raw: Optional[str] = None
    if client is not None:
        messages = build_recommendation_messages(lifestyle, benefits, location, language)
        try:
            raw = client.complete(messages, max_tokens=500)
        except GatewayError:
            raw = None
    return repair_recommendations(parse_model_recommendations(raw), benefits, lifestyle)
