"""Plain-language benefit summaries."""

from typing import Dict, List, Optional

from cardperks.llm.gateway import CreditsExhaustedError, GatewayClient, GatewayError, RateLimitedError

LANGUAGE_INSTRUCTIONS = {
    "en": "Respond in simple, clear English.",
    "ta": "Respond in simple, natural Tamil (தமிழ்). Use everyday words.",
}

SYSTEM_PROMPT = """You are a helpful financial advisor who simplifies complex terms and conditions into easy-to-understand summaries.

Rules:
- Keep summaries to 1-2 sentences maximum
- Be factual - never make up benefits that aren't mentioned
- Use friendly, conversational tone
- Focus on what the user actually gets
- {language_instruction}"""


def fallback_summary(tnc: str) -> str:
    """First sentence of the terms, terminator included."""
    return tnc.split(".", 1)[0] + "."


def build_summary_messages(benefit_name: str, tnc: str, language: str) -> List[Dict[str, str]]:
    instruction = LANGUAGE_INSTRUCTIONS.get(language, LANGUAGE_INSTRUCTIONS["en"])
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(language_instruction=instruction)},
        {
            "role": "user",
            "content": (
                "Simplify this credit card benefit for a regular user:\n\n"
                f"Benefit: {benefit_name}\n\n"
                f"Terms & Conditions:\n{tnc}\n\n"
                "Provide a 1-2 sentence summary that highlights what the cardholder actually gets."
            ),
        },
    ]


def summarize_benefit(
    client: Optional[GatewayClient], benefit_name: str, tnc: str, language: str = "en"
) -> str:
    """Summarize sanitized terms text.

    Rate-limit and credit errors propagate; every other failure degrades to
    the first sentence of the terms.
    """
    if client is None:
        return fallback_summary(tnc)
    try:
        summary = client.complete(build_summary_messages(benefit_name, tnc, language), max_tokens=150)
    except (RateLimitedError, CreditsExhaustedError):
        raise
    except GatewayError:
        return fallback_summary(tnc)
    return (summary or "").strip() or fallback_summary(tnc)
