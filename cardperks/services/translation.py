"""English <-> Tamil translation that never blocks the caller."""

from typing import Dict, List, Optional

from cardperks.llm.gateway import GatewayClient, GatewayError

LANGUAGE_NAMES = {"en": "English", "ta": "Tamil (தமிழ்)"}

SYSTEM_PROMPT = """You are a professional translator specializing in {source} to {target} translation.

Rules:
- Translate naturally and conversationally
- Use simple, everyday vocabulary
- Preserve the original meaning and tone
- For Tamil: Use தமிழ் script, not transliteration
- Only output the translation, nothing else"""


def build_translation_messages(text: str, target_language: str) -> List[Dict[str, str]]:
    target = LANGUAGE_NAMES[target_language]
    source = "English" if target_language == "ta" else "Tamil"
    return [
        {"role": "system", "content": SYSTEM_PROMPT.format(source=source, target=target)},
        {"role": "user", "content": f"Translate this to {target}:\n\n{text}"},
    ]


def translate_text(client: Optional[GatewayClient], text: str, target_language: str = "ta") -> str:
    if client is None:
        return text
    try:
        translated = client.complete(build_translation_messages(text, target_language), max_tokens=500)
    except GatewayError:
        return text
    return (translated or "").strip() or text
