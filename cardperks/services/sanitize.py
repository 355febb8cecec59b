"""Text cleanup applied before anything is embedded in a prompt."""

import re

# Every ASCII control character except the newline.
CONTROL_CHARS = re.compile(r"[\x00-\x09\x0b-\x1f\x7f]")
EXCESS_NEWLINES = re.compile(r"\n{3,}")


def sanitize_text(text: str) -> str:
    if not text:
        return ""
    cleaned = CONTROL_CHARS.sub("", text)
    cleaned = EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()
