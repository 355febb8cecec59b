"""Masked card number validation and formatting."""

import re
from typing import Optional

SEPARATORS = re.compile(r"[\s-]")
FULL_PAN = re.compile(r"^[0-9]{16}$")
MASK_CHARS = frozenset("*xX")


class CardInputError(ValueError):
    code = "invalid_card"
    message = "Invalid card input"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class FullCardNumberError(CardInputError):
    code = "full_card_number"
    message = (
        "For your security, never enter a full card number. "
        "Mask the middle digits, e.g. 4242-****-****-1234."
    )


class InvalidCardFormatError(CardInputError):
    code = "invalid_format"
    message = (
        "Invalid format. Show the first 4 digits and mask the rest with * or X, "
        "e.g. 4242-****-****-1234."
    )


def clean_card_input(raw: str) -> str:
    return SEPARATORS.sub("", raw or "")


def validate_masked_card(raw: str) -> str:
    """Return the cleaned card string or raise a CardInputError.

    A bare 16-digit number is a policy violation and is reported separately
    from an ordinary format problem.
    """
    cleaned = clean_card_input(raw)
    if FULL_PAN.match(cleaned):
        raise FullCardNumberError()
    bin_part = cleaned[:4]
    if len(bin_part) != 4 or not bin_part.isdigit() or not bin_part.isascii():
        raise InvalidCardFormatError()
    if not any(ch in MASK_CHARS for ch in cleaned[4:]):
        raise InvalidCardFormatError()
    return cleaned


def is_valid_masked_card(raw: str) -> bool:
    try:
        validate_masked_card(raw)
    except CardInputError:
        return False
    return True


def extract_bin(raw: str) -> str:
    return clean_card_input(raw)[:4]


def format_card_input(raw: str) -> str:
    cleaned = clean_card_input(raw)
    return "-".join(cleaned[i:i + 4] for i in range(0, len(cleaned), 4))


def sanitize_card_display(raw: str) -> str:
    """Never echo the raw input back: only the BIN survives."""
    cleaned = clean_card_input(raw)
    if len(cleaned) >= 4:
        return f"{cleaned[:4]}-****-****-****"
    return "****-****-****-****"
