import pytest

from cardperks.llm.gateway import CreditsExhaustedError, GatewayError, RateLimitedError
from cardperks.services.translation import build_translation_messages, translate_text
from tests.conftest import FakeGateway


def test_returns_translation():
    gateway = FakeGateway("  வணக்கம்  ")
    assert translate_text(gateway, "Hello", "ta") == "வணக்கம்"


@pytest.mark.parametrize(
    "reply", [None, "", GatewayError("down"), RateLimitedError("slow", 429), CreditsExhaustedError("pay", 402)]
)
def test_failures_return_input(reply):
    assert translate_text(FakeGateway(reply), "Hello there", "ta") == "Hello there"


def test_no_client_returns_input():
    assert translate_text(None, "Hello", "en") == "Hello"


def test_direction_follows_target():
    to_tamil = build_translation_messages("Hi", "ta")
    assert "English to Tamil" in to_tamil[0]["content"]
    to_english = build_translation_messages("வணக்கம்", "en")
    assert "Tamil to English" in to_english[0]["content"]
    assert to_english[1]["content"].endswith("வணக்கம்")
