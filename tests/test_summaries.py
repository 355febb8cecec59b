import pytest

from cardperks.llm.gateway import CreditsExhaustedError, GatewayError, RateLimitedError
from cardperks.services.summaries import build_summary_messages, fallback_summary, summarize_benefit
from tests.conftest import FakeGateway

TNC = "Access to 1,000 lounges. Limited to 4 visits. Guests pay extra."


def test_fallback_is_first_sentence():
    assert fallback_summary(TNC) == "Access to 1,000 lounges."


def test_fallback_without_terminator_is_never_empty():
    assert fallback_summary("No terminator here") == "No terminator here."
    assert fallback_summary(".") == "."


def test_model_summary_is_returned():
    gateway = FakeGateway("You get lounge access four times a year.")
    assert summarize_benefit(gateway, "Lounges", TNC) == "You get lounge access four times a year."
    assert gateway.calls[0]["max_tokens"] == 150


@pytest.mark.parametrize("reply", [None, ""])
def test_empty_or_missing_output_falls_back(reply):
    assert summarize_benefit(FakeGateway(reply), "Lounges", TNC) == "Access to 1,000 lounges."


def test_no_client_falls_back():
    assert summarize_benefit(None, "Lounges", TNC) == "Access to 1,000 lounges."


def test_generic_gateway_error_falls_back():
    gateway = FakeGateway(GatewayError("bad gateway", status=502))
    assert summarize_benefit(gateway, "Lounges", TNC) == "Access to 1,000 lounges."


@pytest.mark.parametrize("error_cls", [RateLimitedError, CreditsExhaustedError])
def test_quota_errors_propagate(error_cls):
    with pytest.raises(error_cls):
        summarize_benefit(FakeGateway(error_cls("nope")), "Lounges", TNC)


def test_language_instruction():
    system = build_summary_messages("Lounges", TNC, "ta")[0]["content"]
    assert "Tamil" in system
    user = build_summary_messages("Lounges", TNC, "en")[1]["content"]
    assert "Benefit: Lounges" in user
    assert TNC in user
