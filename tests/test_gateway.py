import pytest
import requests

from cardperks.llm import gateway as gateway_module
from cardperks.llm.gateway import (
    CreditsExhaustedError,
    GatewayClient,
    GatewayError,
    RateLimitedError,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def install(response):
        def fake_post(url, json=None, headers=None, timeout=None):
            calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(gateway_module.requests, "post", fake_post)
        return calls

    return install


def test_returns_first_choice_content(captured):
    calls = captured(FakeResponse(payload={"choices": [{"message": {"content": "  hi there \n"}}]}))
    client = GatewayClient("key-1", base_url="https://gw.example/v1/", model="m-1", timeout=7)
    assert client.complete([{"role": "user", "content": "x"}], max_tokens=42) == "hi there"
    call = calls[0]
    assert call["url"] == "https://gw.example/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer key-1"
    assert call["json"] == {"model": "m-1", "messages": [{"role": "user", "content": "x"}], "max_tokens": 42}
    assert call["timeout"] == 7


def test_missing_key_skips_the_call(captured):
    calls = captured(FakeResponse(payload={}))
    client = GatewayClient(None)
    assert not client.configured
    assert client.complete([]) is None
    assert calls == []


@pytest.mark.parametrize(
    "status, error_cls",
    [(429, RateLimitedError), (402, CreditsExhaustedError), (500, GatewayError), (404, GatewayError)],
)
def test_status_codes_are_classified(captured, status, error_cls):
    captured(FakeResponse(status_code=status, text="upstream says no"))
    with pytest.raises(error_cls) as excinfo:
        GatewayClient("key").complete([])
    assert excinfo.value.status == status


def test_transport_errors_become_gateway_errors(captured):
    captured(requests.ConnectionError("refused"))
    with pytest.raises(GatewayError):
        GatewayClient("key").complete([])


def test_malformed_body(captured):
    captured(FakeResponse(payload=None))
    with pytest.raises(GatewayError):
        GatewayClient("key").complete([])


def test_unexpected_shape_is_empty(captured):
    captured(FakeResponse(payload={"choices": []}))
    assert GatewayClient("key").complete([]) == ""


def test_from_settings_defaults():
    client = GatewayClient.from_settings({"api_key": "k", "base_url": None, "model": None})
    assert client.base_url == "https://ai.gateway.lovable.dev/v1"
    assert client.model == "google/gemini-2.5-flash"
    assert client.timeout is None
