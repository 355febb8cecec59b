import pytest
from jose import jwt

from cardperks import create_app
from cardperks.core.config import DEFAULT_CATALOG_PATH
from cardperks.llm.gateway import GatewayError
from cardperks.services.catalog import load_catalog

JWT_SECRET = "test-secret"


class FakeGateway:
    """Stands in for GatewayClient; replies are consumed in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    @property
    def configured(self):
        return True

    def complete(self, messages, max_tokens=500):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if not self.replies:
            return None
        reply = self.replies.pop(0)
        if isinstance(reply, GatewayError):
            raise reply
        return reply


@pytest.fixture
def catalog():
    return load_catalog(DEFAULT_CATALOG_PATH)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(catalog, gateway):
    app = create_app(
        {
            "TESTING": True,
            "DISABLE_AUTH": False,
            "CATALOG": catalog,
            "LLM_CLIENT": gateway,
            "AUTH_SETTINGS": {"jwt_secret": JWT_SECRET, "audience": "authenticated"},
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(sub="user-123", secret=JWT_SECRET, audience="authenticated"):
    return jwt.encode(
        {"sub": sub, "email": "cardholder@example.com", "aud": audience, "role": "authenticated"},
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
