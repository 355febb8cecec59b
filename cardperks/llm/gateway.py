"""
Chat-completion client for the hosted AI gateway.

The gateway speaks the OpenAI chat-completions dialect:

    POST {base_url}/chat/completions
    {"model": ..., "messages": [...], "max_tokens": ...}

`complete()` returns the first choice's text, or None when no API key is
configured. Upstream failures raise a GatewayError subclass so callers can
tell "try later" (429), "out of credits" (402) and everything else apart.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RateLimitedError(GatewayError):
    pass


class CreditsExhaustedError(GatewayError):
    pass


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


class GatewayClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://ai.gateway.lovable.dev/v1",
        model: str = "google/gemini-2.5-flash",
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "GatewayClient":
        return cls(
            api_key=settings.get("api_key"),
            base_url=settings.get("base_url") or "https://ai.gateway.lovable.dev/v1",
            model=settings.get("model") or "google/gemini-2.5-flash",
            timeout=settings.get("timeout"),
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def complete(self, messages: List[Dict[str, str]], max_tokens: int = 500) -> Optional[str]:
        if not self.api_key:
            logger.warning("LLM API key is not configured")
            return None

        payload = {"model": self.model, "messages": messages, "max_tokens": max_tokens}
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            r = requests.post(self._endpoint(), json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("AI gateway request failed: %s", exc)
            raise GatewayError(f"gateway request failed: {exc}") from exc

        if r.status_code == 429:
            logger.error("AI gateway rate limited: %s", r.text[:500])
            raise RateLimitedError("Rate limit exceeded. Please try again later.", status=429)
        if r.status_code == 402:
            logger.error("AI gateway credits exhausted: %s", r.text[:500])
            raise CreditsExhaustedError("AI credits exhausted. Please add credits.", status=402)
        if not r.ok:
            logger.error("AI gateway error: %s %s", r.status_code, r.text[:500])
            raise GatewayError(f"gateway returned {r.status_code}", status=r.status_code)

        try:
            data = r.json()
        except ValueError as exc:
            raise GatewayError("gateway returned a non-JSON body", status=r.status_code) from exc
        return _extract_content(data).strip()
