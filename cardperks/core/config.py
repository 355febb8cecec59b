"""Configuration helpers for the Flask application."""

import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


def load_environment() -> None:
    """Load environment variables from a .env file when available."""
    load_dotenv()


def env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def get_auth_settings() -> Dict[str, Optional[str]]:
    """Return Supabase auth configuration derived from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    anon_key = os.environ.get("SUPABASE_ANON_KEY")
    jwt_secret = os.environ.get("SUPABASE_JWT_SECRET") or None
    if not jwt_secret and (not url or not anon_key):
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_ANON_KEY (or SUPABASE_JWT_SECRET) must be set"
        )
    url = url.rstrip("/") if url else None
    return {
        "url": url,
        "anon_key": anon_key,
        "jwt_secret": jwt_secret,
        "audience": os.environ.get("SUPABASE_JWT_AUDIENCE", "authenticated"),
        "user_url": f"{url}/auth/v1/user" if url else None,
    }


def get_gateway_settings() -> Dict[str, object]:
    """Return chat-completion gateway settings.

    A missing API key is not an error: every AI endpoint has a local
    fallback, so the service still answers without one.
    """
    timeout_raw = os.environ.get("LLM_TIMEOUT")
    timeout: Optional[float] = None
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise RuntimeError("LLM_TIMEOUT must be a number of seconds")
    return {
        "api_key": os.environ.get("LLM_API_KEY") or os.environ.get("LOVABLE_API_KEY"),
        "base_url": os.environ.get("LLM_BASE_URL", "https://ai.gateway.lovable.dev/v1"),
        "model": os.environ.get("LLM_MODEL", "google/gemini-2.5-flash"),
        "timeout": timeout,
    }


def get_catalog_path() -> Path:
    raw = os.environ.get("CATALOG_PATH")
    return Path(raw) if raw else DEFAULT_CATALOG_PATH
