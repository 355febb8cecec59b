"""Bearer token verification against the Supabase identity service."""

from typing import Any, Dict

import requests
from flask import request
from jose import jwt
from jose.exceptions import JWTError
from werkzeug.exceptions import Unauthorized

DEV_USER: Dict[str, Any] = {
    "id": "dev-local",
    "email": "dev@local",
    "role": "authenticated",
}


def get_bearer_token() -> str:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header:
        raise Unauthorized("Unauthorized - Missing authorization header")
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized("Authorization header must start with Bearer")
    return parts[1]


def verify_local_token(token: str, settings: Dict[str, Any]) -> Dict[str, Any]:
    try:
        claims = jwt.decode(
            token,
            settings["jwt_secret"],
            algorithms=["HS256"],
            audience=settings.get("audience") or "authenticated",
        )
    except JWTError as exc:
        raise Unauthorized(f"Unauthorized - Invalid or expired token: {exc}")
    if not claims.get("sub"):
        raise Unauthorized("Unauthorized - Token missing subject")
    return {"id": claims["sub"], "email": claims.get("email"), "role": claims.get("role")}


def fetch_remote_user(token: str, settings: Dict[str, Any]) -> Dict[str, Any]:
    headers = {"Authorization": f"Bearer {token}"}
    if settings.get("anon_key"):
        headers["apikey"] = settings["anon_key"]
    try:
        response = requests.get(settings["user_url"], headers=headers, timeout=5)
    except requests.RequestException as exc:
        raise Unauthorized(f"Unauthorized - Identity service unavailable: {exc}")
    if response.status_code != 200:
        raise Unauthorized("Unauthorized - Invalid or expired token")
    try:
        user = response.json()
    except ValueError:
        raise Unauthorized("Unauthorized - Invalid identity response")
    if not isinstance(user, dict) or not user.get("id"):
        raise Unauthorized("Unauthorized - Invalid or expired token")
    return {"id": user["id"], "email": user.get("email"), "role": user.get("role")}


def decode_token(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Return the caller identity for the current request or raise Unauthorized."""
    token = get_bearer_token()
    if settings.get("jwt_secret"):
        return verify_local_token(token, settings)
    return fetch_remote_user(token, settings)
