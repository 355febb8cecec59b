"""Helper utilities used across route modules."""

from typing import Any, Dict, Iterable, Optional

from flask import request
from werkzeug.exceptions import BadRequest, HTTPException

LANGUAGES = ("en", "ta")


class PaymentRequired(HTTPException):
    code = 402
    description = "AI credits exhausted. Please add credits."


def get_json_object() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise BadRequest("request body must be a JSON object")
    return payload


def require_string(
    payload: Dict[str, Any], field: str, max_length: int, min_length: int = 1
) -> str:
    value = payload.get(field)
    if not isinstance(value, str):
        raise BadRequest(f"{field} is required")
    if len(value) < min_length:
        raise BadRequest(f"{field} must be at least {min_length} characters")
    if len(value) > max_length:
        raise BadRequest(f"{field} must be at most {max_length} characters")
    return value


def optional_string(payload: Dict[str, Any], field: str, max_length: int) -> Optional[str]:
    if payload.get(field) is None:
        return None
    return require_string(payload, field, max_length, min_length=0)


def require_choice(
    payload: Dict[str, Any], field: str, choices: Iterable[str], default: Optional[str] = None
) -> str:
    choices = tuple(choices)
    value = payload.get(field)
    if value is None and default is not None:
        return default
    if value not in choices:
        raise BadRequest(f"{field} must be one of: {', '.join(choices)}")
    return value


def parse_language(payload: Dict[str, Any], field: str = "language", default: str = "en") -> str:
    return require_choice(payload, field, LANGUAGES, default=default)
