"""Core utilities for the cardperks server."""

from .config import (
    get_auth_settings,
    get_catalog_path,
    get_gateway_settings,
    load_environment,
)
from .security import DEV_USER, decode_token

__all__ = [
    "load_environment",
    "get_auth_settings",
    "get_catalog_path",
    "get_gateway_settings",
    "DEV_USER",
    "decode_token",
]
