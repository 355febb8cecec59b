"""Blueprint factories for API routes."""

from flask import Blueprint, jsonify

from .ai import register_ai_routes
from .auth import register_auth_hook
from .cards import register_card_routes


def create_api_blueprint(catalog) -> Blueprint:
    bp = Blueprint("api", __name__, url_prefix="/api")
    register_card_routes(bp, catalog)

    @bp.get("/health")
    def health_check():
        return jsonify({"status": "ok"})

    return bp


def create_ai_blueprint() -> Blueprint:
    bp = Blueprint("ai", __name__, url_prefix="/api")
    register_auth_hook(bp)
    register_ai_routes(bp)
    return bp
