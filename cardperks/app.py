import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException, NotFound, TooManyRequests, Unauthorized

from cardperks.core import (
    get_auth_settings,
    get_catalog_path,
    get_gateway_settings,
    load_environment,
)
from cardperks.core.config import env_flag
from cardperks.llm.gateway import GatewayClient
from cardperks.routes import create_ai_blueprint, create_api_blueprint
from cardperks.routes.helpers import PaymentRequired
from cardperks.services.catalog import load_catalog

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    load_environment()
    overrides = dict(overrides or {})
    app = Flask(__name__)

    # Local dev switch (set DISABLE_AUTH=1 in your .env)
    disable_auth = overrides.pop("DISABLE_AUTH", None)
    if disable_auth is None:
        disable_auth = env_flag("DISABLE_AUTH")

    # Only load Supabase settings if we actually need them
    auth_settings = overrides.pop("AUTH_SETTINGS", None)
    if auth_settings is None and not disable_auth:
        auth_settings = get_auth_settings()

    catalog = overrides.pop("CATALOG", None)
    if catalog is None:
        catalog = load_catalog(get_catalog_path())

    llm_client = overrides.pop("LLM_CLIENT", None)
    if llm_client is None:
        llm_client = GatewayClient.from_settings(get_gateway_settings())

    allowed_origin = os.environ.get("CLIENT_ORIGIN", "*").rstrip("/")
    CORS(
        app,
        resources={r"/api/*": {"origins": allowed_origin or "*"}},
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=["Content-Type"],
    )

    app.config.update(
        AUTH_SETTINGS=auth_settings,
        DISABLE_AUTH=bool(disable_auth),
        CATALOG=catalog,
        LLM_CLIENT=llm_client,
    )
    app.config.update(overrides)

    app.register_blueprint(create_api_blueprint(catalog))
    app.register_blueprint(create_ai_blueprint())

    @app.errorhandler(BadRequest)
    def handle_bad_request(error):
        response = jsonify({"error": "Invalid input", "details": error.description})
        response.status_code = 400
        return response

    @app.errorhandler(Unauthorized)
    def handle_unauthorized(error):
        response = jsonify({"error": error.description})
        response.status_code = 401
        return response

    @app.errorhandler(PaymentRequired)
    def handle_payment_required(error):
        response = jsonify({"error": error.description})
        response.status_code = 402
        return response

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        response = jsonify({"error": error.description})
        response.status_code = 404
        return response

    @app.errorhandler(TooManyRequests)
    def handle_rate_limited(error):
        response = jsonify({"error": error.description})
        response.status_code = 429
        return response

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            response = jsonify({"error": error.description})
            response.status_code = error.code or 500
            return response
        app.logger.exception("Unhandled error: %s", error)
        response = jsonify({"error": "An error occurred processing your request"})
        response.status_code = 500
        return response

    return app


if __name__ == "__main__":
    # Create and run the Flask app directly (use Flask CLI in production)
    app = create_app()
    port = int(os.environ.get("PORT", "8000"))
    debug = env_flag("FLASK_DEBUG", "1")
    app.run(host="0.0.0.0", port=port, debug=debug)
