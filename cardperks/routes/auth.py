"""Authentication hook for routes that reach the AI gateway."""

from flask import Blueprint, current_app, g, request

from cardperks.core import DEV_USER, decode_token


def register_auth_hook(bp: Blueprint) -> None:
    @bp.before_request
    def authenticate_request():
        # Let CORS preflight through
        if request.method == "OPTIONS":
            return ("", 204)

        if current_app.config.get("DISABLE_AUTH"):
            g.current_user = dict(DEV_USER)
            return None

        g.current_user = decode_token(current_app.config["AUTH_SETTINGS"])
        current_app.logger.info("Authenticated user: %s", g.current_user["id"])
        return None
