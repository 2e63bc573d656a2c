# backend/fitkeeper/routes/auth_routes.py
import secrets
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, request
from flask_jwt_extended import jwt_required

from ..errors import InternalError, UpstreamAuthError, ValidationError
from ..models.user import PROVIDERS
from ..services.attendance import mark_day_quietly
from ..services.identity import current_user, resolve_user

auth_bp = Blueprint("auth", __name__)


def _frontend_callback(**params) -> str:
    frontend_url = (current_app.config.get("FRONTEND_URL") or "").rstrip("/")
    return f"{frontend_url}/auth/callback?{urlencode(params)}"


def _check_provider(provider: str) -> str:
    provider = (provider or "").lower()
    if provider not in PROVIDERS:
        raise ValidationError(
            f"unsupported provider '{provider}', supported: {', '.join(PROVIDERS)}"
        )
    return provider


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/authenticate", methods=["POST"])
def authenticate():
    """
    Login-or-signup for clients that already hold a provider identity.

    Body: { "provider": "kakao", "provider_id": "123", "email": "...", "name": "..." }
    """
    data = request.get_json(silent=True) or {}

    user, token = resolve_user(
        data.get("provider"),
        data.get("provider_id"),
        email=data.get("email") or None,
        name=data.get("name") or None,
    )
    current_app.logger.info(f"[auth/authenticate] user_id={user.id} provider={user.provider}")

    return jsonify(
        {"success": True, "token": token, "email": user.email, "name": user.name}
    ), 200


@auth_bp.route("/<provider>", methods=["GET"])
def authorize_url(provider):
    provider = _check_provider(provider)
    oauth = current_app.extensions["oauth_client"]
    if not oauth.is_configured(provider):
        raise InternalError(f"{provider} client id is not configured")

    url = oauth.authorize_url(provider, state=secrets.token_urlsafe(16))
    return jsonify({"success": True, "authUrl": url}), 200


@auth_bp.route("/<provider>/callback", methods=["GET"])
def oauth_callback(provider):
    """
    Browser-facing: always answers with a redirect to the web client, carrying
    either the session token or the error.
    """
    try:
        provider = _check_provider(provider)
        if request.args.get("error"):
            raise UpstreamAuthError(f"{provider} login was cancelled or failed")
        code = request.args.get("code")
        if not code:
            raise UpstreamAuthError("authorization code is missing")

        oauth = current_app.extensions["oauth_client"]
        profile = oauth.login(provider, code, state=request.args.get("state"))
        user, token = resolve_user(
            profile.provider, profile.provider_id, email=profile.email, name=profile.name
        )
    except (UpstreamAuthError, ValidationError) as e:
        current_app.logger.warning(f"[auth/{provider}/callback] login failed: {e.message}")
        return redirect(_frontend_callback(success="false", error=e.message))

    mark_day_quietly(user.id, "attendance")
    current_app.logger.info(f"[auth/{provider}/callback] user_id={user.id}")

    return redirect(
        _frontend_callback(
            token=token,
            success="true",
            email=user.email or "",
            name=user.name or "",
        )
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify({"success": True, "user": current_user().to_dict()}), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    # tokens are stateless; the client drops its copy
    return jsonify({"success": True, "message": "Logged out"}), 200
