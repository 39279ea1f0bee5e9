# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/spm/routes/auth.py
"""
Authentication API routes

Replaces the browser-stored role flag: the role now travels with a
server-issued bearer token and is checked per endpoint.
"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth
from ..services import auth_service, session_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Returns user info and session token on success.
    Token must be included in Authorization header for protected routes.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "username y password son requeridos"}), 400

    user = auth_service.authenticate(username.strip(), password)
    if not user:
        current_app.logger.warning("Failed login for username=%r from %s", username, request.remote_addr)
        return jsonify({"error": "Credenciales inválidas"}), 401

    session, token = session_service.create_session(user.id)
    current_app.logger.info("Login: user=%s rol=%s", user.username, user.rol)

    return jsonify({
        "token": token,
        "expires_at": session.to_dict()["expires_at"],
        "user": user.to_dict(),
    }), 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the calling session."""
    session_service.revoke_session(g.token)
    return jsonify({"success": True}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user (role included) for the client to render its menu."""
    return jsonify({"user": g.current_user.to_dict()}), 200
