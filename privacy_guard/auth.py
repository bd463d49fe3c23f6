"""
Privacy Guard
Authentication & Authorization Middleware.

Provides:
    - API key authentication via X-API-Key header or ?api_key= query param
    - Role-based access control (RBAC) decorator
    - CSRF protection for state-changing requests (non-GET/HEAD/OPTIONS)

Security model:
    - All /api/v1/* endpoints require a valid API key, except health checks
      and the first-run installer routes listed in PUBLIC_ENDPOINTS
    - Destructive installer endpoints (sample-data removal, reset) require
      the 'admin' role
    - API keys and roles come from the app config / environment

Configuration:
    API_KEYS          — comma-separated list of valid API keys
                        e.g. "key1:admin,key2:viewer"
                        Format: "<key>:<role>" where role is admin|viewer
    API_AUTH_ENABLED  — set to "false" to disable auth (development only)
"""

import functools
import logging
import os
from typing import Optional

from flask import current_app, g, jsonify, request

logger = logging.getLogger(__name__)

# ── Roles ────────────────────────────────────────────────────────────────────

ROLES = {"admin", "viewer"}

# Role hierarchy: admin > viewer
ROLE_HIERARCHY = {
    "admin": {"admin", "viewer"},
    "viewer": {"viewer"},
}

# (method, path) pairs reachable before any API key exists
PUBLIC_ENDPOINTS = {
    ("GET", "/api/v1/install/status"),
    ("POST", "/api/v1/install"),
    ("GET", "/api/v1/install/reference-data"),
}

_FALSY = ("false", "0", "no", "off")


def _parse_api_keys() -> dict[str, str]:
    """
    Parse API_KEYS into {key: role} mapping.

    Format: "key1:admin,key2:viewer"
    Keys without a role default to 'viewer'.
    """
    raw = os.getenv("API_KEYS") or current_app.config.get("API_KEYS", "")
    if not raw.strip():
        return {}

    keys = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if ":" in entry:
            key, role = entry.rsplit(":", 1)
            role = role.strip().lower()
            if role not in ROLES:
                logger.warning("Unknown role '%s' for API key, defaulting to 'viewer'", role)
                role = "viewer"
            keys[key.strip()] = role
        else:
            keys[entry] = "viewer"
    return keys


def _is_auth_enabled() -> bool:
    """Check whether authentication is enabled (env var or app config)."""
    env_val = os.getenv("API_AUTH_ENABLED", "")
    if env_val:
        return env_val.lower() not in _FALSY
    try:
        return str(current_app.config.get("API_AUTH_ENABLED", "true")).lower() not in _FALSY
    except RuntimeError:
        # Outside app context
        return True


def _get_api_key_from_request() -> Optional[str]:
    """Extract API key from request header or query parameter."""
    key = request.headers.get("X-API-Key", "").strip()
    if key:
        return key
    return request.args.get("api_key", "").strip() or None


def _is_public_endpoint() -> bool:
    path = request.path.rstrip("/") or "/"
    if path == "/api/v1/health" or path.startswith("/api/v1/health/"):
        return True
    return (request.method, path) in PUBLIC_ENDPOINTS


# ── Authorization decorator ──────────────────────────────────────────────────

def require_role(minimum_role: str):
    """
    Decorator: require a minimum role level.

    Usage:
        @install_bp.route("/reset", methods=["POST"])
        @require_role("admin")
        def reset(): ...

    Role hierarchy: admin > viewer
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            user_role = getattr(g, "current_user_role", None)
            if not user_role:
                return jsonify({"error": "Authentication required"}), 401

            allowed = ROLE_HIERARCHY.get(user_role, set())
            if minimum_role not in allowed:
                logger.warning(
                    "Access denied: role '%s' tried to access '%s'-level endpoint %s",
                    user_role, minimum_role, request.path,
                )
                return jsonify({"error": "Insufficient permissions"}), 403

            return f(*args, **kwargs)
        return decorated
    return decorator


# ── CSRF protection for API ──────────────────────────────────────────────────

def _check_content_type():
    """
    For state-changing requests (POST/PUT/PATCH/DELETE) with a body, require
    Content-Type: application/json. HTML forms cannot send that content type.
    """
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        ct = request.content_type or ""
        if "application/json" not in ct and request.content_length and request.content_length > 0:
            return jsonify({
                "error": "Content-Type must be application/json for state-changing requests"
            }), 415
    return None


# ── App-level before_request hook installer ──────────────────────────────────

def init_auth(app):
    """
    Install authentication middleware on the Flask app.

    - Attaches a before_request hook for API routes
    - Skips health checks and public installer routes
    """
    @app.before_request
    def _before_request_auth():
        if not request.path.startswith("/api/v1/"):
            return None
        if request.method == "OPTIONS":
            return None

        csrf_error = _check_content_type()
        if csrf_error:
            return csrf_error

        if _is_public_endpoint():
            return None

        if not _is_auth_enabled():
            g.current_user_role = "admin"
            g.api_key = "dev-mode"
            return None

        api_key = _get_api_key_from_request()
        if not api_key:
            return jsonify({"error": "Authentication required. Provide X-API-Key header."}), 401

        api_keys = _parse_api_keys()
        if not api_keys:
            logger.error("API_KEYS is not configured but API_AUTH_ENABLED=true")
            return jsonify({"error": "Server authentication not configured"}), 500

        role = api_keys.get(api_key)
        if role is None:
            logger.warning("Invalid API key attempt: %s...", api_key[:8])
            return jsonify({"error": "Invalid API key"}), 401

        g.current_user_role = role
        g.api_key = api_key
        return None

    with app.app_context():
        logger.info("Auth middleware installed (enabled=%s)", _is_auth_enabled())
