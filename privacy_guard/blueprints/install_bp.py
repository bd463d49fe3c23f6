"""
Install Wizard Blueprint — first-run setup API.

  GET    /status            → installation status (public)
  POST   ""                 → run the installer (public until installed)
  DELETE /sample-data       → remove demo rows (admin)
  POST   /reset             → clear flag, drop lookup/config tables (admin)
  GET    /reference-data    → one lookup table, ?type=<kind> (public)
"""

import logging

from flask import Blueprint, g, jsonify, request

from privacy_guard.auth import require_role
from privacy_guard.core.exceptions import AlreadyInstalledError, ValidationError
from privacy_guard.models import db
from privacy_guard.services import install_service as svc
from privacy_guard.utils.errors import E, api_error

logger = logging.getLogger(__name__)

install_bp = Blueprint("install", __name__, url_prefix="/api/v1/install")


@install_bp.route("/status", methods=["GET"])
def installation_status():
    """Report what the installer has done so far. Never fails."""
    return jsonify(svc.check_installation_status()), 200


@install_bp.route("", methods=["POST"])
def install():
    """Run the installer.

    Body (optional):
        {"include_sample_data": bool,
         "admin_user": {"email": str, "first_name": str, "last_name": str}}
    """
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data():
            return api_error(E.VALIDATION_INVALID, "Request body is not valid JSON")
        data = {}
    if not isinstance(data, dict):
        return api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")

    include_sample_data = data.get("include_sample_data", False)
    if not isinstance(include_sample_data, bool):
        return api_error(E.VALIDATION_INVALID, "include_sample_data must be a boolean")

    try:
        admin_user = svc.normalize_admin_user(data.get("admin_user"))
        svc.require_not_installed()
    except ValidationError as e:
        return api_error(E.VALIDATION_INVALID, str(e), details=e.details)
    except AlreadyInstalledError as e:
        return api_error(E.CONFLICT_STATE, str(e), details=e.details)

    try:
        result = svc.perform_installation(
            include_sample_data=include_sample_data,
            admin_user=admin_user,
        )
    except Exception as exc:
        # perform_installation already rolled back and logged the traceback
        return api_error(E.DATABASE, "Installation failed", details={"reason": str(exc)})
    return jsonify(result), 200


@install_bp.route("/sample-data", methods=["DELETE"])
@require_role("admin")
def remove_sample_data():
    """Delete every sample row and orphaned sample owner."""
    result = svc.remove_sample_data()
    if not result["success"]:
        return api_error(E.DATABASE, result["message"], details={"removed_count": 0})
    return jsonify(result), 200


@install_bp.route("/reset", methods=["POST"])
@require_role("admin")
def reset():
    """Undo the installation. Operational data is kept."""
    result = svc.reset_installation()
    if not result["success"]:
        return api_error(E.DATABASE, result["message"])
    logger.warning("Installation reset via API (key=%s...)", (getattr(g, "api_key", None) or "")[:8])
    return jsonify(result), 200


@install_bp.route("/reference-data", methods=["GET"])
def reference_data():
    """List one reference table, ordered for display."""
    kind = request.args.get("type", "").strip()
    if not kind:
        return api_error(E.VALIDATION_REQUIRED, "type is required")
    try:
        items = svc.list_reference_data(kind)
    except ValidationError as e:
        return api_error(E.VALIDATION_INVALID, str(e), details=e.details)
    except Exception:
        db.session.rollback()
        logger.error("Reference data lookup failed for %s", kind, exc_info=True)
        return api_error(E.DATABASE, "Reference data unavailable; is the application installed?")
    return jsonify({"type": kind, "items": items, "total": len(items)}), 200
