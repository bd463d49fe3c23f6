"""
Startup diagnostics — runs once when the Flask app starts.

Checks the database and the installation state and logs a summary banner.
"""

import logging
import sys

from flask import Flask
from sqlalchemy import inspect as sa_inspect

from privacy_guard.models import db

logger = logging.getLogger(__name__)


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup (inside app context)."""
    if app.config.get("TESTING"):
        return  # skip during tests for speed

    from privacy_guard.services.install_service import check_installation_status

    issues: list[str] = []

    with app.app_context():
        py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

        # ── Database connectivity ────────────────────────────────────
        db_status = "ok"
        db_uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
        db_type = "PostgreSQL" if "postgresql" in db_uri else "SQLite" if "sqlite" in db_uri else "unknown"
        try:
            db.session.execute(db.text("SELECT 1"))
        except Exception as exc:
            db.session.rollback()
            db_status = "FAILED"
            issues.append(f"Database unreachable: {exc}")

        # ── Table count ──────────────────────────────────────────────
        try:
            table_count = len(sa_inspect(db.engine).get_table_names())
            if table_count == 0:
                issues.append("No tables found — run 'flask db upgrade'")
        except Exception:
            table_count = "?"

        # ── Installation ─────────────────────────────────────────────
        status = check_installation_status()
        if status["is_installed"]:
            install_line = f"installed {status['installation_date'] or ''}".strip()
        else:
            install_line = "NOT INSTALLED"
            issues.append("Application not installed — run 'flask install' or POST /api/v1/install")

        auth_enabled = str(app.config.get("API_AUTH_ENABLED", "false")).lower() == "true"

        banner = f"""
╔══════════════════════════════════════════════════════════════╗
║  Privacy Guard — Startup Diagnostics                         ║
╠══════════════════════════════════════════════════════════════╣
║  Python      : {py:<46s}║
║  Debug       : {str(app.debug):<46s}║
║  Database    : {f'{db_type} ({db_status})':<46s}║
║  Tables      : {str(table_count):<46s}║
║  Install     : {install_line[:46]:<46s}║
║  Sample data : {'present' if status['sample_data_exists'] else 'none':<46s}║
║  Auth        : {'ENABLED' if auth_enabled else 'DISABLED':<46s}║
╚══════════════════════════════════════════════════════════════╝"""
        logger.info(banner)

        if issues:
            logger.warning("Startup issues detected:")
            for issue in issues:
                logger.warning("  ⚠ %s", issue)
        else:
            logger.info("✅ All startup checks passed")
