"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in privacy_guard/__init__.py with no default
limits; this module applies the limits per blueprint.

Usage:
    from privacy_guard.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

# Installer routes run heavy DDL/seed transactions and are rarely called
INSTALL_RATE_LIMIT = "30/minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Install endpoints: 30/minute
        - Health check:      exempt

    Rate limiting is disabled in testing mode.
    """
    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    bp = app.blueprints.get("install")
    if bp:
        limiter.limit(INSTALL_RATE_LIMIT)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured — install: %s, health: exempt", INSTALL_RATE_LIMIT)
