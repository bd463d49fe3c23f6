"""
Privacy Guard
Blueprint registry.

    health_bp   — /api/v1/health   readiness / liveness probes
    install_bp  — /api/v1/install  first-run installer, status, reset
"""
